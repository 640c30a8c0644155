"""Tests for RealGit command construction."""

from pathlib import Path

from skillsync.gateway.git.real import RealGit
from skillsync.gateway.process.fake import FakeProcessRunner
from skillsync.gateway.process.types import RunFailure, RunSuccess


def test_list_tags_parses_lines(tmp_path: Path) -> None:
    runner = FakeProcessRunner(responses={("git", "tag", "-l"): "v0.1.0\n\n  v0.2.0-beta.1 \n"})

    assert RealGit(runner).list_tags(tmp_path) == ["v0.1.0", "v0.2.0-beta.1"]
    assert runner.calls[0].cwd == tmp_path


def test_list_tags_failure(tmp_path: Path) -> None:
    runner = FakeProcessRunner(failures={("git", "tag"): (128, "fatal: not a git repository")})
    assert isinstance(RealGit(runner).list_tags(tmp_path), RunFailure)


def test_checkout_commands(tmp_path: Path) -> None:
    runner = FakeProcessRunner()
    git = RealGit(runner)

    assert isinstance(git.checkout(tmp_path, "v1.0.0", force=False), RunSuccess)
    git.checkout(tmp_path, "main", force=True)

    assert runner.commands == [("git", "checkout", "v1.0.0"), ("git", "checkout", "-f", "main")]


def test_network_commands_use_longer_timeout(tmp_path: Path) -> None:
    runner = FakeProcessRunner()
    git = RealGit(runner)

    git.fetch_tags(tmp_path)
    git.pull_ff_only(tmp_path)
    git.list_tags(tmp_path)

    assert runner.commands[:2] == [("git", "fetch", "--tags"), ("git", "pull", "--ff-only")]
    assert runner.calls[0].timeout > runner.calls[2].timeout
