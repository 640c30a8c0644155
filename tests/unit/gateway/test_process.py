"""Tests for the process runner gateway and its result types."""

import sys
from pathlib import Path

from skillsync.gateway.process.fake import FakeProcessRunner
from skillsync.gateway.process.real import RealProcessRunner, copied_env_for_subprocess
from skillsync.gateway.process.types import RunFailure, RunSuccess


def test_run_failure_message_prefers_stderr() -> None:
    failure = RunFailure(
        cmd=("git", "pull"), exit_code=1, stderr="  fatal: nope\n", reason="non-zero-exit"
    )
    assert failure.message == "fatal: nope"


def test_run_failure_message_without_stderr() -> None:
    missing = RunFailure(("claude",), None, "", "command-not-found")
    timed_out = RunFailure(("git", "fetch"), None, "", "timed-out")
    exited = RunFailure(("uv", "tool"), 2, "", "non-zero-exit")

    assert missing.message == "claude not found in PATH"
    assert timed_out.message == "git timed out"
    assert exited.message == "uv tool exited with code 2"


def test_fake_runner_longest_prefix_wins() -> None:
    runner = FakeProcessRunner(
        responses={("git",): "generic", ("git", "tag"): "v1.0.0\n"},
        failures={("git", "tag", "-d"): (1, "cannot delete")},
    )

    assert runner.run(["git", "tag", "-l"], cwd=None, timeout=1) == RunSuccess("v1.0.0\n", "")
    assert runner.run(["git", "status"], cwd=None, timeout=1) == RunSuccess("generic", "")
    deleted = runner.run(["git", "tag", "-d", "v1"], cwd=None, timeout=1)
    assert isinstance(deleted, RunFailure)
    assert deleted.exit_code == 1


def test_fake_runner_missing_program_and_timeout(tmp_path: Path) -> None:
    runner = FakeProcessRunner(missing_programs={"claude"}, timeouts={("git", "fetch")})

    missing = runner.run(["claude", "--version"], cwd=None, timeout=5)
    timed_out = runner.run(["git", "fetch", "--tags"], cwd=tmp_path, timeout=60)

    assert isinstance(missing, RunFailure) and missing.reason == "command-not-found"
    assert isinstance(timed_out, RunFailure) and timed_out.reason == "timed-out"
    assert runner.is_available("claude") is False
    assert runner.calls[1].cwd == tmp_path


def test_real_runner_missing_binary() -> None:
    result = RealProcessRunner().run(["skillsync-no-such-binary"], cwd=None, timeout=5)
    assert isinstance(result, RunFailure)
    assert result.reason == "command-not-found"
    assert result.exit_code is None


def test_real_runner_captures_output_and_exit_code(tmp_path: Path) -> None:
    runner = RealProcessRunner()

    ok = runner.run([sys.executable, "-c", "print('hi')"], cwd=tmp_path, timeout=30)
    failed = runner.run(
        [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"],
        cwd=tmp_path,
        timeout=30,
    )

    assert isinstance(ok, RunSuccess) and ok.stdout.strip() == "hi"
    assert isinstance(failed, RunFailure)
    assert (failed.exit_code, failed.stderr, failed.reason) == (3, "bad", "non-zero-exit")


def test_real_runner_timeout(tmp_path: Path) -> None:
    result = RealProcessRunner().run(
        [sys.executable, "-c", "import time; time.sleep(5)"], cwd=tmp_path, timeout=0.2
    )
    assert isinstance(result, RunFailure)
    assert result.reason == "timed-out"


def test_copied_env_disables_git_prompts() -> None:
    assert copied_env_for_subprocess()["GIT_TERMINAL_PROMPT"] == "0"
