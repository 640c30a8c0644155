"""Production git operations built on the process runner."""

from pathlib import Path

from skillsync.gateway.git.abc import Git
from skillsync.gateway.process.abc import ProcessRunner
from skillsync.gateway.process.types import RunFailure, RunSuccess

_GIT_LOCAL_TIMEOUT = 15
_GIT_NETWORK_TIMEOUT = 60


class RealGit(Git):
    """Production implementation that shells out to the git CLI."""

    def __init__(self, runner: ProcessRunner) -> None:
        self._runner = runner

    def list_tags(self, repo_root: Path) -> list[str] | RunFailure:
        result = self._runner.run(["git", "tag", "-l"], cwd=repo_root, timeout=_GIT_LOCAL_TIMEOUT)
        if isinstance(result, RunFailure):
            return result
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def checkout(self, repo_root: Path, ref: str, *, force: bool) -> RunSuccess | RunFailure:
        cmd = ["git", "checkout"]
        if force:
            cmd.append("-f")
        cmd.append(ref)
        return self._runner.run(cmd, cwd=repo_root, timeout=_GIT_LOCAL_TIMEOUT)

    def fetch_tags(self, repo_root: Path) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["git", "fetch", "--tags"], cwd=repo_root, timeout=_GIT_NETWORK_TIMEOUT
        )

    def pull_ff_only(self, repo_root: Path) -> RunSuccess | RunFailure:
        return self._runner.run(
            ["git", "pull", "--ff-only"], cwd=repo_root, timeout=_GIT_NETWORK_TIMEOUT
        )
