"""Production process runner using subprocess."""

import logging
import os
import shutil
import subprocess
from pathlib import Path

from skillsync.gateway.process.abc import ProcessRunner
from skillsync.gateway.process.types import RunFailure, RunSuccess

logger = logging.getLogger(__name__)


def copied_env_for_subprocess() -> dict[str, str]:
    """Copy the current environment with interactive git prompts disabled."""
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


class RealProcessRunner(ProcessRunner):
    """Production implementation using subprocess.run with bounded timeouts."""

    def is_available(self, program: str) -> bool:
        return shutil.which(program) is not None

    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | None,
        timeout: float,
    ) -> RunSuccess | RunFailure:
        # LBYL: a missing binary is an expected state, not an exception
        if not cmd or shutil.which(cmd[0]) is None:
            return RunFailure(cmd=tuple(cmd), exit_code=None, stderr="", reason="command-not-found")

        logger.debug("Running %s (cwd=%s, timeout=%ss)", " ".join(cmd), cwd, timeout)
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
                env=copied_env_for_subprocess(),
            )
        except subprocess.TimeoutExpired:
            logger.debug("Timed out after %ss: %s", timeout, " ".join(cmd))
            return RunFailure(cmd=tuple(cmd), exit_code=None, stderr="", reason="timed-out")
        except FileNotFoundError:
            # Binary vanished between which() and exec
            return RunFailure(cmd=tuple(cmd), exit_code=None, stderr="", reason="command-not-found")

        if result.returncode != 0:
            return RunFailure(
                cmd=tuple(cmd),
                exit_code=result.returncode,
                stderr=result.stderr,
                reason="non-zero-exit",
            )
        return RunSuccess(stdout=result.stdout, stderr=result.stderr)
