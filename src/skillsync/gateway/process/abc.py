"""Abstract base class for running external command-line tools."""

from abc import ABC, abstractmethod
from pathlib import Path

from skillsync.gateway.process.types import RunFailure, RunSuccess


class ProcessRunner(ABC):
    """Abstract interface for blocking subprocess invocations.

    All implementations (real, fake) must implement this interface.
    Implementations never raise for process-level failures; they return
    RunFailure instead.
    """

    @abstractmethod
    def is_available(self, program: str) -> bool:
        """Check whether a program can be found in PATH.

        Args:
            program: Executable name (e.g., 'git', 'claude')
        """
        ...

    @abstractmethod
    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | None,
        timeout: float,
    ) -> RunSuccess | RunFailure:
        """Run a command to completion and capture its output.

        Args:
            cmd: Command and arguments
            cwd: Working directory, or None for the current directory
            timeout: Seconds before the call is abandoned and reported as timed-out

        Returns:
            RunSuccess with captured output, or RunFailure describing why it failed
        """
        ...
