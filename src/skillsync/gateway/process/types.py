"""Discriminated union types for external process invocations.

RunSuccess | RunFailure follow the NonIdealState pattern: callers branch on
isinstance() instead of catching CalledProcessError for the common
"tool said no" signal.
"""

from dataclasses import dataclass
from typing import Literal

RunFailureType = Literal["command-not-found", "timed-out", "non-zero-exit"]


@dataclass(frozen=True)
class RunSuccess:
    """Success result from running an external command."""

    stdout: str
    stderr: str


@dataclass(frozen=True)
class RunFailure:
    """Error result from running an external command. Implements NonIdealState.

    exit_code is None when the process never produced one (missing binary or
    timeout).
    """

    cmd: tuple[str, ...]
    exit_code: int | None
    stderr: str
    reason: RunFailureType

    @property
    def message(self) -> str:
        """Human-readable description, preferring the tool's own stderr."""
        if self.stderr.strip():
            return self.stderr.strip()
        program = self.cmd[0] if self.cmd else "<empty>"
        if self.reason == "command-not-found":
            return f"{program} not found in PATH"
        if self.reason == "timed-out":
            return f"{program} timed out"
        return f"{' '.join(self.cmd)} exited with code {self.exit_code}"
