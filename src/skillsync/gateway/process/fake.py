"""Fake process runner for testing."""

from dataclasses import dataclass
from pathlib import Path

from skillsync.gateway.process.abc import ProcessRunner
from skillsync.gateway.process.types import RunFailure, RunSuccess


@dataclass(frozen=True)
class RunCall:
    cmd: tuple[str, ...]
    cwd: Path | None
    timeout: float


class FakeProcessRunner(ProcessRunner):
    """In-memory fake that replays scripted responses.

    Constructor Injection:
    ---------------------
    - responses: Maps a command prefix (tuple) to the stdout it returns
    - failures: Maps a command prefix to (exit_code, stderr) for a non-zero exit
    - missing_programs: Programs reported as absent from PATH
    - timeouts: Command prefixes that time out

    The longest matching prefix wins. Unmatched commands succeed with empty output.
    """

    def __init__(
        self,
        *,
        responses: dict[tuple[str, ...], str] | None = None,
        failures: dict[tuple[str, ...], tuple[int, str]] | None = None,
        missing_programs: set[str] | None = None,
        timeouts: set[tuple[str, ...]] | None = None,
    ) -> None:
        self._responses = responses if responses is not None else {}
        self._failures = failures if failures is not None else {}
        self._missing_programs = missing_programs if missing_programs is not None else set()
        self._timeouts = timeouts if timeouts is not None else set()
        self._calls: list[RunCall] = []

    def is_available(self, program: str) -> bool:
        return program not in self._missing_programs

    def run(
        self,
        cmd: list[str],
        *,
        cwd: Path | None,
        timeout: float,
    ) -> RunSuccess | RunFailure:
        key = tuple(cmd)
        self._calls.append(RunCall(cmd=key, cwd=cwd, timeout=timeout))

        if not cmd or cmd[0] in self._missing_programs:
            return RunFailure(cmd=key, exit_code=None, stderr="", reason="command-not-found")

        if _longest_prefix(key, self._timeouts) is not None:
            return RunFailure(cmd=key, exit_code=None, stderr="", reason="timed-out")

        failure_prefix = _longest_prefix(key, set(self._failures))
        response_prefix = _longest_prefix(key, set(self._responses))
        if failure_prefix is not None and (
            response_prefix is None or len(failure_prefix) >= len(response_prefix)
        ):
            exit_code, stderr = self._failures[failure_prefix]
            return RunFailure(cmd=key, exit_code=exit_code, stderr=stderr, reason="non-zero-exit")

        if response_prefix is not None:
            return RunSuccess(stdout=self._responses[response_prefix], stderr="")
        return RunSuccess(stdout="", stderr="")

    @property
    def calls(self) -> list[RunCall]:
        return list(self._calls)

    @property
    def commands(self) -> list[tuple[str, ...]]:
        """Commands run during the test, in order. For test assertions only."""
        return [call.cmd for call in self._calls]


def _longest_prefix(
    cmd: tuple[str, ...], prefixes: set[tuple[str, ...]]
) -> tuple[str, ...] | None:
    matches = [prefix for prefix in prefixes if cmd[: len(prefix)] == prefix]
    if not matches:
        return None
    return max(matches, key=len)
