"""Fake git operations for testing."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from skillsync.gateway.git.abc import Git
from skillsync.gateway.process.types import RunFailure, RunSuccess


@dataclass(frozen=True)
class CheckoutCall:
    repo_root: Path
    ref: str
    force: bool


class FakeGit(Git):
    """In-memory fake implementation of Git.

    Constructor Injection:
    ---------------------
    - tags: Tag names every clone reports
    - current_ref: Ref the clone starts on
    - failing_checkouts: Refs whose plain checkout fails
    - failing_force_checkouts: Refs whose forced checkout also fails
    - tag_listing_fails: list_tags() returns RunFailure
    - network_fails: fetch_tags() and pull_ff_only() return RunFailure

    Mutation Tracking:
    -----------------
    - checkout_calls: Every checkout attempted, in order
    - current_ref: The ref the clone ended up on
    - fetched / pulled: Repos fetched or pulled
    """

    def __init__(
        self,
        *,
        tags: list[str] | None = None,
        current_ref: str = "main",
        failing_checkouts: set[str] | None = None,
        failing_force_checkouts: set[str] | None = None,
        tag_listing_fails: bool = False,
        network_fails: bool = False,
    ) -> None:
        self._tags = tags if tags is not None else []
        self._current_ref = current_ref
        self._failing_checkouts = failing_checkouts if failing_checkouts is not None else set()
        self._failing_force_checkouts = (
            failing_force_checkouts if failing_force_checkouts is not None else set()
        )
        self._tag_listing_fails = tag_listing_fails
        self._network_fails = network_fails

        self._checkout_calls: list[CheckoutCall] = []
        self._fetched: list[Path] = []
        self._pulled: list[Path] = []

    # ============================================================================
    # Query Operations
    # ============================================================================

    def list_tags(self, repo_root: Path) -> list[str] | RunFailure:
        if self._tag_listing_fails:
            return _failure(("git", "tag", "-l"), "fatal: not a git repository")
        return list(self._tags)

    # ============================================================================
    # Mutation Operations
    # ============================================================================

    def checkout(self, repo_root: Path, ref: str, *, force: bool) -> RunSuccess | RunFailure:
        self._checkout_calls.append(CheckoutCall(repo_root=repo_root, ref=ref, force=force))
        failing = self._failing_force_checkouts if force else self._failing_checkouts
        if ref in failing:
            return _failure(("git", "checkout", ref), f"error: pathspec '{ref}' did not match")
        self._current_ref = ref
        return RunSuccess(stdout="", stderr="")

    def fetch_tags(self, repo_root: Path) -> RunSuccess | RunFailure:
        if self._network_fails:
            return _failure(("git", "fetch", "--tags"), "fatal: unable to access remote")
        self._fetched.append(repo_root)
        return RunSuccess(stdout="", stderr="")

    def pull_ff_only(self, repo_root: Path) -> RunSuccess | RunFailure:
        if self._network_fails:
            return _failure(("git", "pull", "--ff-only"), "fatal: unable to access remote")
        self._pulled.append(repo_root)
        return RunSuccess(stdout="", stderr="")

    # ============================================================================
    # Mutation Tracking Properties
    # ============================================================================

    @property
    def checkout_calls(self) -> list[CheckoutCall]:
        return list(self._checkout_calls)

    @property
    def current_ref(self) -> str:
        return self._current_ref

    @property
    def fetched(self) -> list[Path]:
        return list(self._fetched)

    @property
    def pulled(self) -> list[Path]:
        return list(self._pulled)


def _failure(cmd: tuple[str, ...], stderr: str) -> RunFailure:
    return RunFailure(cmd=cmd, exit_code=1, stderr=stderr, reason="non-zero-exit")
