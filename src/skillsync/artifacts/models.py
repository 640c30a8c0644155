"""Data models for artifact synchronization."""

import re
from dataclasses import dataclass, field
from typing import Literal

UpdateStatus = Literal["updated", "added", "unchanged", "skipped", "removed", "error"]

DeployedRuleStatus = Literal["deployed", "updated", "unchanged", "removed", "error"]

HooksStatus = Literal["updated", "skipped", "error", "not-applicable"]

# User-owned subdirectory inside a skill; never overwritten or compared
OVERRIDE_DIR_NAME = "project"

_SAFE_NAME = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$")


def is_valid_artifact_name(name: str) -> bool:
    """Check a skill name against the safe-name pattern.

    Accepts lowercase alphanumerics and inner hyphens ("managing-agents").
    Rejects dots, slashes, underscores, spaces, uppercase and the empty string,
    so a name can never escape its parent directory.
    """
    return _SAFE_NAME.fullmatch(name) is not None


@dataclass(frozen=True)
class UpdateItem:
    """Result of reconciling one artifact.

    skipped and error items always carry a reason.
    """

    name: str
    status: UpdateStatus
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.status in ("skipped", "error") and not self.reason:
            raise ValueError(f"UpdateItem '{self.name}' with status {self.status} needs a reason")

    def to_dict(self) -> dict[str, str]:
        data = {"name": self.name, "status": self.status}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class DeployedRuleItem:
    """Result of deploying (or cleaning) one rule file in the project."""

    name: str
    status: DeployedRuleStatus
    reason: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"name": self.name, "status": self.status}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class UpdateResult:
    """Everything the update operation did (or would do, under dry-run)."""

    skills: list[UpdateItem]
    rules: list[UpdateItem]
    deployed_rules: list[DeployedRuleItem]
    version: str
    plugin_version: str
    dry_run: bool
    hooks_status: HooksStatus = "not-applicable"

    @property
    def error_count(self) -> int:
        items = [*self.skills, *self.rules, *self.deployed_rules]
        errors = sum(1 for item in items if item.status == "error")
        if self.hooks_status == "error":
            errors += 1
        return errors

    def to_dict(self) -> dict[str, object]:
        """Serialize with the key names the presentation layer consumes."""
        return {
            "skills": [item.to_dict() for item in self.skills],
            "rules": [item.to_dict() for item in self.rules],
            "deployedRules": [item.to_dict() for item in self.deployed_rules],
            "version": self.version,
            "pluginVersion": self.plugin_version,
            "dryRun": self.dry_run,
            "hooksStatus": self.hooks_status,
        }


@dataclass(frozen=True)
class SyncPlan:
    """Set difference between installed and reference artifact names."""

    newly_available: list[str]
    obsolete: list[str]


@dataclass(frozen=True)
class DeployResult:
    """Result of deploying rules into the project's rules directory."""

    deployed: list[DeployedRuleItem]
    target_dir: str
    # .md files in the target that no bundled rule accounts for
    unmanaged_files: list[str] = field(default_factory=list)
