import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from skillsync.artifacts.cache import DEFAULT_KEEP_VERSIONS
from skillsync.artifacts.pin import DEFAULT_BRANCH
from skillsync.artifacts.versions import Channel

DEFAULT_MARKETPLACE_NAME = "shirokuma-library"
DEFAULT_MARKETPLACE_REPO = "ShirokumaLibrary/shirokuma-plugins"

HOST_CONFIG_ENV = "CLAUDE_CONFIG_DIR"
NO_HOST_CLI_ENV = "SKILLSYNC_NO_CLAUDE_CLI"


class ConfigError(ValueError):
    """Raised when `.skillsync/config.toml` holds an invalid value."""


@dataclass(frozen=True)
class SyncConfig:
    """In-memory representation of `.skillsync/config.toml`.

    Example config.toml:
      [marketplace]
      name = "shirokuma-library"
      repo = "ShirokumaLibrary/shirokuma-plugins"
      default_branch = "main"

      [update]
      # One of alpha, beta, rc, stable (omit to install the latest)
      channel = "beta"
      keep_versions = 3
    """

    marketplace_name: str
    marketplace_repo: str
    default_branch: str
    channel: Channel | None
    keep_versions: int


def default_config() -> SyncConfig:
    return SyncConfig(
        marketplace_name=DEFAULT_MARKETPLACE_NAME,
        marketplace_repo=DEFAULT_MARKETPLACE_REPO,
        default_branch=DEFAULT_BRANCH,
        channel=None,
        keep_versions=DEFAULT_KEEP_VERSIONS,
    )


def load_config(project_dir: Path) -> SyncConfig:
    """Load `.skillsync/config.toml` from project_dir if present; otherwise return defaults.

    Raises:
        ConfigError: If the file is not valid TOML or a value is invalid
    """
    cfg_path = project_dir / ".skillsync" / "config.toml"
    if not cfg_path.exists():
        return default_config()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{cfg_path}: {e}") from e

    defaults = default_config()
    marketplace = data.get("marketplace", {})
    update = data.get("update", {})

    channel: Channel | None = None
    channel_value = update.get("channel")
    if channel_value is not None:
        try:
            channel = Channel.parse(str(channel_value))
        except ValueError as e:
            raise ConfigError(f"{cfg_path}: {e}") from e

    keep_versions = update.get("keep_versions", defaults.keep_versions)
    if not isinstance(keep_versions, int) or isinstance(keep_versions, bool) or keep_versions < 1:
        raise ConfigError(f"{cfg_path}: keep_versions must be a positive integer")

    return SyncConfig(
        marketplace_name=str(marketplace.get("name", defaults.marketplace_name)),
        marketplace_repo=str(marketplace.get("repo", defaults.marketplace_repo)),
        default_branch=str(marketplace.get("default_branch", defaults.default_branch)),
        channel=channel,
        keep_versions=keep_versions,
    )


def host_config_root() -> Path:
    """Plugin host configuration root: $CLAUDE_CONFIG_DIR or ~/.claude."""
    override = os.environ.get(HOST_CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".claude"


def host_cli_disabled() -> bool:
    """Whether $SKILLSYNC_NO_CLAUDE_CLI turns off every plugin host call."""
    return bool(os.environ.get(NO_HOST_CLI_ENV))
