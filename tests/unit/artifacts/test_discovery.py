"""Tests for on-disk discovery of skills, rules and versions."""

import json
from pathlib import Path

import pytest

from skillsync.artifacts.cache import CacheStore
from skillsync.artifacts.discovery import (
    UNKNOWN_VERSION,
    has_version_mismatch,
    is_self_repo,
    list_rule_names,
    list_skill_names,
    read_language_setting,
    read_plugin_version,
    resolve_plugin_version,
)
from skillsync.artifacts.plugins import LanguageVariant
from tests.test_utils.plugin_tree import make_plugin, write_files


def test_list_skill_names_sorted_and_validated(tmp_path: Path) -> None:
    plugin = make_plugin(
        tmp_path / "plugin",
        skills={"zeta": {"SKILL.md": ""}, "alpha": {"SKILL.md": ""}, "Bad_Name": {"SKILL.md": ""}},
    )
    (plugin / "skills" / "README.md").write_text("not a skill", encoding="utf-8")

    assert list_skill_names(plugin) == ["alpha", "zeta"]


def test_list_skill_names_without_skills_dir(tmp_path: Path) -> None:
    assert list_skill_names(tmp_path) == []


def test_list_rule_names_recurses(tmp_path: Path) -> None:
    plugin = make_plugin(
        tmp_path / "plugin",
        rules={"style.md": "", "github/pr.md": "", "a/b/c/deep.md": "", "notes.txt": ""},
    )
    assert list_rule_names(plugin) == ["a/b/c/deep.md", "github/pr.md", "style.md"]


def test_read_plugin_version(tmp_path: Path) -> None:
    assert read_plugin_version(make_plugin(tmp_path / "ok", version="1.2.3")) == "1.2.3"
    assert read_plugin_version(tmp_path / "missing") is None

    broken = tmp_path / "broken" / ".claude-plugin" / "plugin.json"
    broken.parent.mkdir(parents=True)
    broken.write_text("{not json", encoding="utf-8")
    assert read_plugin_version(tmp_path / "broken") is None


def test_resolve_plugin_version_prefers_bundled(tmp_path: Path) -> None:
    store = CacheStore(host_config_root=tmp_path / "host", marketplace_name="market")
    make_plugin(store.plugin_cache_dir("shirokuma-skills-en") / "2.0.0", version="2.0.0")
    bundled = make_plugin(tmp_path / "bundled", version="1.0.0")

    assert resolve_plugin_version(bundled, store) == "1.0.0"


def test_resolve_plugin_version_falls_back_to_cache(tmp_path: Path) -> None:
    store = CacheStore(host_config_root=tmp_path / "host", marketplace_name="market")
    make_plugin(store.plugin_cache_dir("shirokuma-skills-ja") / "0.4.0", version="0.4.0")

    assert resolve_plugin_version(tmp_path / "bundled", store) == "0.4.0"


def test_resolve_plugin_version_unknown(tmp_path: Path) -> None:
    store = CacheStore(host_config_root=tmp_path / "host", marketplace_name="market")
    assert resolve_plugin_version(tmp_path / "bundled", store) == UNKNOWN_VERSION


@pytest.mark.parametrize(
    ("cli", "plugin", "mismatch"),
    [
        ("0.1.0", "0.1.5", False),
        ("0.1.0", "0.2.0", True),
        ("1.0.0", "1.0.0-beta.1", False),
        ("0.1.0", UNKNOWN_VERSION, False),
    ],
)
def test_has_version_mismatch(cli: str, plugin: str, mismatch: bool) -> None:
    assert has_version_mismatch(cli, plugin) is mismatch


def test_is_self_repo(tmp_path: Path) -> None:
    write_files(tmp_path / "self", {"pyproject.toml": '[project]\nname = "skillsync"\n'})
    write_files(tmp_path / "other", {"pyproject.toml": '[project]\nname = "webapp"\n'})
    write_files(tmp_path / "broken", {"pyproject.toml": "[project\n"})

    assert is_self_repo(tmp_path / "self") is True
    assert is_self_repo(tmp_path / "other") is False
    assert is_self_repo(tmp_path / "broken") is False
    assert is_self_repo(tmp_path / "empty") is False


def test_read_language_setting(tmp_path: Path) -> None:
    settings = tmp_path / ".claude" / "settings.json"
    assert read_language_setting(tmp_path) is None

    settings.parent.mkdir()
    settings.write_text(json.dumps({"language": "japanese"}), encoding="utf-8")
    assert read_language_setting(tmp_path) is LanguageVariant.JAPANESE

    settings.write_text(json.dumps({"language": "klingon"}), encoding="utf-8")
    assert read_language_setting(tmp_path) is None

    settings.write_text("{", encoding="utf-8")
    assert read_language_setting(tmp_path) is None
