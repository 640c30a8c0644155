"""Tests for the update operation."""

from pathlib import Path

import pytest

from skillsync.artifacts.plan import OBSOLETE_REASON
from skillsync.artifacts.reconcile import LOCAL_CHANGES_REASON
from skillsync.artifacts.update import (
    BundledPluginNotFound,
    ProjectNotInitialized,
    UpdateOptions,
    run_update,
)
from skillsync.core.context import SyncContext
from skillsync.gateway.plugin_host.fake import FakePluginHost
from tests.test_utils.context_builders import create_test_context
from tests.test_utils.plugin_tree import make_plugin, snapshot_tree, write_files

EN = "shirokuma-skills-en"


def _bundled(tmp_path: Path) -> Path:
    return make_plugin(
        tmp_path / "bundled" / EN,
        skills={"managing-rules": {"SKILL.md": "v2\n"}, "creating-pr": {"SKILL.md": "pr\n"}},
        rules={"style.md": "style v2\n"},
        version="0.1.0",
    )


def _self_repo(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    write_files(project, {"pyproject.toml": '[project]\nname = "skillsync"\n'})
    (project / ".claude").mkdir()
    return project


def _install_cached_copy(ctx: SyncContext) -> Path:
    return make_plugin(
        ctx.cache_store.plugin_cache_dir(EN) / "0.1.0",
        skills={"managing-rules": {"SKILL.md": "edited\n"}, "retired": {"SKILL.md": "old\n"}},
        rules={"style.md": "style v1\n"},
        version="0.1.0",
    )


def test_run_update_requires_claude_dir(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path)
    with pytest.raises(ProjectNotInitialized):
        run_update(ctx, tmp_path / "project", UpdateOptions())


def test_run_update_requires_bundled_plugin(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path)
    project = _self_repo(tmp_path)
    with pytest.raises(BundledPluginNotFound):
        run_update(ctx, project, UpdateOptions())


def test_self_repo_sync_reconciles_cached_copy(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = _self_repo(tmp_path)
    ctx = create_test_context(tmp_path)
    installed = _install_cached_copy(ctx)

    result = run_update(ctx, project, UpdateOptions(sync=True))

    assert [(item.name, item.status, item.reason) for item in result.skills] == [
        ("managing-rules", "skipped", LOCAL_CHANGES_REASON),
        ("creating-pr", "added", None),
        ("retired", "skipped", OBSOLETE_REASON),
    ]
    assert [(item.name, item.status) for item in result.rules] == [("style.md", "skipped")]
    assert [(item.name, item.status) for item in result.deployed_rules] == [
        ("style.md", "deployed")
    ]
    assert (installed / "skills" / "creating-pr" / "SKILL.md").is_file()
    deployed = project / ".claude" / "rules" / "shirokuma" / "style.md"
    assert deployed.read_text(encoding="utf-8") == "style v2\n"
    assert result.version == "0.1.0"
    assert result.plugin_version == "0.1.0"
    assert result.hooks_status == "not-applicable"


def test_self_repo_force_yes_converges(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = _self_repo(tmp_path)
    ctx = create_test_context(tmp_path)
    installed = _install_cached_copy(ctx)

    result = run_update(ctx, project, UpdateOptions(sync=True, force=True, yes=True))

    assert result.error_count == 0
    bundled_skills = snapshot_tree(tmp_path / "bundled" / EN / "skills")
    assert snapshot_tree(installed / "skills") == bundled_skills
    assert (installed / "rules" / "style.md").read_text(encoding="utf-8") == "style v2\n"


def test_self_repo_dry_run_changes_nothing(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = _self_repo(tmp_path)
    ctx = create_test_context(tmp_path)
    _install_cached_copy(ctx)
    before = (snapshot_tree(tmp_path / "host"), snapshot_tree(project))

    result = run_update(ctx, project, UpdateOptions(sync=True, force=True, yes=True, dry_run=True))

    assert (snapshot_tree(tmp_path / "host"), snapshot_tree(project)) == before
    assert result.dry_run is True
    assert {item.status for item in result.skills} == {"updated", "added", "removed"}


def test_self_repo_named_skills_only(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = _self_repo(tmp_path)
    ctx = create_test_context(tmp_path)
    _install_cached_copy(ctx)

    result = run_update(ctx, project, UpdateOptions(skills=["managing-rules"], force=True))

    assert [(item.name, item.status) for item in result.skills] == [("managing-rules", "updated")]
    assert result.rules == []
    assert result.deployed_rules == []


def test_self_repo_without_installed_skills_does_nothing(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = _self_repo(tmp_path)
    ctx = create_test_context(tmp_path)
    make_plugin(ctx.cache_store.plugin_cache_dir(EN) / "0.1.0", version="0.1.0")

    result = run_update(ctx, project, UpdateOptions(with_rules=True))

    assert result.skills == []
    assert result.rules == []


def test_external_project_reinstalls_and_deploys_bundled_rules(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = tmp_path / "webapp"
    (project / ".claude").mkdir(parents=True)
    host = FakePluginHost()
    ctx = create_test_context(tmp_path, plugin_host=host)

    result = run_update(ctx, project, UpdateOptions())

    assert host.operations[1:] == [
        ("uninstall", "shirokuma-skills-en@shirokuma-library"),
        ("install", "shirokuma-skills-en@shirokuma-library"),
        ("uninstall", "shirokuma-hooks@shirokuma-library"),
        ("install", "shirokuma-hooks@shirokuma-library"),
    ]
    assert result.hooks_status == "updated"
    assert [(item.name, item.status) for item in result.deployed_rules] == [
        ("style.md", "deployed")
    ]
    assert result.skills == []


def test_external_project_deploys_from_cache(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = tmp_path / "webapp"
    (project / ".claude").mkdir(parents=True)
    ctx = create_test_context(tmp_path)
    make_plugin(ctx.cache_store.plugin_cache_dir(EN) / "0.2.0", rules={"style.md": "from cache\n"})

    run_update(ctx, project, UpdateOptions())

    deployed = project / ".claude" / "rules" / "shirokuma" / "style.md"
    assert deployed.read_text(encoding="utf-8") == "from cache\n"


def test_external_project_dry_run_touches_nothing(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = tmp_path / "webapp"
    write_files(project, {".claude/settings.json": "{}", ".claude/plugins/old.json": "{}"})
    host = FakePluginHost()
    ctx = create_test_context(tmp_path, plugin_host=host)
    before = snapshot_tree(project)

    result = run_update(ctx, project, UpdateOptions(dry_run=True))

    assert snapshot_tree(project) == before
    assert host.operations == []
    assert result.hooks_status == "skipped"
    assert [item.status for item in result.deployed_rules] == ["deployed"]


def test_external_project_without_host(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = tmp_path / "webapp"
    (project / ".claude").mkdir(parents=True)
    ctx = create_test_context(tmp_path, plugin_host=FakePluginHost(available=False))

    result = run_update(ctx, project, UpdateOptions())

    assert result.deployed_rules == []
    assert result.hooks_status == "skipped"
    assert not (project / ".claude" / "rules").exists()


def test_external_project_hooks_failure_counts_as_error(tmp_path: Path) -> None:
    _bundled(tmp_path)
    project = tmp_path / "webapp"
    (project / ".claude").mkdir(parents=True)
    host = FakePluginHost(install_failures={"shirokuma-hooks@shirokuma-library": "boom"})
    ctx = create_test_context(tmp_path, plugin_host=host)

    result = run_update(ctx, project, UpdateOptions())

    assert result.hooks_status == "error"
    assert result.error_count == 1
