"""Tests for the update-skills command."""

from pathlib import Path

from click.testing import CliRunner

from skillsync.cli.cli import cli
from skillsync.core.config import DEFAULT_MARKETPLACE_NAME
from skillsync.gateway.git.fake import FakeGit
from skillsync.gateway.plugin_host.fake import FakePluginHost
from tests.test_utils.context_builders import create_test_context
from tests.test_utils.plugin_tree import make_plugin, write_files

EN = "shirokuma-skills-en"


def _setup_self_repo(tmp_path: Path) -> Path:
    make_plugin(
        tmp_path / "bundled" / EN,
        skills={"managing-rules": {"SKILL.md": "v2\n"}},
        rules={"style.md": "style\n"},
        version="0.1.0",
    )
    project = tmp_path / "project"
    write_files(project, {"pyproject.toml": '[project]\nname = "skillsync"\n'})
    (project / ".claude").mkdir()
    return project


def test_update_skills_prints_summary(tmp_path: Path) -> None:
    project = _setup_self_repo(tmp_path)
    ctx = create_test_context(tmp_path, cwd=project)
    make_plugin(
        ctx.cache_store.plugin_cache_dir(EN) / "0.1.0",
        skills={"managing-rules": {"SKILL.md": "v1\n"}},
    )

    result = CliRunner().invoke(cli, ["update-skills", "--force"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Skills: 1 updated" in result.output
    assert "Plugin version: 0.1.0" in result.output
    assert "Done" in result.output


def test_update_skills_dry_run_verbose_emits_json(tmp_path: Path) -> None:
    project = _setup_self_repo(tmp_path)
    ctx = create_test_context(tmp_path)

    result = CliRunner().invoke(
        cli,
        ["update-skills", "--project", str(project), "--sync", "--dry-run", "--verbose"],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert "Dry run: no files will be changed" in result.output
    assert '"dryRun": true' in result.output
    assert '"deployedRules"' in result.output
    assert not (project / ".claude" / "rules").exists()


def test_update_skills_exits_nonzero_on_item_error(tmp_path: Path) -> None:
    project = _setup_self_repo(tmp_path)
    ctx = create_test_context(tmp_path, cwd=project)

    result = CliRunner().invoke(cli, ["update-skills", "--skills", "not-bundled"], obj=ctx)

    assert result.exit_code == 1
    assert "Completed with 1 error(s)" in result.output


def test_update_skills_without_claude_dir_fails(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path)

    result = CliRunner().invoke(cli, ["update-skills"], obj=ctx)

    assert result.exit_code == 1
    assert "No .claude/ directory" in result.output


def test_update_skills_rejects_invalid_project_config(tmp_path: Path) -> None:
    project = _setup_self_repo(tmp_path)
    write_files(project, {".skillsync/config.toml": '[update]\nchannel = "nightly"\n'})
    ctx = create_test_context(tmp_path)

    result = CliRunner().invoke(cli, ["update-skills", "--project", str(project)], obj=ctx)

    assert result.exit_code == 1
    assert "nightly" in result.output


def test_update_skills_external_project_reports_hooks(tmp_path: Path) -> None:
    make_plugin(tmp_path / "bundled" / EN, rules={"style.md": "style\n"}, version="0.1.0")
    project = tmp_path / "webapp"
    (project / ".claude").mkdir(parents=True)
    ctx = create_test_context(tmp_path, plugin_host=FakePluginHost(), cwd=project)

    result = CliRunner().invoke(cli, ["update-skills"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Deployed rules: 1 deployed" in result.output
    assert "Hooks: updated" in result.output


def _setup_external_project(tmp_path: Path) -> Path:
    make_plugin(tmp_path / "bundled" / EN, rules={"style.md": "style\n"}, version="0.1.0")
    project = tmp_path / "webapp"
    (project / ".claude").mkdir(parents=True)
    return project


def _pinnable_host(tmp_path: Path) -> FakePluginHost:
    return FakePluginHost(
        marketplace_listing=f"{DEFAULT_MARKETPLACE_NAME} (GitHub)",
        clone_paths={DEFAULT_MARKETPLACE_NAME: tmp_path / "clone"},
    )


def test_update_skills_channel_pins_reinstall(tmp_path: Path) -> None:
    project = _setup_external_project(tmp_path)
    git = FakeGit(tags=["v0.1.0", "v0.2.0-beta.1"])
    ctx = create_test_context(tmp_path, git=git, plugin_host=_pinnable_host(tmp_path), cwd=project)

    result = CliRunner().invoke(cli, ["update-skills", "--channel", "stable"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert [call.ref for call in git.checkout_calls] == ["v0.1.0", "main"]
    assert git.current_ref == "main"


def test_update_skills_uses_configured_channel(tmp_path: Path) -> None:
    project = _setup_external_project(tmp_path)
    write_files(project, {".skillsync/config.toml": '[update]\nchannel = "beta"\n'})
    git = FakeGit(tags=["v0.1.0", "v0.2.0-beta.1", "v0.3.0-alpha.1"])
    ctx = create_test_context(tmp_path, git=git, plugin_host=_pinnable_host(tmp_path), cwd=project)

    result = CliRunner().invoke(cli, ["update-skills"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert [call.ref for call in git.checkout_calls] == ["v0.2.0-beta.1", "main"]


def test_update_skills_channel_option_overrides_config(tmp_path: Path) -> None:
    project = _setup_external_project(tmp_path)
    write_files(project, {".skillsync/config.toml": '[update]\nchannel = "beta"\n'})
    git = FakeGit(tags=["v0.1.0", "v0.2.0-beta.1"])
    ctx = create_test_context(tmp_path, git=git, plugin_host=_pinnable_host(tmp_path), cwd=project)

    result = CliRunner().invoke(cli, ["update-skills", "--channel", "stable"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert git.checkout_calls[0].ref == "v0.1.0"


def test_update_skills_rejects_unknown_channel(tmp_path: Path) -> None:
    project = _setup_external_project(tmp_path)
    ctx = create_test_context(tmp_path, cwd=project)

    result = CliRunner().invoke(cli, ["update-skills", "--channel", "nightly"], obj=ctx)

    assert result.exit_code == 2
    assert "--channel" in result.output
