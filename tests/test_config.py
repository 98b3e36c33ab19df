"""Unit tests for configuration and toggle models (bootstrapper.config, bootstrapper.models).

Tests cover:
- BootstrapConfig defaults, derived template dirs, from_env
- Certificate probe path order
- resolve_workdir (None, absolute, relative to the install dir)
- ScaffoldContext derived paths and immutability
- SuperClaudeCategories encode/decode
- ToggleVector defaults, aliases, extraNpmPackages splitting
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from bootstrapper.config import (
    INSTALL_DIR,
    BootstrapConfig,
    ScaffoldContext,
    resolve_workdir,
)
from bootstrapper.errors import ToggleParse
from bootstrapper.models import SuperClaudeCategories, ToggleVector


# ---------------------------------------------------------------------------
# BootstrapConfig
# ---------------------------------------------------------------------------


class TestBootstrapConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = BootstrapConfig()
        assert config.install_dir == INSTALL_DIR
        assert config.template_dir == INSTALL_DIR / "templates"
        assert config.features_dir == INSTALL_DIR / "features"
        assert config.toggle_feature == "core-devtools"
        assert config.strict_toggles is False
        assert config.allow_existing is False

    @pytest.mark.unit
    def test_bundled_templates_exist(self):
        config = BootstrapConfig()
        assert (config.template_dir / "devcontainer.json").is_file()
        assert (config.features_dir / "core-devtools" / "install.sh").is_file()

    @pytest.mark.unit
    def test_template_dirs_follow_install_dir(self, tmp_path: Path):
        config = BootstrapConfig(install_dir=tmp_path)
        assert config.template_dir == tmp_path / "templates"
        assert config.features_dir == tmp_path / "features"

    @pytest.mark.unit
    def test_explicit_template_dir_kept(self, tmp_path: Path):
        config = BootstrapConfig(template_dir=tmp_path / "custom")
        assert config.template_dir == tmp_path / "custom"

    @pytest.mark.unit
    def test_from_env_reads_home(self, tmp_path: Path):
        with patch.dict("os.environ", {"HOME": str(tmp_path)}):
            config = BootstrapConfig.from_env()
        assert config.home == tmp_path

    @pytest.mark.unit
    def test_from_env_without_home(self):
        with patch.dict("os.environ", {}, clear=True):
            config = BootstrapConfig.from_env()
        assert config.home is None

    @pytest.mark.unit
    def test_from_env_overrides(self):
        config = BootstrapConfig.from_env(strict_toggles=True, allow_existing=True)
        assert config.strict_toggles is True
        assert config.allow_existing is True


class TestCertificateProbePaths:
    @pytest.mark.unit
    def test_order(self, tmp_path: Path):
        config = BootstrapConfig(home=tmp_path)
        assert config.certificate_probe_paths == [
            tmp_path / ".ssl" / "certs" / "zscaler.crt",
            tmp_path / "Downloads" / "zscaler-root-ca.crt",
            tmp_path / "Downloads" / "ZScaler Root CA.crt",
            Path("/usr/local/share/ca-certificates/zscaler.crt"),
        ]

    @pytest.mark.unit
    def test_without_home_only_system_path(self):
        config = BootstrapConfig(home=None)
        assert config.certificate_probe_paths == [
            Path("/usr/local/share/ca-certificates/zscaler.crt"),
        ]


# ---------------------------------------------------------------------------
# resolve_workdir
# ---------------------------------------------------------------------------


class TestResolveWorkdir:
    @pytest.mark.unit
    def test_none_is_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_workdir(None, INSTALL_DIR) == tmp_path

    @pytest.mark.unit
    def test_empty_string_is_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_workdir("", INSTALL_DIR) == tmp_path

    @pytest.mark.unit
    def test_absolute_used_as_given(self, tmp_path: Path):
        assert resolve_workdir(str(tmp_path), INSTALL_DIR) == tmp_path

    @pytest.mark.unit
    def test_relative_resolves_against_install_dir(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.chdir(tmp_path)
        install = tmp_path / "install"
        assert resolve_workdir("projects", install) == install / "projects"


# ---------------------------------------------------------------------------
# ScaffoldContext
# ---------------------------------------------------------------------------


class TestScaffoldContext:
    @pytest.fixture
    def ctx(self, tmp_path: Path) -> ScaffoldContext:
        return ScaffoldContext(project_name="api-service", project_root=tmp_path / "api-service")

    @pytest.mark.unit
    def test_derived_paths(self, ctx: ScaffoldContext, tmp_path: Path):
        root = tmp_path / "api-service"
        assert ctx.devcontainer_json == root / ".devcontainer" / "devcontainer.json"
        assert ctx.scripts_dir == root / ".devcontainer" / "scripts"
        assert ctx.features_dest == root / ".devcontainer" / "features"
        assert ctx.certificate_dest == root / ".devcontainer" / "certs" / "zscaler.crt"
        assert ctx.mcp_json == root / ".mcp.json"
        assert ctx.env_file == root / ".env"
        assert ctx.docs_dir == root / "docs"

    @pytest.mark.unit
    def test_directories(self, ctx: ScaffoldContext):
        assert ctx.directories() == [
            ctx.project_root,
            ctx.docs_dir,
            ctx.certs_dir,
            ctx.scripts_dir,
        ]

    @pytest.mark.unit
    def test_frozen(self, ctx: ScaffoldContext):
        with pytest.raises(ValidationError):
            ctx.project_name = "other"

    @pytest.mark.unit
    def test_with_toggles_returns_copy(self, ctx: ScaffoldContext):
        toggles = ToggleVector(installTaskMaster=True)
        updated = ctx.with_toggles(toggles)
        assert updated.toggles == toggles
        assert ctx.toggles is None
        assert updated.project_root == ctx.project_root


# ---------------------------------------------------------------------------
# SuperClaudeCategories
# ---------------------------------------------------------------------------


class TestSuperClaudeCategories:
    @pytest.mark.unit
    def test_defaults_all_enabled(self):
        categories = SuperClaudeCategories()
        assert categories.enabled_names() == ["core", "ui", "codeOps"]
        assert categories.any_enabled

    @pytest.mark.unit
    def test_encode_compact(self):
        assert SuperClaudeCategories().encode() == '{"core":true,"ui":true,"codeOps":true}'

    @pytest.mark.unit
    def test_decode(self):
        categories = SuperClaudeCategories.decode('{"core":true,"ui":false,"codeOps":true}')
        assert categories.core is True
        assert categories.ui is False
        assert categories.code_ops is True

    @pytest.mark.unit
    def test_decode_missing_keys_are_disabled(self):
        categories = SuperClaudeCategories.decode('{"ui": true}')
        assert categories.enabled_names() == ["ui"]

    @pytest.mark.unit
    def test_decode_all_off(self):
        categories = SuperClaudeCategories.decode('{"core":false,"ui":false,"codeOps":false}')
        assert not categories.any_enabled
        assert categories.enabled_names() == []

    @pytest.mark.unit
    def test_decode_then_encode_is_canonical(self):
        raw = '{"codeOps": false, "core": true, "ui": true}'
        assert SuperClaudeCategories.decode(raw).encode() == (
            '{"core":true,"ui":true,"codeOps":false}'
        )

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        ["{not json", "[true, false]", '"core"', '{"core": "yes"}', '{"ui": 1}'],
    )
    def test_decode_malformed(self, raw: str):
        with pytest.raises(ToggleParse) as exc_info:
            SuperClaudeCategories.decode(raw)
        assert exc_info.value.key == "installSuperClaude"

    @pytest.mark.unit
    def test_decode_nested_object_rejected(self):
        with pytest.raises(ToggleParse, match="JSON string"):
            SuperClaudeCategories.decode({"core": True})


# ---------------------------------------------------------------------------
# ToggleVector
# ---------------------------------------------------------------------------


class TestToggleVector:
    @pytest.mark.unit
    def test_defaults(self):
        toggles = ToggleVector()
        assert toggles.install_task_master is False
        assert toggles.install_devcontainers_cli is True
        assert toggles.install_git_delta is True
        assert toggles.install_super_claude == SuperClaudeCategories()
        assert toggles.add_ll_alias is False
        assert toggles.extra_npm_packages == ()

    @pytest.mark.unit
    def test_aliases(self):
        toggles = ToggleVector.model_validate(
            {"installTaskMaster": True, "addLLAlias": True, "installDevcontainersCLI": False}
        )
        assert toggles.install_task_master is True
        assert toggles.add_ll_alias is True
        assert toggles.install_devcontainers_cli is False

    @pytest.mark.unit
    def test_extra_npm_packages_split(self):
        toggles = ToggleVector(extraNpmPackages="  typescript  eslint\tprettier ")
        assert toggles.extra_npm_packages == ("typescript", "eslint", "prettier")

    @pytest.mark.unit
    def test_extra_npm_packages_list(self):
        toggles = ToggleVector(extraNpmPackages=["typescript"])
        assert toggles.extra_npm_packages == ("typescript",)

    @pytest.mark.unit
    def test_frozen(self):
        toggles = ToggleVector()
        with pytest.raises(ValidationError):
            toggles.install_task_master = True

    @pytest.mark.unit
    def test_option_names(self):
        assert ToggleVector.option_names() == {
            "installTaskMaster",
            "installDevcontainersCLI",
            "installGitDelta",
            "installSuperClaude",
            "addLLAlias",
            "extraNpmPackages",
        }

    @pytest.mark.unit
    def test_to_feature_options(self):
        toggles = ToggleVector(
            installTaskMaster=True,
            installSuperClaude=SuperClaudeCategories(core=True, ui=False, codeOps=False),
            extraNpmPackages="a b",
        )
        options = toggles.to_feature_options()
        assert options["installTaskMaster"] is True
        assert options["installSuperClaude"] == '{"core":true,"ui":false,"codeOps":false}'
        assert options["extraNpmPackages"] == "a b"
