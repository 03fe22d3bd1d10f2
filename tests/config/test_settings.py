"""Tests for LatticeSettings: TOML discovery, env vars and CLI precedence."""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from latticeview.config.discovery import CONFIG_ENV_VAR, find_config
from latticeview.config.settings import LatticeSettings
from latticeview.domain.types import LayoutKind


class TestDiscovery:
    def test_walk_up(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path / "latticeview.toml"

    def test_not_found(self, tmp_path: Path) -> None:
        nested = tmp_path / "empty"
        nested.mkdir()
        assert find_config(nested) is None

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(cfg))
        assert find_config(tmp_path / "elsewhere") == cfg

    def test_env_override_missing_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None


class TestLatticeSettings:
    def test_defaults(self) -> None:
        settings = LatticeSettings.from_cli()
        assert settings.config_path is None
        assert settings.view.layout is LayoutKind.FORCE
        assert settings.view.labels is True
        assert settings.view.tiers == ["hyper", "mega", "regular", "shadow"]
        assert settings.layout.seed == 42
        assert settings.layout.sync is True
        assert settings.export.format == "cytoscape"

    def test_toml_sections(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text(
            '[view]\nlayout = "hierarchy"\n\n[layout]\nseed = 7\n\n[export]\nformat = "dot"\n'
        )
        settings = LatticeSettings.from_cli(start_dir=tmp_path)
        assert settings.config_path == tmp_path / "latticeview.toml"
        assert settings.view.layout is LayoutKind.HIERARCHY
        assert settings.layout.seed == 7
        assert settings.export.format == "dot"

    def test_unknown_layout_in_toml_falls_back(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text('[view]\nlayout = "spiral"\n')
        settings = LatticeSettings.from_cli(start_dir=tmp_path)
        assert settings.view.layout is LayoutKind.FORCE

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "other.toml"
        cfg.write_text("[layout]\nscale = 2.5\n")
        settings = LatticeSettings.from_cli(config_path=str(cfg))
        assert settings.layout.scale == 2.5

    def test_missing_explicit_config_ignored(self, tmp_path: Path) -> None:
        settings = LatticeSettings.from_cli(config_path=str(tmp_path / "nope.toml"))
        assert settings.config_path is None

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "latticeview.toml").write_text("[layout]\nseed = 7\n")
        monkeypatch.setenv("LATTICEVIEW_LAYOUT__SEED", "99")
        settings = LatticeSettings.from_cli(start_dir=tmp_path)
        assert settings.layout.seed == 99

    def test_cli_flags_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LATTICEVIEW_VERBOSE", "false")
        assert LatticeSettings.from_cli(verbose=True).verbose is True

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text("[view\nlayout = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            LatticeSettings.from_cli(start_dir=tmp_path)

    def test_plugins_section(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text('[plugins]\ndisabled = ["noisy"]\n')
        settings = LatticeSettings.from_cli(start_dir=tmp_path)
        assert settings.plugins.disabled == ["noisy"]

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text('[layout]\nseed = "abc"\n')
        with pytest.raises(click.ClickException, match="layout.seed"):
            LatticeSettings.from_cli(start_dir=tmp_path)

    def test_unknown_section(self, tmp_path: Path) -> None:
        (tmp_path / "latticeview.toml").write_text("[theme]\ndark = true\n")
        with pytest.raises(click.ClickException, match="Invalid configuration"):
            LatticeSettings.from_cli(start_dir=tmp_path)

    def test_frozen(self) -> None:
        settings = LatticeSettings.from_cli()
        with pytest.raises(ValidationError):
            settings.verbose = True  # type: ignore[misc]
