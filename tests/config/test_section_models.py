"""Tests for the configuration section models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from latticeview.config.models import ExportConfig, LayoutConfig, PluginsConfig, ViewConfig
from latticeview.domain.types import LayoutKind


class TestSectionModels:
    def test_view_defaults(self) -> None:
        cfg = ViewConfig()
        assert cfg.layout is LayoutKind.FORCE
        assert cfg.controls is True

    def test_view_layout_fallback(self) -> None:
        assert ViewConfig(layout="zigzag").layout is LayoutKind.FORCE  # type: ignore[arg-type]

    def test_layout_defaults(self) -> None:
        cfg = LayoutConfig()
        assert (cfg.seed, cfg.scale, cfg.max_workers, cfg.timeout_seconds) == (42, 1.0, 1, None)

    def test_plugins_default_enables_all(self) -> None:
        assert PluginsConfig().disabled == []

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            ExportConfig().format = "dot"  # type: ignore[misc]
