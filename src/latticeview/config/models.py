"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here, ``latticeview.toml`` only holds
overrides. An empty file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from latticeview.domain.types import ALL_TIERS, DEFAULT_LAYOUT, LayoutKind, parse_layout_kind


class ViewConfig(BaseModel):
    """[view] section — initial ViewState values."""

    model_config = {"frozen": True}

    layout: LayoutKind = DEFAULT_LAYOUT
    labels: bool = True
    controls: bool = True
    tiers: list[str] = Field(default_factory=lambda: sorted(ALL_TIERS))

    @field_validator("layout", mode="before")
    @classmethod
    def _fallback_layout(cls, value: object) -> LayoutKind:
        return parse_layout_kind(None if value is None else str(value))


class LayoutConfig(BaseModel):
    """[layout] section — networkx layout adapter knobs."""

    model_config = {"frozen": True}

    seed: int = 42
    scale: float = 1.0
    sync: bool = True
    max_workers: int = 1
    timeout_seconds: float | None = None


class ExportConfig(BaseModel):
    """[export] section."""

    model_config = {"frozen": True}

    format: str = "cytoscape"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    disabled: list[str] = Field(default_factory=list)
