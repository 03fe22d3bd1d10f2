"""Tests for tier and layout-kind enums."""

from __future__ import annotations

import pytest

from latticeview.domain.types import (
    ALL_TIERS,
    DEFAULT_LAYOUT,
    LayoutKind,
    Tier,
    parse_layout_kind,
    parse_tier,
)


class TestTier:
    def test_values(self) -> None:
        assert {t.value for t in Tier} == {"regular", "mega", "hyper", "shadow"}

    def test_all_tiers_are_strings(self) -> None:
        assert ALL_TIERS == frozenset({"regular", "mega", "hyper", "shadow"})

    @pytest.mark.parametrize("raw", ["mega", "MEGA", "  Mega "])
    def test_parse_tier_case_insensitive(self, raw: str) -> None:
        assert parse_tier(raw) is Tier.MEGA

    def test_parse_unknown_tier(self) -> None:
        assert parse_tier("ultra") is None


class TestLayoutKind:
    def test_default_is_force(self) -> None:
        assert DEFAULT_LAYOUT is LayoutKind.FORCE

    @pytest.mark.parametrize("kind", list(LayoutKind))
    def test_parse_known(self, kind: LayoutKind) -> None:
        assert parse_layout_kind(kind.value) is kind

    @pytest.mark.parametrize("raw", [None, "", "spiral", "cose"])
    def test_unknown_falls_back_to_force(self, raw: str | None) -> None:
        assert parse_layout_kind(raw) is LayoutKind.FORCE
