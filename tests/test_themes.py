"""Tests for the theme registry."""

from __future__ import annotations

import pytest

from studiodocs.generators import themes
from studiodocs.generators.themes import (
    DEFAULT_THEME,
    Theme,
    ThemeColors,
    get_theme,
    list_themes,
    register_theme,
    to_hex,
)


class TestThemes:
    def test_builtin_themes(self):
        names = {t.name for t in list_themes()}
        assert {"studio", "graphite", "terracotta", "sage"} <= names

    def test_default(self):
        assert DEFAULT_THEME is get_theme("studio")
        assert to_hex(DEFAULT_THEME.colors.primary) == "1E3A5F"

    def test_lookup_is_case_insensitive(self):
        assert get_theme(" Sage ").name == "sage"

    def test_unknown_theme(self):
        with pytest.raises(KeyError, match="Available"):
            get_theme("neon")

    def test_register(self, monkeypatch):
        monkeypatch.setattr(themes, "_THEME_REGISTRY", dict(themes._THEME_REGISTRY))
        custom = Theme(name="Custom-Test ", colors=ThemeColors(primary=(1, 2, 3)))
        register_theme(custom)
        assert get_theme("custom-test").colors.primary == (1, 2, 3)
        assert custom in list_themes()

    def test_builtin_registry_has_no_test_themes(self):
        assert all(not t.name.lower().startswith("custom") for t in list_themes())

    def test_themes_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_THEME.colors.primary = (0, 0, 0)
