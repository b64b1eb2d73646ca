"""Studio themes for all generators.

Themes define colors, fonts and layout values. Every generator receives
a ``Theme`` instance and reads it instead of hardcoded constants; the
instance is per generator, so concurrent requests can use different
themes.

Usage::

    from studiodocs.generators.themes import get_theme

    theme = get_theme("terracotta")
    gen = BudgetDeckGenerator(theme=theme)
"""

from __future__ import annotations

from dataclasses import dataclass, field

RGB = tuple[int, int, int]


# ---------------------------------------------------------------------------
# Theme dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ThemeColors:
    """Color slots used across generators. Values are RGB tuples."""

    # Brand
    primary: RGB = (30, 58, 95)          # 1E3A5F
    primary_dark: RGB = (17, 24, 39)     # 111827
    accent: RGB = (245, 158, 11)         # F59E0B

    # Text
    text: RGB = (55, 65, 81)             # 374151
    muted: RGB = (107, 114, 128)         # 6B7280
    light: RGB = (156, 163, 175)         # 9CA3AF
    white: RGB = (255, 255, 255)

    # Backgrounds / rules
    bg_light: RGB = (249, 250, 251)      # F9FAFB
    bg_section: RGB = (243, 244, 246)    # F3F4F6
    border: RGB = (229, 231, 235)        # E5E7EB

    # Callouts
    success: RGB = (16, 185, 129)        # 10B981
    note_bg: RGB = (255, 251, 235)       # FFFBEB
    note_border: RGB = (252, 211, 77)    # FCD34D


@dataclass(frozen=True)
class ThemeFonts:
    """Font family and size configuration."""

    heading: str = "Arial"
    body: str = "Arial"

    title_size_pt: int = 24
    subtitle_size_pt: int = 14
    body_size_pt: int = 11
    small_size_pt: int = 9
    cover_size_pt: int = 40


@dataclass(frozen=True)
class ThemeLayout:
    """Slide and page geometry."""

    slide_width_inches: float = 10.0
    slide_height_inches: float = 6.67
    slide_margin_inches: float = 0.4
    logo_width_inches: float = 1.6
    logo_height_inches: float = 0.33
    logo_position: str = "top-right"     # top-left | top-right | bottom-left | bottom-right
    page_margin_mm: float = 20.0


@dataclass(frozen=True)
class Theme:
    """Complete theme definition."""

    name: str = "studio"
    display_name: str = "Studio Navy"
    description: str = "Navy and amber, the default studio identity."
    colors: ThemeColors = field(default_factory=ThemeColors)
    fonts: ThemeFonts = field(default_factory=ThemeFonts)
    layout: ThemeLayout = field(default_factory=ThemeLayout)


# ---------------------------------------------------------------------------
# Built-in themes
# ---------------------------------------------------------------------------

STUDIO_THEME = Theme()

GRAPHITE_THEME = Theme(
    name="graphite",
    display_name="Graphite",
    description="Black and white, used for delivery schedules.",
    colors=ThemeColors(
        primary=(17, 17, 17),
        primary_dark=(0, 0, 0),
        accent=(107, 114, 128),
        bg_section=(245, 245, 245),
    ),
    fonts=ThemeFonts(heading="Helvetica", body="Helvetica"),
)

TERRACOTTA_THEME = Theme(
    name="terracotta",
    display_name="Terracotta",
    description="Warm clay tones for residential projects.",
    colors=ThemeColors(
        primary=(154, 76, 47),
        primary_dark=(92, 45, 28),
        accent=(217, 164, 65),
        text=(68, 51, 43),
        bg_light=(252, 248, 244),
        bg_section=(246, 236, 228),
    ),
    fonts=ThemeFonts(heading="Georgia", body="Arial"),
)

SAGE_THEME = Theme(
    name="sage",
    display_name="Sage",
    description="Muted greens for a calm, natural look.",
    colors=ThemeColors(
        primary=(72, 101, 82),
        primary_dark=(38, 56, 44),
        accent=(196, 160, 90),
        bg_light=(246, 249, 246),
        bg_section=(232, 240, 234),
    ),
    layout=ThemeLayout(logo_position="bottom-right"),
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_THEME_REGISTRY: dict[str, Theme] = {
    t.name: t
    for t in [
        STUDIO_THEME,
        GRAPHITE_THEME,
        TERRACOTTA_THEME,
        SAGE_THEME,
    ]
}


def get_theme(name: str) -> Theme:
    """Get a theme by name. Raises ``KeyError`` if not found."""
    key = name.lower().strip()
    if key not in _THEME_REGISTRY:
        available = ", ".join(sorted(_THEME_REGISTRY.keys()))
        raise KeyError(f"Unknown theme '{name}'. Available: {available}")
    return _THEME_REGISTRY[key]


def list_themes() -> list[Theme]:
    """Return all registered themes."""
    return list(_THEME_REGISTRY.values())


def register_theme(theme: Theme) -> None:
    """Register a custom theme at runtime."""
    _THEME_REGISTRY[theme.name.lower().strip()] = theme


DEFAULT_THEME = STUDIO_THEME


def to_hex(rgb: RGB) -> str:
    """``(30, 58, 95)`` → ``"1E3A5F"``."""
    return "{:02X}{:02X}{:02X}".format(*rgb)
