"""theme-forge - Harmony-driven color themes with built-in accessibility auditing."""

__version__ = "1.0.0"
__author__ = "Theme Forge Team"

from .schema import (
    HSL,
    HarmonyRule,
    VariantStrategy,
    ColorSpace,
    OutputFormat,
    ThemeMode,
    ThemeParameters,
    GeneratedTheme,
)

__all__ = [
    "HSL",
    "HarmonyRule",
    "VariantStrategy",
    "ColorSpace",
    "OutputFormat",
    "ThemeMode",
    "ThemeParameters",
    "GeneratedTheme",
    "__version__",
]
