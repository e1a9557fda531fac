"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from theme_forge.config import Config  # noqa: E402
from theme_forge.schema import HSL, HarmonyRule, ThemeParameters, VariantStrategy  # noqa: E402


@pytest.fixture(autouse=True)
def reset_config():
    """Drop the cached configuration between tests."""
    Config._instance = None
    yield
    Config._instance = None


@pytest.fixture
def params() -> ThemeParameters:
    """Small, fast parameters for engine tests."""
    return ThemeParameters(
        base_color=HSL(h=210, s=60, l=45),
        harmony=HarmonyRule.ANALOGOUS,
        spread=30,
        variant_count=6,
        strategy=VariantStrategy.TINTS_SHADES,
        theme_name="Test Theme",
    )
