"""Tests for color conversion helpers."""

import pytest

from theme_forge.engine.converters import (
    from_hex,
    hex_to_display,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    rgb_to_hex,
    to_display,
    to_hex,
)
from theme_forge.schema import HSL, ColorSpace, OutputFormat, normalize_hue


class TestHexConversion:
    """Test hex, RGB and HSL conversion."""

    def test_hex_to_rgb(self):
        """Hex strings parse with or without the leading hash."""
        assert hex_to_rgb("#ff8000") == (255, 128, 0)
        assert hex_to_rgb("00FF00") == (0, 255, 0)

    def test_hex_to_rgb_invalid(self):
        """Malformed hex raises ValueError."""
        with pytest.raises(ValueError):
            hex_to_rgb("#fff")
        with pytest.raises(ValueError):
            hex_to_rgb("#gggggg")

    def test_rgb_to_hex_clamps(self):
        """Channels are rounded and clamped to 0-255."""
        assert rgb_to_hex(300, -5, 127.6) == "#ff0080"

    def test_hsl_to_hex_primaries(self):
        """Pure hues map to the sRGB primaries."""
        assert hsl_to_hex(0, 100, 50) == "#ff0000"
        assert hsl_to_hex(120, 100, 50) == "#00ff00"
        assert hsl_to_hex(240, 100, 50) == "#0000ff"
        assert hsl_to_hex(360, 100, 50) == "#ff0000"

    def test_hsl_to_hex_extremes(self):
        """Lightness 0 and 100 are black and white for any hue."""
        assert hsl_to_hex(200, 80, 0) == "#000000"
        assert hsl_to_hex(200, 80, 100) == "#ffffff"

    def test_hex_to_hsl(self):
        """Hex parses back to HSL."""
        hsl = hex_to_hsl("#ff0000")
        assert hsl.h == pytest.approx(0)
        assert hsl.s == pytest.approx(100)
        assert hsl.l == pytest.approx(50)

    def test_hex_to_hsl_grey(self):
        """Greys have no hue or saturation."""
        hsl = hex_to_hsl("#808080")
        assert hsl.h == 0
        assert hsl.s == 0

    def test_hex_to_hsl_invalid_is_black(self):
        """Invalid input degrades to black instead of raising."""
        assert hex_to_hsl("not-a-color") == HSL(h=0, s=0, l=0)


class TestSpaces:
    """Test dispatch across generation spaces."""

    @pytest.mark.parametrize("space", list(ColorSpace))
    def test_to_hex_is_valid(self, space):
        """Every space produces a valid hex, even for extreme input."""
        for coords in (HSL(h=30, s=50, l=50), HSL(h=300, s=150, l=95), HSL(h=0, s=0, l=0)):
            result = to_hex(coords, space)
            assert result.startswith("#")
            assert len(result) == 7

    @pytest.mark.parametrize("space", list(ColorSpace))
    def test_from_hex_is_normalized(self, space):
        """Triplets read back from hex stay within range."""
        hsl = from_hex("#3366cc", space)
        assert 0 <= hsl.h < 360
        assert 0 <= hsl.s <= space.max_saturation
        assert 0 <= hsl.l <= 100

    def test_hsl_round_trip(self):
        """The HSL space reads back what it wrote."""
        hsl = from_hex(to_hex(HSL(h=200, s=50, l=40), ColorSpace.HSL), ColorSpace.HSL)
        assert hsl.h == pytest.approx(200, abs=1)
        assert hsl.l == pytest.approx(40, abs=1)

    def test_normalize_hue(self):
        """Hues wrap into [0, 360)."""
        assert normalize_hue(-30) == 330
        assert normalize_hue(720) == 0
        assert normalize_hue(359.5) == 359.5


class TestDisplay:
    """Test display string formatting."""

    def test_srgb_display_is_hex(self):
        """sRGB output is the hex itself."""
        assert hex_to_display("#123456", OutputFormat.SRGB) == "#123456"

    def test_cmyk_display(self):
        """CMYK output uses the cmyk() notation."""
        assert hex_to_display("#ff0000", OutputFormat.CMYK).startswith("cmyk(")

    def test_invalid_hex_passes_through(self):
        """Non-hex input is returned unchanged."""
        assert hex_to_display("nope", OutputFormat.P3) == "nope"

    def test_to_display_from_coordinates(self):
        """Coordinates in a space render in the requested format."""
        red = HSL(h=0, s=100, l=50)
        assert to_display(red, ColorSpace.HSL, OutputFormat.SRGB) == "#ff0000"
        assert to_display(red, ColorSpace.HSL, OutputFormat.CMYK) == "cmyk(0.0%, 100.0%, 100.0%, 0.0%)"
        assert to_display(red, ColorSpace.HSL, OutputFormat.P3).startswith("color(display-p3")


class TestRoundTrip:
    """Test hex to HSL to hex."""

    @pytest.mark.parametrize("hex_color", ["#000000", "#ffffff", "#3a7bd5", "#c0ffee", "#8b0000", "#7f7f7f"])
    def test_hex_round_trip(self, hex_color):
        """In-gamut colors survive the round trip within one step per channel."""
        hsl = hex_to_hsl(hex_color)
        result = hsl_to_hex(hsl.h, hsl.s, hsl.l)
        for original, restored in zip(hex_to_rgb(hex_color), hex_to_rgb(result)):
            assert abs(original - restored) <= 1
