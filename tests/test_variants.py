"""Tests for variant ramp generation."""

import pytest

from theme_forge.engine.converters import hsl_to_hex
from theme_forge.engine.core import create_color_stop, interpolate_values, shortest_hue_delta
from theme_forge.engine.variants import generate_variants
from theme_forge.schema import HSL, ColorSpace, OutputFormat, VariantStrategy


class TestColorStop:
    """Test color stop creation."""

    def test_hsl_stop(self):
        """HSL stops keep their coordinates and hex."""
        stop = create_color_stop(370, 120, -5)
        assert stop.hsl == HSL(h=10, s=100, l=0)
        assert stop.hex == "#000000"
        assert stop.is_base is False

    def test_display_string_in_output_format(self):
        """The display string follows the output format."""
        stop = create_color_stop(0, 100, 50, output=OutputFormat.HSL)
        assert stop.hex == "#ff0000"
        assert stop.display_string != stop.hex

    def test_cam02_stop_records_coordinates(self):
        """CAM02 stops carry their JCh coordinates."""
        stop = create_color_stop(120, 40, 60, space=ColorSpace.CAM02)
        assert stop.cam02 is not None
        assert stop.cam02.j == 60
        assert stop.hex.startswith("#")

    def test_shortest_hue_delta(self):
        """Hue deltas take the short way around."""
        assert shortest_hue_delta(350, 10) == 20
        assert shortest_hue_delta(10, 350) == -20
        assert shortest_hue_delta(0, 90) == 90

    def test_interpolate_across_zero(self):
        """Interpolation crosses 0 degrees instead of sweeping 340."""
        h, s, l = interpolate_values(HSL(h=350, s=0, l=0), HSL(h=10, s=100, l=100), 0.5)
        assert h == pytest.approx(360)
        assert s == pytest.approx(50)
        assert l == pytest.approx(50)


class TestGenerateVariants:
    """Test ramp shape and strategies."""

    def setup_method(self):
        """Set up a base color."""
        self.base = HSL(h=200, s=50, l=50)

    def test_ramp_length_and_center(self):
        """A ramp has 2 * count + 1 stops with the base in the middle."""
        ramp = generate_variants(self.base, 4, 50, VariantStrategy.TINTS_SHADES)
        assert len(ramp) == 9
        assert ramp[4].is_base
        assert ramp[4].hex == hsl_to_hex(200, 50, 50)
        assert [stop.is_base for stop in ramp].count(True) == 1

    def test_tints_and_shades_ordered(self):
        """Tints and shades run from darkest to lightest."""
        ramp = generate_variants(self.base, 5, 60, VariantStrategy.TINTS_SHADES)
        lightness = [stop.hsl.l for stop in ramp]
        assert lightness == sorted(lightness)
        assert lightness[0] < lightness[5] < lightness[-1]

    def test_zero_contrast_collapses(self):
        """With no contrast every stop is the base color."""
        ramp = generate_variants(self.base, 3, 0, VariantStrategy.TINTS_SHADES)
        assert {stop.hex for stop in ramp} == {ramp[3].hex}

    def test_brightness_shifts_lightness(self):
        """Brightness shifts every stop's lightness."""
        ramp = generate_variants(self.base, 2, 50, VariantStrategy.TINTS_SHADES, brightness=60)
        assert ramp[2].hsl.l == pytest.approx(60)

    def test_brightness_clamps(self):
        """Shifted lightness stays within 0-100."""
        ramp = generate_variants(HSL(h=0, s=50, l=95), 3, 100, VariantStrategy.TINTS_SHADES, brightness=100)
        assert all(0 <= stop.hsl.l <= 100 for stop in ramp)

    @pytest.mark.parametrize("strategy", list(VariantStrategy))
    def test_every_strategy_produces_valid_ramp(self, strategy):
        """Every strategy yields a full ramp of valid colors."""
        ramp = generate_variants(self.base, 3, 70, strategy,
                                 prev_hsl=HSL(h=170, s=40, l=40),
                                 next_hsl=HSL(h=230, s=60, l=60))
        assert len(ramp) == 7
        assert all(len(stop.hex) == 7 for stop in ramp)
        assert ramp[3].hex == hsl_to_hex(200, 50, 50)

    def test_blend_without_neighbours_scales_lightness(self):
        """Blend strategies fall back to lightness scaling without neighbours."""
        blended = generate_variants(self.base, 3, 50, VariantStrategy.BLEND)
        plain = generate_variants(self.base, 3, 50, "not a strategy")
        assert [s.hex for s in blended] == [s.hex for s in plain]

    def test_blend_moves_toward_neighbour(self):
        """The right side of a blend ramp moves toward the next point."""
        ramp = generate_variants(self.base, 3, 100, VariantStrategy.BLEND,
                                 prev_hsl=HSL(h=180, s=50, l=50),
                                 next_hsl=HSL(h=240, s=50, l=50))
        assert ramp[-1].hsl.h > 200
        assert ramp[0].hsl.h < 200

    def test_extended_space_ramp(self):
        """Ramps build in the perceptual spaces too."""
        ramp = generate_variants(HSL(h=250, s=80, l=60), 2, 50, VariantStrategy.VIBRANT,
                                 space=ColorSpace.OKLCH)
        assert len(ramp) == 5
        assert ramp[2].coords is not None
