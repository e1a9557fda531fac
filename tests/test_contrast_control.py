"""Tests for contrast intensity control."""

import pytest

from theme_forge.contrast_control import ContrastControl, ContrastSettings


class TestContrastControl:
    """Test the intensity mapping."""

    def setup_method(self):
        """Create a fresh control."""
        self.control = ContrastControl()

    def test_zero_intensity_is_single_color(self):
        """Zero intensity collapses both values."""
        assert self.control.calculate_contrast(0, True) == (20.0, 20.0)
        assert self.control.calculate_contrast(0, False) == (80.0, 80.0)

    def test_full_intensity(self):
        """Full intensity spans the whole range."""
        assert self.control.calculate_contrast(100, True) == (100.0, 0.0)
        assert self.control.calculate_contrast(100, False) == (0.0, 100.0)

    def test_mid_intensity(self):
        """Half intensity spreads evenly around the center."""
        light, dark = self.control.calculate_contrast(50, True)
        assert light == pytest.approx(25)
        assert dark == pytest.approx(75)

    def test_extreme_intensity_swaps(self):
        """Above 90 the pair is swapped."""
        light, dark = self.control.calculate_contrast(95, True)
        assert light > dark

    def test_intensity_is_clamped(self):
        """Out-of-range intensities clamp."""
        assert self.control.calculate_contrast(150, True) == (100.0, 0.0)
        assert self.control.calculate_contrast(-10, False) == (80.0, 80.0)

    def test_variant_lightness(self):
        """Zero intensity keeps the base lightness; results stay in range."""
        assert self.control.calculate_variant_lightness(40, 2, 5, 0, True) == 40
        for i in range(5):
            value = self.control.calculate_variant_lightness(40, i, 5, 70, True)
            assert 0 <= value <= 100

    def test_variant_lightness_follows_base(self):
        """The mode's contrast scales the ramp around the base lightness."""
        ramp = [self.control.calculate_variant_lightness(40, i, 5, 50, True) for i in range(5)]
        assert ramp[0] == pytest.approx(2.5)
        assert ramp[2] == pytest.approx(40)
        assert ramp[4] == pytest.approx(77.5)

    def test_descriptions(self):
        """Descriptions follow the intensity bands."""
        assert self.control.get_contrast_description(0) == "No Contrast (Single Color)"
        assert self.control.get_contrast_description(100) == "Maximum Dynamic Range"
        assert self.control.get_contrast_description(50) == "Medium Dynamic Contrast"
        assert self.control.get_contrast_description(10) == "Minimal Dynamic Contrast"

    def test_configure(self):
        """Known settings update; unknown ones are ignored."""
        self.control.configure(contrast_multiplier=0.5, bogus=1)
        settings = self.control.get_settings()
        assert settings["contrast_multiplier"] == 0.5
        assert "bogus" not in settings

    def test_custom_range(self):
        """Results stay within a custom range."""
        control = ContrastControl(ContrastSettings(min_contrast=20, max_contrast=80))
        light, dark = control.calculate_contrast(60, False)
        assert 20 <= light <= 80
        assert 20 <= dark <= 80
