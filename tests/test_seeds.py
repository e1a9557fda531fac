"""Tests for semantic seed generation and overrides."""

import pytest

from theme_forge.engine.converters import hsl_to_hex
from theme_forge.engine.seeds import (
    apply_seed_overrides,
    generate_seeds,
    interactive_info_offsets,
    resolve_seed_hex,
    seeds_to_dict,
)
from theme_forge.schema import HSL, SEED_NAMES, HarmonyRule, SeedName, VariantStrategy


class TestGenerateSeeds:
    """Test deriving the nine seeds."""

    def setup_method(self):
        """Generate seeds for an analogous theme."""
        self.base = HSL(h=200, s=60, l=50)
        self.seeds = generate_seeds(self.base, HarmonyRule.ANALOGOUS, 30)
        self.by_name = {seed.name: seed for seed in self.seeds}

    def test_nine_seeds_in_order(self):
        """All nine seeds are produced in canonical order."""
        assert [seed.name for seed in self.seeds] == SEED_NAMES

    def test_primary_is_base(self):
        """Primary is the base color."""
        assert self.by_name[SeedName.PRIMARY].hex == hsl_to_hex(200, 60, 50)

    def test_neutral_is_desaturated(self):
        """Neutral keeps the base hue at low saturation."""
        neutral = self.by_name[SeedName.NEUTRAL].hsl
        assert neutral.h == 200
        assert neutral.s == 5
        assert neutral.l == 55

    def test_analogous_accents(self):
        """Interactive and info sit on either side of the base."""
        interactive = self.by_name[SeedName.INTERACTIVE].hsl
        info = self.by_name[SeedName.INFO].hsl
        assert interactive.h == 170
        assert interactive.s == 70
        assert info.h == 230
        assert info.l == 55

    def test_status_seeds(self):
        """Status seeds use fixed hues with the base saturation."""
        assert self.by_name[SeedName.SUCCESS].hsl.h == 115
        assert self.by_name[SeedName.WARNING].hsl.h == 40
        assert self.by_name[SeedName.ERROR].hsl.h == 5
        assert self.by_name[SeedName.SUCCESS].hsl.s == 60

    def test_diff_seeds_mirror_status(self):
        """Diff seeds copy success and error."""
        assert self.by_name[SeedName.DIFF_ADD].hex == self.by_name[SeedName.SUCCESS].hex
        assert self.by_name[SeedName.DIFF_DELETE].hex == self.by_name[SeedName.ERROR].hex

    def test_brightness_offsets_lightness(self):
        """Brightness shifts every seed's lightness."""
        bright = {s.name: s for s in generate_seeds(self.base, HarmonyRule.ANALOGOUS, 30, brightness=60)}
        assert bright[SeedName.PRIMARY].hsl.l == 60
        assert bright[SeedName.NEUTRAL].hsl.l == 65

    def test_low_saturation_floor(self):
        """Status seeds keep at least 10% saturation."""
        seeds = {s.name: s for s in generate_seeds(HSL(h=0, s=0, l=50), HarmonyRule.TRIADIC, 30)}
        assert seeds[SeedName.WARNING].hsl.s == 10

    def test_strategy_changes_accents(self):
        """A strategy moves interactive and info onto its ramp."""
        seeds = {s.name: s for s in generate_seeds(self.base, HarmonyRule.ANALOGOUS, 30,
                                                    strategy=VariantStrategy.TINTS_SHADES)}
        assert seeds[SeedName.INTERACTIVE].hsl.l < 50
        assert seeds[SeedName.INFO].hsl.l > 55
        assert seeds[SeedName.PRIMARY].hex == self.by_name[SeedName.PRIMARY].hex

    def test_unknown_rule_offsets(self):
        """Unknown rules place interactive at the spread and info opposite."""
        assert interactive_info_offsets("Nonsense", 25) == (25, 180.0)


class TestSeedOverrides:
    """Test override resolution."""

    def setup_method(self):
        """Generate default seeds."""
        self.seeds = generate_seeds(HSL(h=120, s=50, l=50), HarmonyRule.COMPLEMENTARY, 30)

    def test_explicit_override(self):
        """An explicit hex replaces the seed and its HSL."""
        result = {s.name: s for s in apply_seed_overrides(self.seeds, {"primary": "#FF0000"})}
        assert result[SeedName.PRIMARY].hex == "#ff0000"
        assert result[SeedName.PRIMARY].hsl.s == pytest.approx(100)

    def test_unassigned_is_ignored(self):
        """The unassigned marker and junk values do not override."""
        result = apply_seed_overrides(self.seeds, {"primary": "unassigned", "neutral": "blue"})
        assert seeds_to_dict(result) == seeds_to_dict(self.seeds)

    def test_alias_fallbacks(self):
        """critical feeds error and diffDelete, accent feeds diffAdd."""
        overrides = {"critical": "#aa0000", "accent": "#00aa00"}
        assert resolve_seed_hex("error", self.seeds, overrides) == "#aa0000"
        assert resolve_seed_hex("diffDelete", self.seeds, overrides) == "#aa0000"
        assert resolve_seed_hex("diffAdd", self.seeds, overrides) == "#00aa00"

    def test_explicit_beats_alias(self):
        """A seed's own override wins over its alias."""
        overrides = {"critical": "#aa0000", "error": "#bb0000"}
        assert resolve_seed_hex("error", self.seeds, overrides) == "#bb0000"

    def test_missing_seed_falls_back_to_neutral(self):
        """A seed absent from the list resolves to neutral."""
        partial = [s for s in self.seeds if s.name != SeedName.INFO]
        neutral = next(s for s in self.seeds if s.name == SeedName.NEUTRAL)
        assert resolve_seed_hex("info", partial) == neutral.hex

    def test_unknown_seed_name(self):
        """Unknown seed names raise KeyError."""
        with pytest.raises(KeyError):
            resolve_seed_hex("bogus", self.seeds)

    def test_seeds_to_dict(self):
        """The dict maps seed names to hex in order."""
        assert list(seeds_to_dict(self.seeds)) == [name.value for name in SEED_NAMES]


class TestDefaultThemeSeeds:
    """Test seeds of the default parameters."""

    def test_primary_matches_color_stop(self):
        """With neutral brightness the primary seed is the base color stop."""
        from theme_forge.engine.core import create_color_stop
        seeds = generate_seeds(HSL(h=280, s=65, l=15), HarmonyRule.DOUBLE_SPLIT_COMPLEMENTARY, 30, 50)
        assert seeds[0].name == SeedName.PRIMARY
        assert seeds[0].hex == create_color_stop(280, 65, 15).hex
