"""Tests for design token synthesis."""

from theme_forge.engine.seeds import generate_seeds
from theme_forge.engine.variants import generate_variants
from theme_forge.engine.tokens import (
    LIGHT_SURFACE_CLAMP,
    TOKEN_NAMES,
    build_seed_ramps,
    sample_position,
    synthesize_tokens,
)
from theme_forge.schema import HSL, ColorSpace, HarmonyRule, SeedName, VariantStrategy, is_hex_color


class TestSamplePosition:
    """Test ramp position mapping."""

    def test_dark_mode_is_unchanged(self):
        """Dark mode samples positions as authored."""
        assert sample_position("text-base", 0.92, True) == 0.92
        assert sample_position("background-base", 0.01, True) == 0.01

    def test_light_mode_mirrors(self):
        """Light mode mirrors positions."""
        assert sample_position("text-base", 0.9, False) == 1 - 0.9

    def test_light_surfaces_are_clamped(self):
        """Light surfaces never sample above the clamp."""
        assert sample_position("background-base", 0.01, False) == LIGHT_SURFACE_CLAMP
        assert sample_position("surface-base", 0.5, False) == 0.5


class TestSynthesizeTokens:
    """Test the token map."""

    def setup_method(self):
        """Build seeds and short hex ramps."""
        self.seeds = generate_seeds(HSL(h=220, s=50, l=40), HarmonyRule.TRIADIC, 30)
        self.ramps = {
            SeedName.PRIMARY: ["#100000", "#200000", "#300000", "#400000", "#500000"],
            SeedName.NEUTRAL: ["#001000", "#002000", "#003000", "#004000", "#005000"],
        }

    def test_dark_sampling(self):
        """Dark backgrounds come from the dark end, text from the light end."""
        tokens = synthesize_tokens(self.seeds, self.ramps, True)
        assert tokens["background-base"] == "#100000"
        assert tokens["text-base"] == "#005000"

    def test_light_sampling(self):
        """Light mode mirrors text and clamps surfaces."""
        tokens = synthesize_tokens(self.seeds, self.ramps, False)
        assert tokens["background-base"] == "#400000"
        assert tokens["text-base"] == "#001000"

    def test_missing_ramp_uses_seed(self):
        """Tokens of a seed without a ramp take the seed color."""
        tokens = synthesize_tokens(self.seeds, self.ramps, True)
        interactive = next(s for s in self.seeds if s.name == SeedName.INTERACTIVE)
        assert tokens["text-interactive-base"] == interactive.hex

    def test_constant_tokens(self):
        """ANSI and shadow tokens are constants per mode."""
        dark = synthesize_tokens(self.seeds, self.ramps, True)
        light = synthesize_tokens(self.seeds, self.ramps, False)
        assert dark["terminal-ansi-black"] == "#000000"
        assert light["terminal-ansi-black"] == "#1f2937"
        assert dark["shadow"] == "rgba(0, 0, 0, 0.5)"
        assert light["overlay"] == "rgba(0, 0, 0, 0.3)"

    def test_overrides_take_precedence(self):
        """Hex overrides win; unassigned and empty values are ignored."""
        overrides = {"text-base": "#ABCDEF", "background-base": "unassigned", "text-weak": None}
        tokens = synthesize_tokens(self.seeds, self.ramps, True, overrides)
        plain = synthesize_tokens(self.seeds, self.ramps, True)
        assert tokens["text-base"] == "#abcdef"
        assert tokens["background-base"] == plain["background-base"]
        assert tokens["text-weak"] == plain["text-weak"]

    def test_every_token_present(self):
        """The map carries every known token."""
        tokens = synthesize_tokens(self.seeds, self.ramps, True)
        assert set(TOKEN_NAMES) <= set(tokens)


class TestBuildSeedRamps:
    """Test ramp construction per seed."""

    def test_one_ramp_per_seed(self):
        """Every seed gets a ramp of 2 * count + 1 stops."""
        seeds = generate_seeds(HSL(h=30, s=70, l=50), HarmonyRule.ANALOGOUS, 30)
        ramps = build_seed_ramps(seeds, 4, 50, VariantStrategy.TONES)
        assert set(ramps) == {seed.name for seed in seeds}
        assert all(len(ramp) == 9 for ramp in ramps.values())

    def test_ramp_centers_on_seed_coordinates(self):
        """Ramps in other spaces start from the seed coordinates as given."""
        seeds = generate_seeds(HSL(h=30, s=70, l=50), HarmonyRule.ANALOGOUS, 30)
        ramps = build_seed_ramps(seeds, 3, 50, space=ColorSpace.OKLCH)
        primary = next(s for s in seeds if s.name == SeedName.PRIMARY)
        assert ramps[SeedName.PRIMARY] == generate_variants(
            primary.hsl, 3, 50, VariantStrategy.TINTS_SHADES, ColorSpace.OKLCH
        )

    def test_real_ramps_give_hex_tokens(self):
        """Tokens sampled from generated ramps are hex colors."""
        seeds = generate_seeds(HSL(h=30, s=70, l=50), HarmonyRule.ANALOGOUS, 30)
        ramps = build_seed_ramps(seeds, 6, 50, space=ColorSpace.HSLUV)
        tokens = synthesize_tokens(seeds, ramps, False)
        assert is_hex_color(tokens["surface-base"])
        assert is_hex_color(tokens["text-strong"])
