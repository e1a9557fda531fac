"""Semantic seed synthesis.

Nine seeds anchor every theme: the primary base color, a near-grey
neutral, an interactive and an info accent placed by the harmony rule, and
fixed-hue status colors. Token synthesis samples ramps built around these.
"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from ..schema import (
    HSL,
    SEED_NAMES,
    HarmonyRule,
    Override,
    SeedColor,
    SeedName,
    VariantStrategy,
)
from .converters import hex_to_hsl
from .core import create_color_stop
from .variants import generate_variants

logger = logging.getLogger(__name__)

NEUTRAL_SATURATION = 5.0
NEUTRAL_LIGHTNESS = 55.0

# name: (hue, lightness)
STATUS_SEEDS: Dict[SeedName, Tuple[float, float]] = {
    SeedName.SUCCESS: (115.0, 45.0),
    SeedName.WARNING: (40.0, 50.0),
    SeedName.ERROR: (5.0, 50.0),
}

# Hue offsets of the interactive and info seeds from the base, per rule
INTERACTIVE_INFO_OFFSETS = {
    HarmonyRule.MONOCHROMATIC: lambda a: (0, 0),
    HarmonyRule.ANALOGOUS: lambda a: (-a, a),
    HarmonyRule.ANALOGOUS_5: lambda a: (2 * a, -a),
    HarmonyRule.ACCENTED_ANALOGOUS: lambda a: (a, 180),
    HarmonyRule.COMPLEMENTARY: lambda a: (180, a),
    HarmonyRule.SPLIT_COMPLEMENTARY: lambda a: (180 + a, 180 - a),
    HarmonyRule.DOUBLE_SPLIT_COMPLEMENTARY: lambda a: (a, 180 + a),
    HarmonyRule.TRIADIC: lambda a: (120, 240),
    HarmonyRule.TETRADIC: lambda a: (a, 180),
    HarmonyRule.SQUARE: lambda a: (90, 270),
    HarmonyRule.COMPOUND: lambda a: (a, 180 - a),
    HarmonyRule.SHADES: lambda a: (0, a),
    HarmonyRule.SIX_TONE: lambda a: (a, 4 * a),
    HarmonyRule.GOLDEN: lambda a: (137.5, 275),
    HarmonyRule.NATURAL: lambda a: (-a, 180),
    HarmonyRule.VIVID_PASTEL: lambda a: (180 + a, 180 - a),
    HarmonyRule.PENTAGRAM: lambda a: (a, 3 * a),
    HarmonyRule.HARD_CLASH: lambda a: (-a, 180),
    HarmonyRule.DOUBLE_ANALOGOUS: lambda a: (120 + a, a),
    HarmonyRule.FULL_SPECTRUM: lambda a: (2 * a, 6 * a),
    HarmonyRule.CLASH_COMPLEMENTARY: lambda a: (a, 180),
    HarmonyRule.SYNTHWAVE: lambda a: (180 + a, 180),
    HarmonyRule.ANALOGOUS_CLASH: lambda a: (3 * a, a),
    HarmonyRule.DEEP_NIGHT: lambda a: (180, 180 + a),
    HarmonyRule.SOLAR_FLARE: lambda a: (30, 60),
    HarmonyRule.OCEANIC: lambda a: (210, 240),
    HarmonyRule.FOREST_EDGE: lambda a: (120, 150),
    HarmonyRule.CYBERPUNK: lambda a: (150, 300),
    HarmonyRule.ROYAL: lambda a: (270, 50),
    HarmonyRule.EARTHY: lambda a: (40, 60),
    HarmonyRule.PASTEL_DREAMS: lambda a: (240, 120),
}

# Override aliases a canonical seed reads when it has no override of its own
ALIAS_FALLBACKS: Dict[SeedName, List[str]] = {
    SeedName.DIFF_DELETE: ["critical"],
    SeedName.ERROR: ["critical"],
    SeedName.DIFF_ADD: ["accent"],
}


def interactive_info_offsets(rule, spread: float) -> Tuple[float, float]:
    """Hue offsets ``(interactive, info)`` for ``rule``."""
    try:
        offsets = INTERACTIVE_INFO_OFFSETS.get(HarmonyRule(rule))
    except ValueError:
        offsets = None
    if offsets is None:
        return spread, 180.0
    return offsets(spread)


def _seed(name: SeedName, h: float, s: float, l: float) -> SeedColor:
    stop = create_color_stop(h, s, l)
    return SeedColor(name=name, hsl=stop.hsl, hex=stop.hex)


def _from_stop(name: SeedName, stop) -> SeedColor:
    return SeedColor(name=name, hsl=stop.hsl, hex=stop.hex)


def generate_seeds(base: HSL, harmony: HarmonyRule, spread: float,
                   brightness: float = 50,
                   strategy: Optional[VariantStrategy] = None) -> List[SeedColor]:
    """Derive the nine semantic seeds from the generation parameters.

    Args:
        base: Base color in HSL
        harmony: Harmony rule placing the interactive and info accents
        spread: Spread angle for spread-dependent rules
        brightness: 50 is neutral; every seed's lightness shifts by
            ``brightness - 50``
        strategy: When given, interactive takes the dark step and info the
            light step of a one-step ramp of this strategy

    Returns:
        Seeds in ``SEED_NAMES`` order
    """
    off = brightness - 50
    interactive_offset, info_offset = interactive_info_offsets(harmony, spread)
    semantic_sat = max(10.0, base.s)

    seeds: Dict[SeedName, SeedColor] = {
        SeedName.PRIMARY: _seed(SeedName.PRIMARY, base.h, base.s, base.l + off),
        SeedName.NEUTRAL: _seed(SeedName.NEUTRAL, base.h, NEUTRAL_SATURATION, NEUTRAL_LIGHTNESS + off),
    }

    interactive_raw = HSL.normalized(base.h + interactive_offset, min(100.0, base.s + 10), 50 + off)
    info_raw = HSL.normalized(base.h + info_offset, base.s, 55 + off)

    if strategy is not None:
        seeds[SeedName.INTERACTIVE] = _from_stop(
            SeedName.INTERACTIVE, generate_variants(interactive_raw, 1, 50, strategy)[0]
        )
        seeds[SeedName.INFO] = _from_stop(
            SeedName.INFO, generate_variants(info_raw, 1, 50, strategy)[2]
        )
    else:
        seeds[SeedName.INTERACTIVE] = _seed(SeedName.INTERACTIVE, *interactive_raw.as_tuple())
        seeds[SeedName.INFO] = _seed(SeedName.INFO, *info_raw.as_tuple())

    for name, (hue, lightness) in STATUS_SEEDS.items():
        seeds[name] = _seed(name, hue, semantic_sat, lightness + off)

    success = seeds[SeedName.SUCCESS]
    error = seeds[SeedName.ERROR]
    seeds[SeedName.DIFF_ADD] = SeedColor(name=SeedName.DIFF_ADD, hsl=success.hsl, hex=success.hex)
    seeds[SeedName.DIFF_DELETE] = SeedColor(name=SeedName.DIFF_DELETE, hsl=error.hsl, hex=error.hex)

    return [seeds[name] for name in SEED_NAMES]


def resolve_seed_hex(name, seeds: List[SeedColor],
                     overrides: Optional[Mapping[str, object]] = None) -> str:
    """Effective hex of one seed after overrides.

    Raises:
        KeyError: If ``name`` is not one of the nine seed names
    """
    try:
        seed_name = SeedName(name)
    except ValueError:
        raise KeyError(f"Unknown seed name: {name}")

    overrides = overrides or {}
    explicit = Override.parse(overrides.get(seed_name.value))
    if explicit.is_set:
        return explicit.value

    for alias in ALIAS_FALLBACKS.get(seed_name, []):
        aliased = Override.parse(overrides.get(alias))
        if aliased.is_set:
            return aliased.value

    by_name = {seed.name: seed for seed in seeds}
    if seed_name in by_name:
        return by_name[seed_name].hex

    neutral = by_name.get(SeedName.NEUTRAL)
    logger.debug(f"Seed {seed_name.value} missing, falling back to neutral")
    return neutral.hex if neutral else "#808080"


def apply_seed_overrides(seeds: List[SeedColor],
                         overrides: Optional[Mapping[str, object]] = None) -> List[SeedColor]:
    """Return the nine seeds with user overrides applied.

    Overridden seeds carry the HSL of their new hex.
    """
    generated = {seed.name: seed for seed in seeds}
    resolved: List[SeedColor] = []
    for name in SEED_NAMES:
        hex_color = resolve_seed_hex(name, seeds, overrides)
        original = generated.get(name)
        if original is not None and original.hex == hex_color:
            resolved.append(original)
        else:
            resolved.append(SeedColor(name=name, hsl=hex_to_hsl(hex_color), hex=hex_color))
    return resolved


def seeds_to_dict(seeds: List[SeedColor]) -> Dict[str, str]:
    """Seed name to hex mapping, in seed order."""
    return {seed.name.value: seed.hex for seed in seeds}
