"""Harmony rule geometry and palette group construction.

Each rule maps a spread angle to an ordered list of offsets from the base
color. Most rules only offset hue; the mood rules (Natural, Vivid & Pastel,
Deep Night, Solar Flare and friends) also shift saturation and lightness.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional

from ..schema import (
    HSL,
    ColorSpace,
    HarmonyRule,
    OutputFormat,
    PaletteGroup,
    VariantStrategy,
)
from .core import create_color_stop
from .variants import generate_variants

logger = logging.getLogger(__name__)


class HarmonyStep(NamedTuple):
    """Offset of one harmony point from the base color"""
    h: float
    s: float = 0.0
    l: float = 0.0

    @property
    def is_anchor(self) -> bool:
        return self.h == 0 and self.s == 0 and self.l == 0


S = HarmonyStep

HARMONY_STEPS: Dict[HarmonyRule, Callable[[float], List[HarmonyStep]]] = {
    HarmonyRule.MONOCHROMATIC: lambda a: [S(0)],
    HarmonyRule.ANALOGOUS: lambda a: [S(-a), S(0), S(a)],
    HarmonyRule.ANALOGOUS_5: lambda a: [S(-2 * a), S(-a), S(0), S(a), S(2 * a)],
    HarmonyRule.ACCENTED_ANALOGOUS: lambda a: [S(-a), S(0), S(a), S(180)],
    HarmonyRule.NATURAL: lambda a: [S(-a, 15, -15), S(0), S(a, -10, 15)],
    HarmonyRule.COMPLEMENTARY: lambda a: [S(0), S(180)],
    HarmonyRule.SPLIT_COMPLEMENTARY: lambda a: [S(180 - a), S(0), S(180 + a)],
    HarmonyRule.TRIADIC: lambda a: [S(0), S(120), S(240)],
    HarmonyRule.TETRADIC: lambda a: [S(0), S(a), S(180), S(180 + a)],
    HarmonyRule.SQUARE: lambda a: [S(0), S(90), S(180), S(270)],
    HarmonyRule.DOUBLE_SPLIT_COMPLEMENTARY: lambda a: [S(-a), S(0), S(a), S(180 - a), S(180 + a)],
    HarmonyRule.SIX_TONE: lambda a: [S(i * a) for i in range(6)],
    HarmonyRule.COMPOUND: lambda a: [S(0), S(a), S(180 - a)],
    HarmonyRule.SHADES: lambda a: [S(0)],
    HarmonyRule.GOLDEN: lambda a: [S(0), S(137.5), S(275), S(412.5)],
    HarmonyRule.VIVID_PASTEL: lambda a: [S(0), S(180 - a, -40, 25), S(180 + a, -40, 25)],
    HarmonyRule.PENTAGRAM: lambda a: [S(i * a) for i in range(5)],
    HarmonyRule.HARD_CLASH: lambda a: [S(0), S(a), S(360 - a)],
    HarmonyRule.DOUBLE_ANALOGOUS: lambda a: [S(0), S(a), S(120), S(120 + a)],
    HarmonyRule.FULL_SPECTRUM: lambda a: [S(i * a) for i in range(8)],
    HarmonyRule.CLASH_COMPLEMENTARY: lambda a: [S(0), S(a), S(180)],
    HarmonyRule.SYNTHWAVE: lambda a: [S(0), S(180), S(180 + a)],
    HarmonyRule.ANALOGOUS_CLASH: lambda a: [S(0), S(a), S(3 * a)],
    HarmonyRule.DEEP_NIGHT: lambda a: [S(0, -20, -30), S(180, -10, -40), S(180 + a, -10, -40)],
    HarmonyRule.SOLAR_FLARE: lambda a: [S(0, 20, 10), S(30, 15, 5), S(60, 10, 0)],
    HarmonyRule.OCEANIC: lambda a: [S(180, 10, -10), S(210, 5, -5), S(240, 0, 0)],
    HarmonyRule.FOREST_EDGE: lambda a: [S(90, -10, -15), S(120, -5, -10), S(150, 0, -5)],
    HarmonyRule.CYBERPUNK: lambda a: [S(0, 30, 5), S(150, 20, 0), S(300, 25, 10)],
    HarmonyRule.ROYAL: lambda a: [S(0, 10, -10), S(270, 15, -5), S(50, 20, 10)],
    HarmonyRule.EARTHY: lambda a: [S(20, -10, -20), S(40, -15, -15), S(60, -10, -10)],
    HarmonyRule.PASTEL_DREAMS: lambda a: [S(0, -40, 30), S(120, -45, 35), S(240, -40, 30)],
}


def harmony_steps(rule, spread: float) -> List[HarmonyStep]:
    """Offsets for ``rule``; unknown rules give a single 0-offset point."""
    try:
        rule = HarmonyRule(rule)
    except ValueError:
        logger.debug(f"Unknown harmony rule {rule!r}, using a single point")
        return [S(0)]
    return HARMONY_STEPS[rule](spread)


def anchor_index(steps: List[HarmonyStep]) -> int:
    """Index of the point marked as the harmony's base.

    The first zero-offset step. Mood rules such as Oceanic have no such
    step, and anchor on their first point instead.
    """
    for idx, step in enumerate(steps):
        if step.is_anchor:
            return idx
    return 0


def harmony_points(base: HSL, rule, spread: float = 30,
                   space: ColorSpace = ColorSpace.HSL) -> List[HSL]:
    """Absolute triplets of every harmony point, clamped for ``space``."""
    max_s = space.max_saturation
    return [
        HSL.normalized(base.h + step.h, base.s + step.s, base.l + step.l, max_s)
        for step in harmony_steps(rule, spread)
    ]


def generate_harmony(base: HSL, rule: HarmonyRule, spread: float = 30,
                     variant_count: int = 2, contrast: float = 50,
                     strategy: VariantStrategy = VariantStrategy.TINTS_SHADES,
                     space: ColorSpace = ColorSpace.HSL,
                     output: OutputFormat = OutputFormat.SRGB,
                     brightness: float = 50) -> List[PaletteGroup]:
    """Build one palette group per harmony point.

    Args:
        base: Base triplet in ``space`` units
        rule: Harmony rule
        spread: Angle used by spread-dependent rules
        variant_count: Ramp steps per side
        contrast: Ramp contrast, 0-100
        strategy: Ramp strategy
        space: Generation color space
        output: Display format
        brightness: Ramp brightness, 50 is neutral

    Returns:
        Groups in rule order. Exactly one group's base has ``is_base`` set.
    """
    points = harmony_points(base, rule, spread, space)
    anchor = anchor_index(harmony_steps(rule, spread))

    groups: List[PaletteGroup] = []
    for idx, point in enumerate(points):
        prev_point: Optional[HSL] = points[idx - 1]
        next_point: Optional[HSL] = points[(idx + 1) % len(points)]
        groups.append(PaletteGroup(
            base=create_color_stop(point.h, point.s, point.l, idx == anchor, space, output),
            variants=generate_variants(
                point, variant_count, contrast, strategy, space, output,
                brightness=brightness, prev_hsl=prev_point, next_hsl=next_point,
            ),
        ))

    logger.debug(f"Generated {len(groups)} harmony groups for {getattr(rule, 'value', rule)}")
    return groups
