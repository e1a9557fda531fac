"""Variant ramp generation.

A ramp is ``2 * count + 1`` stops: ``count`` transformed steps on the left,
the unmodified base at index ``count``, then ``count`` steps on the right.
Each step has a normalized position ``t = i / (count + 1)`` and every
strategy is a pair of (left, right) transforms of the base triplet driven by
``t`` and ``r = contrast / 100``. The two sides are mirrored but not
identical; keep them that way.
"""

import logging
import math
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from ..schema import HSL, ColorSpace, ColorStop, OutputFormat, VariantStrategy, normalize_hue
from .core import create_color_stop, interpolate_values, shortest_hue_delta

logger = logging.getLogger(__name__)

Triplet = Tuple[float, float, float]


class RampSide(NamedTuple):
    """Context handed to a transform for one side of the ramp."""
    base: HSL
    neighbour: Optional[HSL]
    max_sat: float


Transform = Callable[[float, float, float, float, float, RampSide], Triplet]


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _drift(h: float, target: float, amount: float) -> float:
    """Move a hue toward ``target`` along the short arc by ``amount`` (0-1)."""
    return normalize_hue(h + shortest_hue_delta(h, target) * amount)


def _darken(h, s, l, t, r, side):
    return h, s, l - l * r * t


def _lighten(h, s, l, t, r, side):
    return h, s, l + (100 - l) * r * t


def _blend(h, s, l, t, r, side):
    return interpolate_values(side.base, side.neighbour, t * r)


def _shaded_blend_left(h, s, l, t, r, side):
    bh, bs, _ = interpolate_values(side.base, side.neighbour, t * r)
    return bh, bs, l - l * r * t * 1.5


def _shaded_blend_right(h, s, l, t, r, side):
    bh, bs, _ = interpolate_values(side.base, side.neighbour, t * r)
    return bh, bs, l + (100 - l) * r * t


def _smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


def _crystal_wave(t: float) -> float:
    return abs((t * 2) % 2 - 1)


def _glitch(h, s, l, t, r, side, right: bool):
    segment = math.floor(t * 3)
    boosted = (segment % 2 != 0) if right else (segment % 2 == 0)
    hue = normalize_hue(h + (30 if boosted else -30) * r)
    sat = min(100.0, s + (20 * r if boosted else 0))
    if right:
        return hue, sat, min(100.0, l + (100 - l) * r * t)
    return hue, sat, max(0.0, l - l * r * t)


def _memphis(l: float, t: float, r: float, away_from_middle: bool) -> float:
    if (l > 50) == away_from_middle:
        return min(90.0, l + 50 * t * r)
    return max(10.0, l - 50 * t * r)


def _solarized(l: float, t: float, r: float, right: bool) -> float:
    darker = (l < 50) != right
    return max(10.0, l - 10 * t * r) if darker else min(90.0, l + 10 * t * r)


STRATEGY_TRANSFORMS: Dict[VariantStrategy, Tuple[Transform, Transform]] = {
    VariantStrategy.TINTS_SHADES: (
        lambda h, s, l, t, r, x: (h, s, l - l * r * t * 1.5),
        lambda h, s, l, t, r, x: (h, s, l + (100 - l) * r * t),
    ),
    VariantStrategy.TONES: (
        lambda h, s, l, t, r, x: (h, s - s * r * t, l - 10 * t * r),
        lambda h, s, l, t, r, x: (h, s - s * r * t, l + (100 - l) * r * t * 0.5),
    ),
    VariantStrategy.VIBRANT: (
        lambda h, s, l, t, r, x: (h, s + 20 * t * r, l - l * r * t),
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, l + (100 - l) * r * t),
    ),
    VariantStrategy.BLEND: (_blend, _blend),
    VariantStrategy.SHADED_BLEND: (_shaded_blend_left, _shaded_blend_right),
    VariantStrategy.ATMOSPHERIC: (
        lambda h, s, l, t, r, x: (_drift(h, 240, t * 0.6 * r), s * (1 - 0.05 * t * r), l - l * r * t * 1.2),
        lambda h, s, l, t, r, x: (_drift(h, 60, t * 0.6 * r), s * (1 + 0.05 * t * r), l + (100 - l) * r * t),
    ),
    VariantStrategy.PASTEL: (
        lambda h, s, l, t, r, x: (h, max(10.0, s - 30 * r * t), max(60.0, l - 20 * r * t)),
        lambda h, s, l, t, r, x: (h, max(5.0, s - 50 * r * t), min(98.0, l + (100 - l) * t * r)),
    ),
    VariantStrategy.DEEP: (
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, max(5.0, l - l * r * t * 1.8)),
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, min(60.0, l + 20 * t * r)),
    ),
    VariantStrategy.ACID: (
        lambda h, s, l, t, r, x: (normalize_hue(h - t * 50 * r), s + 20 * r, l - l * r * t),
        lambda h, s, l, t, r, x: (normalize_hue(h + t * 50 * r), s + 20 * r, l + (100 - l) * r * t),
    ),
    VariantStrategy.NEON: (
        lambda h, s, l, t, r, x: (h, x.max_sat, max(5.0, l - l * t * 2 * r)),
        lambda h, s, l, t, r, x: (h, x.max_sat, min(95.0, l + (100 - l) * t * r)),
    ),
    VariantStrategy.METALLIC: (
        lambda h, s, l, t, r, x: (h, max(0.0, s - 30 * t * r), l - l * math.sin(t * math.pi / 2) * r),
        lambda h, s, l, t, r, x: (h, max(0.0, s - 30 * t * r),
                                  min(100.0, l + (100 - l) * math.sin(t * math.pi / 2) * r * 1.2)),
    ),
    VariantStrategy.IRIDESCENT: (
        lambda h, s, l, t, r, x: (normalize_hue(h - t * 90 * r), s + 10 * r, max(10.0, l - 30 * t * r)),
        lambda h, s, l, t, r, x: (normalize_hue(h + t * 90 * r), s + 10 * r, min(95.0, l + 30 * t * r)),
    ),
    VariantStrategy.CLAY: (
        lambda h, s, l, t, r, x: (_drift(h, 30, t * 0.4 * r), max(0.0, s - 40 * t * r), max(10.0, l - l * r * t)),
        lambda h, s, l, t, r, x: (_drift(h, 30, t * 0.4 * r), max(0.0, s - 40 * t * r),
                                  min(90.0, l + (100 - l) * r * t)),
    ),
    VariantStrategy.GLOSSY: (
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, max(0.0, l - l * r * _smoothstep(t) * 1.8)),
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, min(100.0, l + (100 - l) * r * _smoothstep(t) * 1.2)),
    ),
    VariantStrategy.X_RAY: (
        lambda h, s, l, t, r, x: (h, s, _clamp((100 - l) + t * 20 * r)),
        lambda h, s, l, t, r, x: (h, s, _clamp((100 - l) - t * 20 * r)),
    ),
    VariantStrategy.CRYSTALLINE: (
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, _clamp(l - 30 * _crystal_wave(t) * r)),
        lambda h, s, l, t, r, x: (h, max(0.0, s - 10 * t * r), min(100.0, l + 30 * _crystal_wave(t) * r)),
    ),
    VariantStrategy.RADIOACTIVE: (
        lambda h, s, l, t, r, x: (normalize_hue(h + t * 10 * r), x.max_sat, _clamp(l - 40 * t * r)),
        lambda h, s, l, t, r, x: (normalize_hue(h - t * 10 * r), x.max_sat, min(100.0, l + 40 * t * r)),
    ),
    VariantStrategy.HYPER: (
        lambda h, s, l, t, r, x: (h, s * (1 + 0.5 * r), max(0.0, l - l * r * t * 2)),
        lambda h, s, l, t, r, x: (h, s * (1 + 0.5 * r), min(100.0, l + (100 - l) * r * t * 2)),
    ),
    VariantStrategy.LUMINOUS: (
        lambda h, s, l, t, r, x: (h, s + 10 * t * r, max(40.0, l - 20 * t * r)),
        lambda h, s, l, t, r, x: (h, s + 5 * t * r, min(98.0, l + (100 - l) * t * r)),
    ),
    VariantStrategy.VELVET: (
        lambda h, s, l, t, r, x: (h, max(30.0, s - 10 * t * r), max(5.0, l - l * t * 1.5 * r)),
        lambda h, s, l, t, r, x: (h, max(30.0, s - 10 * t * r), min(50.0, l + 20 * t * r)),
    ),
    VariantStrategy.TOXIC: (
        lambda h, s, l, t, r, x: (normalize_hue(h + t * 45 * r), x.max_sat, max(20.0, l - 30 * t * r)),
        lambda h, s, l, t, r, x: (normalize_hue(h - t * 45 * r), x.max_sat, min(80.0, l + 30 * t * r)),
    ),
    VariantStrategy.VINTAGE: (
        lambda h, s, l, t, r, x: (_drift(h, 40, t * 0.3 * r), max(10.0, s - 30 * t * r), max(20.0, l - 30 * t * r)),
        lambda h, s, l, t, r, x: (_drift(h, 40, t * 0.3 * r), s, min(80.0, l + 20 * t * r)),
    ),
    VariantStrategy.WARM: (
        lambda h, s, l, t, r, x: (_drift(h, 30, t * 0.2 * r), s + 10 * t * r, l - 10 * t * r),
        lambda h, s, l, t, r, x: (_drift(h, 30, t * 0.2 * r), s + 10 * t * r, l + 10 * t * r),
    ),
    VariantStrategy.COOL: (
        lambda h, s, l, t, r, x: (_drift(h, 210, t * 0.2 * r), s - 5 * t * r, l - 5 * t * r),
        lambda h, s, l, t, r, x: (_drift(h, 210, t * 0.2 * r), s - 5 * t * r, l + 5 * t * r),
    ),
    VariantStrategy.GLACIAL: (
        lambda h, s, l, t, r, x: (_drift(h, 200, t * 0.3 * r), s, min(95.0, l + 10 * t * r)),
        lambda h, s, l, t, r, x: (_drift(h, 200, t * 0.3 * r), s, min(100.0, l + (100 - l) * t * r)),
    ),
    VariantStrategy.HEATWAVE: (
        lambda h, s, l, t, r, x: (_drift(h, 10, t * 0.2 * r), s + 20 * t * r, l),
        lambda h, s, l, t, r, x: (_drift(h, 10, t * 0.2 * r), s + 20 * t * r, l),
    ),
    VariantStrategy.CINEMATIC: (
        lambda h, s, l, t, r, x: (_drift(h, 190, t * 0.8 * r), s, max(10.0, l - l * t * 1.5 * r)),
        lambda h, s, l, t, r, x: (_drift(h, 30, t * 0.8 * r), s, min(95.0, l + (100 - l) * t * 1.5 * r)),
    ),
    VariantStrategy.MEMPHIS: (
        lambda h, s, l, t, r, x: (h, s, _memphis(l, t, r, away_from_middle=False)),
        lambda h, s, l, t, r, x: (h, s, _memphis(l, t, r, away_from_middle=True)),
    ),
    VariantStrategy.GLITCH: (
        lambda h, s, l, t, r, x: _glitch(h, s, l, t, r, x, right=False),
        lambda h, s, l, t, r, x: _glitch(h, s, l, t, r, x, right=True),
    ),
    VariantStrategy.SOLARIZED: (
        lambda h, s, l, t, r, x: (h, max(10.0, s - 10 * t * r), _solarized(l, t, r, right=False)),
        lambda h, s, l, t, r, x: (h, max(10.0, s - 10 * t * r), _solarized(l, t, r, right=True)),
    ),
    VariantStrategy.NORDIC: (
        lambda h, s, l, t, r, x: (_drift(h, 210, t * 0.2 * r), max(5.0, s - 20 * t * r), max(20.0, l - 10 * t * r)),
        lambda h, s, l, t, r, x: (_drift(h, 210, t * 0.2 * r), max(5.0, s - 20 * t * r), min(90.0, l + 10 * t * r)),
    ),
    VariantStrategy.DRACULA: (
        lambda h, s, l, t, r, x: (_drift(h, 250, t * 0.2 * r), max(20.0, s + 10 * t * r), max(10.0, l - 20 * t * r)),
        lambda h, s, l, t, r, x: (_drift(h, 250, t * 0.2 * r), max(20.0, s + 10 * t * r), min(95.0, l + 15 * t * r)),
    ),
    VariantStrategy.MONOKAI: (
        lambda h, s, l, t, r, x: (_drift(h, 330, t * 0.2 * r), max(40.0, s + 15 * t * r), max(15.0, l - 15 * t * r)),
        lambda h, s, l, t, r, x: (_drift(h, 330, t * 0.2 * r), max(40.0, s + 15 * t * r), min(95.0, l + 15 * t * r)),
    ),
    VariantStrategy.GRUVBOX: (
        lambda h, s, l, t, r, x: (_drift(h, 35, t * 0.2 * r), max(20.0, s - 5 * t * r), max(10.0, l - 10 * t * r)),
        lambda h, s, l, t, r, x: (_drift(h, 35, t * 0.2 * r), max(20.0, s - 5 * t * r), min(90.0, l + 10 * t * r)),
    ),
}

DEFAULT_TRANSFORMS: Tuple[Transform, Transform] = (_darken, _lighten)

# Strategies that blend toward the neighbouring harmony point
NEIGHBOUR_STRATEGIES = frozenset({VariantStrategy.BLEND, VariantStrategy.SHADED_BLEND})


def _resolve_strategy(strategy) -> Optional[VariantStrategy]:
    if isinstance(strategy, VariantStrategy):
        return strategy
    try:
        return VariantStrategy(strategy)
    except ValueError:
        logger.debug(f"Unknown variant strategy {strategy!r}, using lightness scaling")
        return None


def _transform_for(strategy: Optional[VariantStrategy], neighbour: Optional[HSL],
                   right: bool) -> Transform:
    pair = STRATEGY_TRANSFORMS.get(strategy, DEFAULT_TRANSFORMS) if strategy else DEFAULT_TRANSFORMS
    if strategy in NEIGHBOUR_STRATEGIES and neighbour is None:
        pair = DEFAULT_TRANSFORMS
    return pair[1] if right else pair[0]


def generate_variants(base_hsl: HSL, count: int, contrast: float,
                      strategy: VariantStrategy,
                      space: ColorSpace = ColorSpace.HSL,
                      output: OutputFormat = OutputFormat.SRGB,
                      brightness: float = 50,
                      prev_hsl: Optional[HSL] = None,
                      next_hsl: Optional[HSL] = None) -> List[ColorStop]:
    """Build a variant ramp around ``base_hsl``.

    Args:
        base_hsl: Center triplet in ``space`` units
        count: Steps per side; the ramp has ``2 * count + 1`` stops
        contrast: Spread of the ramp, 0-100
        strategy: Transform pair to apply; unknown values fall back to plain
            lightness scaling
        space: Generation color space
        output: Display format for each stop
        brightness: 50 is neutral; every stop's lightness shifts by
            ``brightness - 50``
        prev_hsl: Previous harmony point, used by the blend strategies on
            the left side
        next_hsl: Next harmony point, used by the blend strategies on the
            right side

    Returns:
        Ordered list of stops with the base at index ``count``
    """
    h, s, l = base_hsl.h, base_hsl.s, base_hsl.l
    r = contrast / 100
    l_offset = brightness - 50
    max_sat = space.max_saturation
    resolved = _resolve_strategy(strategy)

    left = _transform_for(resolved, prev_hsl, right=False)
    right = _transform_for(resolved, next_hsl, right=True)
    left_side = RampSide(base=base_hsl, neighbour=prev_hsl, max_sat=max_sat)
    right_side = RampSide(base=base_hsl, neighbour=next_hsl, max_sat=max_sat)

    variants: List[ColorStop] = []

    for i in range(count, 0, -1):
        t = i / (count + 1)
        sh, ss, sl = left(h, s, l, t, r, left_side)
        variants.append(create_color_stop(sh, ss, _clamp(sl + l_offset), False, space, output))

    variants.append(create_color_stop(h, s, _clamp(l + l_offset), True, space, output))

    for i in range(1, count + 1):
        t = i / (count + 1)
        sh, ss, sl = right(h, s, l, t, r, right_side)
        variants.append(create_color_stop(sh, ss, _clamp(sl + l_offset), False, space, output))

    return variants
