"""Color stop factory.

``create_color_stop`` is the single place where an (h, s, l) triplet in one
of the generation spaces becomes a :class:`ColorStop`. Everything above this
layer consumes stops, never raw numbers.
"""

import logging
import math

from coloraide.everything import ColorAll as Color

from ..schema import (
    HSL,
    Cam02Coords,
    ColorSpace,
    ColorStop,
    HsluvCoords,
    OutputFormat,
    SpaceCoords,
    normalize_hue,
)
from .converters import (
    hex_to_hsl,
    hsl_to_display,
    hsl_to_hex,
    hsluv_to_display,
    hsluv_to_hex,
    ipt_opponents,
    ipt_to_hex,
    jch_to_display,
    jch_to_hex,
    lch_to_hex,
    luv_to_hex,
    ok_lch_to_hex,
)

logger = logging.getLogger(__name__)


def _space_string(space_name: str, coords, fallback: str) -> str:
    try:
        return Color(space_name, coords).to_string()
    except Exception as e:
        logger.debug(f"Could not format {space_name} {coords}: {e}")
        return fallback


def create_color_stop(h: float, s: float, l: float, is_base: bool = False,
                      space: ColorSpace = ColorSpace.HSL,
                      output: OutputFormat = OutputFormat.SRGB) -> ColorStop:
    """Create a color stop from a triplet in ``space``.

    Args:
        h: Hue in degrees, any value (wrapped into [0, 360))
        s: Saturation, or chroma for perceptual spaces
        l: Lightness (J for CAM02, I for IPT)
        is_base: Marks a ramp center or harmony anchor
        space: Space the triplet is expressed in
        output: Display format for ``display_string``

    Returns:
        ColorStop with a valid hex. Conversion failures degrade inside the
        converters and are never raised from here.
    """
    nh = normalize_hue(h)
    ns = min(space.max_saturation, max(0.0, s))
    nl = min(100.0, max(0.0, l))
    srgb_out = output == OutputFormat.SRGB

    cam02 = None
    hsluv = None
    coords = None

    if space == ColorSpace.CAM02:
        hex_color = jch_to_hex(nl, ns, nh)
        display = jch_to_display(nl, ns, nh, output)
        hsl = hex_to_hsl(hex_color)
        cam02 = Cam02Coords(j=nl, c=ns, h=nh)
    elif space == ColorSpace.HSLUV:
        ns = min(100.0, ns)
        hex_color = hsluv_to_hex(nh, ns, nl)
        display = hsluv_to_display(nh, ns, nl, output)
        hsl = hex_to_hsl(hex_color)
        hsluv = HsluvCoords(h=nh, s=ns, l=nl)
    elif space == ColorSpace.LCH_D50:
        hex_color = lch_to_hex(nl, ns, nh, "D50")
        display = hex_color if srgb_out else _space_string("lch", [nl, ns, nh], hex_color)
        hsl = hex_to_hsl(hex_color)
        coords = SpaceCoords(l=nl, c=ns, h=nh)
    elif space == ColorSpace.LCH_D65:
        hex_color = lch_to_hex(nl, ns, nh, "D65")
        rad = math.radians(nh)
        display = hex_color if srgb_out else _space_string(
            "lab-d65", [nl, ns * math.cos(rad), ns * math.sin(rad)], hex_color
        )
        hsl = hex_to_hsl(hex_color)
        coords = SpaceCoords(l=nl, c=ns, h=nh)
    elif space == ColorSpace.OKLCH:
        hex_color = ok_lch_to_hex(nl, ns, nh)
        display = hex_color if srgb_out else _space_string(
            "oklch", [nl / 100, ns / 500, nh], hex_color
        )
        hsl = hex_to_hsl(hex_color)
        coords = SpaceCoords(l=nl, c=ns, h=nh)
    elif space == ColorSpace.IPT:
        hex_color = ipt_to_hex(nl, ns, nh)
        p, t = ipt_opponents(ns, nh)
        display = hex_color if srgb_out else _space_string("ipt", [nl / 100, p, t], hex_color)
        hsl = hex_to_hsl(hex_color)
        coords = SpaceCoords(l=nl, c=ns, h=nh, a=p, b=t)
    elif space == ColorSpace.LCH_UV:
        hex_color = luv_to_hex(nl, ns, nh)
        display = hex_color if srgb_out else _space_string("lchuv", [nl, ns, nh], hex_color)
        hsl = hex_to_hsl(hex_color)
        coords = SpaceCoords(l=nl, c=ns, h=nh)
    else:
        ns = min(100.0, ns)
        hex_color = hsl_to_hex(nh, ns, nl)
        display = hsl_to_display(nh, ns, nl, output)
        hsl = HSL(h=nh, s=ns, l=nl)

    return ColorStop(
        hsl=hsl,
        hex=hex_color,
        display_string=display,
        is_base=is_base,
        cam02=cam02,
        hsluv=hsluv,
        coords=coords,
    )


def shortest_hue_delta(start: float, end: float) -> float:
    """Signed hue difference from ``start`` to ``end`` along the short arc."""
    delta = end - start
    if delta > 180:
        delta -= 360
    elif delta < -180:
        delta += 360
    return delta


def interpolate_values(start: HSL, end: HSL, t: float):
    """Interpolate two triplets, taking the short way around the hue circle.

    Returns a raw ``(h, s, l)`` tuple; the hue is not wrapped.
    """
    dh = shortest_hue_delta(start.h, end.h)
    return (
        start.h + dh * t,
        start.s + (end.s - start.s) * t,
        start.l + (end.l - start.l) * t,
    )
