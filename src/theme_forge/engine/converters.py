"""Color space conversion for the theme engine.

Every generator works in an (h, s, l)-shaped triplet whose meaning depends on
the active color space: plain HSL, CIECAM02 JCh, HSLuv, CIE LCh under D50 or
D65, OkLCh, IPT or CIE LCh(uv). This module converts those triplets to and
from sRGB hex and projects colors into display formats for presentation.

Conversions never raise. Out-of-gamut or failing conversions degrade to a
plain HSL approximation, to black/white, or to ``#000000``.
"""

import logging
import math
import warnings
from typing import Dict, Tuple

import colour
import numpy as np
from coloraide.everything import ColorAll as Color

from ..schema import HSL, ColorSpace, OutputFormat, is_hex_color, normalize_hue

logger = logging.getLogger(__name__)


# CIECAM02 viewing conditions: D65 white, adapting luminance 64/pi/5 cd/m^2,
# 20% background, average surround
_CAM02_XYZ_W = np.array([95.047, 100.0, 108.883])
_CAM02_L_A = 64 / math.pi / 5
_CAM02_Y_B = 20.0
_CAM02_SURROUND = colour.VIEWING_CONDITIONS_CIECAM02["Average"]

_CAM02_CHROMA_STEP = 2.5
_GAMUT_EPSILON = 1e-4

# Display target spaces, by output format
OUTPUT_TARGET_SPACES: Dict[OutputFormat, str] = {
    OutputFormat.SRGB: "srgb",
    OutputFormat.SRGB_LINEAR: "srgb-linear",
    OutputFormat.P3: "display-p3",
    OutputFormat.P3_LINEAR: "display-p3-linear",
    OutputFormat.ADOBE_RGB: "a98-rgb",
    OutputFormat.PROPHOTO_RGB: "prophoto-rgb",
    OutputFormat.REC_709: "srgb",
    OutputFormat.REC_2020: "rec2020",
    OutputFormat.REC_2100_HLG: "rec2020",
    OutputFormat.REC_2100_PQ: "rec2020",
    OutputFormat.ICTCP: "rec2020",
    OutputFormat.ACES_2065_1: "aces2065-1",
    OutputFormat.ACESCC: "acescc",
    OutputFormat.ACESCCT: "acescct",
    OutputFormat.ACESCG: "acescg",
    OutputFormat.HSL: "hsl",
    OutputFormat.HSV: "hsv",
    OutputFormat.HWB: "hwb",
    OutputFormat.XYZ_D50: "xyz-d50",
    OutputFormat.XYZ_D65: "xyz-d65",
    OutputFormat.RYB: "srgb",
}


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple.

    Args:
        hex_color: Hex color string (e.g., '#FF0000' or 'FF0000')

    Returns:
        RGB tuple (r, g, b) with values 0-255

    Raises:
        ValueError: If hex_color is not a valid hex color
    """
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: {hex_color}")

    try:
        return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))
    except ValueError as e:
        raise ValueError(f"Invalid hex color: {hex_color}") from e


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert 0-255 RGB channels to a lowercase hex color."""
    r, g, b = (max(0, min(255, int(round(v)))) for v in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL (degrees, percent, percent) to hex."""
    h_norm = normalize_hue(h)
    s_norm = max(0.0, min(100.0, s)) / 100
    l_norm = max(0.0, min(100.0, l)) / 100

    c = (1 - abs(2 * l_norm - 1)) * s_norm
    x = c * (1 - abs((h_norm / 60) % 2 - 1))
    m = l_norm - c / 2

    if h_norm < 60:
        r, g, b = c, x, 0.0
    elif h_norm < 120:
        r, g, b = x, c, 0.0
    elif h_norm < 180:
        r, g, b = 0.0, c, x
    elif h_norm < 240:
        r, g, b = 0.0, x, c
    elif h_norm < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    return rgb_to_hex((r + m) * 255, (g + m) * 255, (b + m) * 255)


def hex_to_hsl(hex_color: str) -> HSL:
    """Convert hex to unrounded HSL. Invalid input gives black."""
    try:
        r, g, b = (v / 255 for v in hex_to_rgb(hex_color))
    except ValueError:
        logger.debug(f"hex_to_hsl: invalid input {hex_color!r}")
        return HSL(h=0, s=0, l=0)

    max_c = max(r, g, b)
    min_c = min(r, g, b)
    l = (max_c + min_c) / 2
    h = s = 0.0

    if max_c != min_c:
        d = max_c - min_c
        s = d / (2 - max_c - min_c) if l > 0.5 else d / (max_c + min_c)
        if max_c == r:
            h = ((g - b) / d + (6 if g < b else 0)) / 6
        elif max_c == g:
            h = ((b - r) / d + 2) / 6
        else:
            h = ((r - g) / d + 4) / 6

    return HSL(h=normalize_hue(h * 360), s=min(100.0, s * 100), l=min(100.0, l * 100))


def _coloraide_hex(color: Color) -> str:
    """Gamut-map a coloraide color into sRGB and format it as hex."""
    if not color.in_gamut("srgb"):
        color = color.fit("srgb")
    return color.convert("srgb").to_string(hex=True)


def _finite(value: float) -> float:
    return value if isinstance(value, (int, float)) and math.isfinite(value) else 0.0


# CIECAM02

def _jch_to_srgb(j: float, c: float, h: float) -> np.ndarray:
    with warnings.catch_warnings(), np.errstate(all='ignore'):
        warnings.simplefilter("ignore")
        spec = colour.CAM_Specification_CIECAM02(J=j, C=c, h=h)
        xyz = colour.CIECAM02_to_XYZ(
            spec, _CAM02_XYZ_W, _CAM02_L_A, _CAM02_Y_B, _CAM02_SURROUND
        )
        return np.asarray(colour.XYZ_to_sRGB(np.asarray(xyz) / 100), dtype=float)


def _srgb_in_gamut(rgb: np.ndarray) -> bool:
    return bool(
        np.all(np.isfinite(rgb))
        and np.all(rgb >= -_GAMUT_EPSILON)
        and np.all(rgb <= 1 + _GAMUT_EPSILON)
    )


def _srgb_to_hex(rgb: np.ndarray) -> str:
    clipped = np.clip(rgb, 0, 1) * 255
    return rgb_to_hex(*clipped.tolist())


def jch_to_hex(j: float, c: float, h: float) -> str:
    """Convert CIECAM02 JCh to hex, reducing chroma until it fits sRGB."""
    safe_j = max(0.0, min(100.0, j))
    safe_c = max(0.0, c)
    if safe_j <= 0.5:
        return "#000000"
    if safe_j >= 99.5:
        return "#ffffff"

    try:
        current_c = safe_c
        while True:
            rgb = _jch_to_srgb(safe_j, current_c, normalize_hue(h))
            if _srgb_in_gamut(rgb):
                return _srgb_to_hex(rgb)
            if current_c <= 0:
                break
            current_c = max(0.0, current_c - _CAM02_CHROMA_STEP)
        return "#ffffff" if safe_j > 50 else "#000000"
    except Exception as e:
        logger.debug(f"jch_to_hex({j}, {c}, {h}) failed: {e}")
        return "#000000"


def hex_to_jch(hex_color: str) -> Tuple[float, float, float]:
    """Convert hex to CIECAM02 (J, C, h). Failures give zeros."""
    try:
        rgb = np.array(hex_to_rgb(hex_color), dtype=float) / 255
        with warnings.catch_warnings(), np.errstate(all='ignore'):
            warnings.simplefilter("ignore")
            xyz = np.asarray(colour.sRGB_to_XYZ(rgb)) * 100
            spec = colour.XYZ_to_CIECAM02(
                xyz, _CAM02_XYZ_W, _CAM02_L_A, _CAM02_Y_B, _CAM02_SURROUND
            )
        return (_finite(float(spec.J)), _finite(float(spec.C)), _finite(float(spec.h)))
    except Exception as e:
        logger.debug(f"hex_to_jch({hex_color!r}) failed: {e}")
        return (0.0, 0.0, 0.0)


# HSLuv

def hsluv_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSLuv to hex."""
    safe_s = max(0.0, min(100.0, s))
    safe_l = max(0.0, min(100.0, l))
    safe_h = h % 360
    try:
        return _coloraide_hex(Color("hsluv", [safe_h, safe_s, safe_l]))
    except Exception as e:
        logger.debug(f"hsluv_to_hex({h}, {s}, {l}) failed: {e}")
        return "#000000"


def hex_to_hsluv(hex_color: str) -> Tuple[float, float, float]:
    """Convert hex to HSLuv (h, s, l). Failures give zeros."""
    try:
        h, s, l = Color(hex_color).convert("hsluv").coords()
        return (_finite(h), _finite(s), _finite(l))
    except Exception as e:
        logger.debug(f"hex_to_hsluv({hex_color!r}) failed: {e}")
        return (0.0, 0.0, 0.0)


# LCh family

def ok_lch_to_hex(l: float, s: float, h: float) -> str:
    """Convert OkLCh (lightness 0-100, chroma scaled by 500) to hex."""
    try:
        return _coloraide_hex(Color("oklch", [l / 100, s / 500, h]))
    except Exception as e:
        logger.debug(f"ok_lch_to_hex({l}, {s}, {h}) failed: {e}")
        return hsl_to_hex(h, min(100.0, s), l)


def lch_to_hex(l: float, s: float, h: float, white: str = "D50") -> str:
    """Convert CIE LCh under a D50 or D65 white point to hex."""
    try:
        if white == "D65":
            rad = math.radians(h)
            color = Color("lab-d65", [l, s * math.cos(rad), s * math.sin(rad)])
        else:
            color = Color("lch", [l, s, h])
        return _coloraide_hex(color)
    except Exception as e:
        logger.debug(f"lch_to_hex({l}, {s}, {h}, {white}) failed: {e}")
        return hsl_to_hex(h, min(100.0, s), l)


def luv_to_hex(l: float, s: float, h: float) -> str:
    """Convert CIE LCh(uv) to hex."""
    try:
        return _coloraide_hex(Color("lchuv", [l, s, h]))
    except Exception as e:
        logger.debug(f"luv_to_hex({l}, {s}, {h}) failed: {e}")
        return hsl_to_hex(h, min(100.0, s), l)


# IPT

def ipt_opponents(s: float, h: float) -> Tuple[float, float]:
    """Return the (P, T) opponent axes for an IPT chroma/hue pair."""
    chroma = s / 400
    rad = math.radians(h)
    return chroma * math.cos(rad), chroma * math.sin(rad)


def _signed_power(v: float, power: float) -> float:
    return v ** power if v >= 0 else -((-v) ** power)


def _encode_srgb_channel(v: float) -> int:
    value = 1.055 * v ** (1 / 2.4) - 0.055 if v > 0.0031308 else 12.92 * v
    return max(0, min(255, int(round(value * 255))))


def ipt_to_hex(l: float, s: float, h: float) -> str:
    """Convert IPT (intensity 0-100, chroma scaled by 400) to hex.

    IPT -> LMS' -> LMS -> XYZ -> linear sRGB -> sRGB, with the signed
    ``1/0.43`` power on the LMS' step.
    """
    i = l / 100
    p, t = ipt_opponents(s, h)

    l_ = i + 0.097569 * p + 0.205226 * t
    m_ = i - 0.113880 * p + 0.133217 * t
    s_ = i + 0.032615 * p - 0.676890 * t

    power = 1 / 0.43
    lms_l = _signed_power(l_, power)
    lms_m = _signed_power(m_, power)
    lms_s = _signed_power(s_, power)

    x = 1.85022 * lms_l - 1.13832 * lms_m + 0.23844 * lms_s
    y = 0.36682 * lms_l + 0.64388 * lms_m - 0.01067 * lms_s
    z = 1.08891 * lms_s

    r_lin = 3.2404542 * x - 1.5371385 * y - 0.4985314 * z
    g_lin = -0.9692660 * x + 1.8760108 * y + 0.0415560 * z
    b_lin = 0.0556434 * x - 0.2040259 * y + 1.0572252 * z

    return "#{:02x}{:02x}{:02x}".format(
        _encode_srgb_channel(r_lin),
        _encode_srgb_channel(g_lin),
        _encode_srgb_channel(b_lin),
    )


def _polar(a: float, b: float, scale: float = 1.0) -> Tuple[float, float]:
    chroma = math.hypot(a, b) * scale
    hue = normalize_hue(math.degrees(math.atan2(b, a))) if chroma > 1e-9 else 0.0
    return chroma, hue


# Space dispatch

def to_hex(coords: HSL, space: ColorSpace) -> str:
    """Convert an (h, s, l) triplet in ``space`` to sRGB hex."""
    h, s, l = coords.h, coords.s, coords.l
    if space == ColorSpace.CAM02:
        return jch_to_hex(l, s, h)
    if space == ColorSpace.HSLUV:
        return hsluv_to_hex(h, s, l)
    if space == ColorSpace.OKLCH:
        return ok_lch_to_hex(l, s, h)
    if space == ColorSpace.LCH_D50:
        return lch_to_hex(l, s, h, "D50")
    if space == ColorSpace.LCH_D65:
        return lch_to_hex(l, s, h, "D65")
    if space == ColorSpace.LCH_UV:
        return luv_to_hex(l, s, h)
    if space == ColorSpace.IPT:
        return ipt_to_hex(l, s, h)
    return hsl_to_hex(h, s, l)


def from_hex(hex_color: str, space: ColorSpace) -> HSL:
    """Convert sRGB hex to an (h, s, l) triplet in ``space``.

    The triplet uses the same scaling ``to_hex`` expects, so the two round
    trip for in-gamut colors.
    """
    if space == ColorSpace.HSL:
        return hex_to_hsl(hex_color)

    max_s = space.max_saturation
    try:
        if space == ColorSpace.CAM02:
            j, c, h = hex_to_jch(hex_color)
            return HSL.normalized(h, c, j, max_s)
        if space == ColorSpace.HSLUV:
            h, s, l = hex_to_hsluv(hex_color)
            return HSL.normalized(h, s, l, max_s)

        color = Color(hex_color)
        if space == ColorSpace.OKLCH:
            l, c, h = color.convert("oklch").coords()
            return HSL.normalized(_finite(h), _finite(c) * 500, _finite(l) * 100, max_s)
        if space == ColorSpace.LCH_D50:
            l, c, h = color.convert("lch").coords()
            return HSL.normalized(_finite(h), _finite(c), _finite(l), max_s)
        if space == ColorSpace.LCH_D65:
            l, a, b = color.convert("lab-d65").coords()
            chroma, hue = _polar(_finite(a), _finite(b))
            return HSL.normalized(hue, chroma, _finite(l), max_s)
        if space == ColorSpace.LCH_UV:
            l, c, h = color.convert("lchuv").coords()
            return HSL.normalized(_finite(h), _finite(c), _finite(l), max_s)
        if space == ColorSpace.IPT:
            i, p, t = color.convert("ipt").coords()
            chroma, hue = _polar(_finite(p), _finite(t), 400)
            return HSL.normalized(hue, chroma, _finite(i) * 100, max_s)
    except Exception as e:
        logger.debug(f"from_hex({hex_color!r}, {space.value}) failed: {e}")
    return hex_to_hsl(hex_color)


def _percent_list(values) -> str:
    return ", ".join(f"{v * 100:.1f}%" for v in values)


def to_output_format(color: Color, output: OutputFormat) -> str:
    """Project a coloraide color into a display string.

    Falls back to the sRGB hex when the target space cannot be produced.
    """
    try:
        if output in (OutputFormat.CMY, OutputFormat.CMYK):
            rgb = [max(0.0, min(1.0, v)) for v in color.convert("srgb").coords()]
            if output == OutputFormat.CMY:
                return f"cmy({_percent_list([1 - v for v in rgb])})"
            k = 1 - max(rgb)
            denom = (1 - k) or 1
            c, m, y = ((1 - v - k) / denom for v in rgb)
            return f"cmyk({_percent_list([c, m, y, k])})"

        target = OUTPUT_TARGET_SPACES.get(output)
        if target:
            return color.convert(target).to_string()
    except Exception as e:
        logger.debug(f"to_output_format({output.value}) failed: {e}")

    return _coloraide_hex(color)


def hex_to_display(hex_color: str, output: OutputFormat) -> str:
    """Display string for an sRGB hex color."""
    if output == OutputFormat.SRGB or not is_hex_color(hex_color):
        return hex_color
    try:
        return to_output_format(Color(hex_color), output)
    except Exception as e:
        logger.debug(f"hex_to_display({hex_color!r}) failed: {e}")
        return hex_color


def hsl_to_display(h: float, s: float, l: float, output: OutputFormat) -> str:
    return hex_to_display(hsl_to_hex(h, s, l), output)


def jch_to_display(j: float, c: float, h: float, output: OutputFormat) -> str:
    return hex_to_display(jch_to_hex(j, c, h), output)


def hsluv_to_display(h: float, s: float, l: float, output: OutputFormat) -> str:
    return hex_to_display(hsluv_to_hex(h, s, l), output)


def to_display(coords: HSL, space: ColorSpace, output: OutputFormat) -> str:
    """Display string for an (h, s, l) triplet in ``space``."""
    hex_color = to_hex(coords, space)
    if output == OutputFormat.SRGB:
        return hex_color
    return hex_to_display(hex_color, output)
