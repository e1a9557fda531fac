"""Data model definitions for the theme generation engine.

This module defines the Pydantic models and enums shared by every layer of
the engine: normalized HSL values, generated color stops, harmony palette
groups, seed colors, contrast scores, audit pairs, override values and the
user-facing generation parameters.
"""

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


HEX_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')

UNASSIGNED = "unassigned"


def is_hex_color(value: Any) -> bool:
    """Return True when value is a ``#rrggbb`` string."""
    return isinstance(value, str) and bool(HEX_PATTERN.match(value))


class HarmonyRule(str, Enum):
    """Named harmony rules"""
    MONOCHROMATIC = "Monochromatic (1)"
    ANALOGOUS = "Analogous (3)"
    ANALOGOUS_5 = "Analogous (5)"
    ACCENTED_ANALOGOUS = "Accented Analogous (4)"
    COMPLEMENTARY = "Complementary (2)"
    SPLIT_COMPLEMENTARY = "Split Complementary (3)"
    DOUBLE_SPLIT_COMPLEMENTARY = "Double Split Complementary (5)"
    TRIADIC = "Triadic (3)"
    TETRADIC = "Tetradic (4)"
    SQUARE = "Square (4)"
    COMPOUND = "Compound (3)"
    SHADES = "Shades (1)"
    SIX_TONE = "Six Tone (6)"
    GOLDEN = "Golden Ratio (4)"
    NATURAL = "Natural (3)"
    VIVID_PASTEL = "Vivid & Pastel (3)"
    PENTAGRAM = "Pentagram (5)"
    HARD_CLASH = "Hard Clash (3)"
    DOUBLE_ANALOGOUS = "Double Analogous (4)"
    FULL_SPECTRUM = "Full Spectrum (8)"
    CLASH_COMPLEMENTARY = "Clash Complementary (3)"
    SYNTHWAVE = "Synthwave (3)"
    ANALOGOUS_CLASH = "Analogous Clash (3)"
    DEEP_NIGHT = "Deep Night (3)"
    SOLAR_FLARE = "Solar Flare (3)"
    OCEANIC = "Oceanic (3)"
    FOREST_EDGE = "Forest Edge (3)"
    CYBERPUNK = "Cyberpunk (3)"
    ROYAL = "Royal (3)"
    EARTHY = "Earthy (3)"
    PASTEL_DREAMS = "Pastel Dreams (3)"


class VariantStrategy(str, Enum):
    """Named strategies for building variant ramps"""
    TINTS_SHADES = "Tints & Shades"
    TONES = "Tones"
    BLEND = "Harmonic Blend"
    VIBRANT = "Vibrant"
    SHADED_BLEND = "Shaded Blend"
    ATMOSPHERIC = "Atmospheric"
    PASTEL = "Pastel"
    DEEP = "Deep & Rich"
    ACID = "Acid Shift"
    NEON = "Neon Glow"
    METALLIC = "Metallic"
    IRIDESCENT = "Iridescent"
    CLAY = "Clay"
    GLOSSY = "Glossy"
    X_RAY = "X-Ray"
    CRYSTALLINE = "Crystalline"
    RADIOACTIVE = "Radioactive"
    HYPER = "Hyper"
    LUMINOUS = "Luminous"
    VELVET = "Velvet"
    TOXIC = "Toxic"
    VINTAGE = "Vintage"
    WARM = "Warm"
    COOL = "Cool"
    GLACIAL = "Glacial"
    HEATWAVE = "Heatwave"
    CINEMATIC = "Cinematic"
    MEMPHIS = "Memphis"
    GLITCH = "Glitch"
    SOLARIZED = "Solarized"
    NORDIC = "Nordic"
    DRACULA = "Dracula"
    MONOKAI = "Monokai"
    GRUVBOX = "Gruvbox"


class ColorSpace(str, Enum):
    """Generation color spaces"""
    HSL = "HSL"
    CAM02 = "CAM02"
    HSLUV = "HSLuv"
    LCH_D50 = "LCh D50"
    LCH_D65 = "LCh D65"
    OKLCH = "OkLCh"
    IPT = "IPT"
    LCH_UV = "LCh(uv)"

    @property
    def is_extended(self) -> bool:
        """Whether saturation/chroma may exceed 100 in this space."""
        return self in EXTENDED_SPACES

    @property
    def max_saturation(self) -> float:
        return 150.0 if self.is_extended else 100.0


EXTENDED_SPACES = frozenset({
    ColorSpace.CAM02,
    ColorSpace.LCH_D50,
    ColorSpace.LCH_D65,
    ColorSpace.OKLCH,
    ColorSpace.IPT,
    ColorSpace.LCH_UV,
})


class OutputFormat(str, Enum):
    """Display formats used for presentation strings"""
    SRGB = "sRGB"
    SRGB_LINEAR = "sRGB Linear"
    P3 = "P3"
    P3_LINEAR = "P3 Linear"
    ADOBE_RGB = "AdobeRGB"
    PROPHOTO_RGB = "ProPhoto RGB"
    REC_709 = "Rec.709"
    REC_2020 = "Rec.2020"
    REC_2100_HLG = "Rec.2100 HLG"
    REC_2100_PQ = "Rec.2100 PQ"
    ICTCP = "ICtCp"
    ACES_2065_1 = "ACES 2065-1"
    ACESCC = "ACEScc"
    ACESCCT = "ACEScct"
    ACESCG = "ACEScg"
    HSL = "HSL"
    HSV = "HSV"
    HWB = "HWB"
    XYZ_D50 = "XYZ D50"
    XYZ_D65 = "XYZ D65"
    CMY = "CMY"
    CMYK = "CMYK"
    RYB = "RYB"


class SeedName(str, Enum):
    """The nine semantic seed names"""
    PRIMARY = "primary"
    NEUTRAL = "neutral"
    INTERACTIVE = "interactive"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"
    DIFF_ADD = "diffAdd"
    DIFF_DELETE = "diffDelete"


SEED_NAMES: List[SeedName] = list(SeedName)


class WcagLevel(str, Enum):
    """WCAG conformance levels"""
    AAA = "AAA"
    AA = "AA"
    A = "A"
    FAIL = "FAIL"


class PairType(str, Enum):
    """Coarse grouping of audited pairs"""
    SHELL = "shell"
    READ = "read"
    ACTION = "action"
    DIFF = "diff"


class ThemeMode(str, Enum):
    """Light or dark theme mode"""
    LIGHT = "light"
    DARK = "dark"


class HSL(BaseModel):
    """Normalized hue/saturation/lightness triplet"""
    model_config = ConfigDict(frozen=True)

    h: float = Field(0.0, ge=0, lt=360, description="Hue in degrees")
    s: float = Field(0.0, ge=0, le=150, description="Saturation or chroma")
    l: float = Field(0.0, ge=0, le=100, description="Lightness")

    @classmethod
    def normalized(cls, h: float, s: float, l: float,
                   max_saturation: float = 100.0) -> "HSL":
        """Build an HSL with the hue wrapped and saturation/lightness clamped."""
        return cls(
            h=normalize_hue(h),
            s=min(max_saturation, max(0.0, s)),
            l=min(100.0, max(0.0, l)),
        )

    def as_tuple(self):
        return (self.h, self.s, self.l)


def normalize_hue(h: float) -> float:
    """Wrap a hue into [0, 360)."""
    hue = ((h % 360) + 360) % 360
    # -1e-14 % 360 rounds to 360.0
    return 0.0 if hue >= 360 else float(hue)


class Cam02Coords(BaseModel):
    """CIECAM02 JCh coordinates"""
    model_config = ConfigDict(frozen=True)

    j: float
    c: float
    h: float


class HsluvCoords(BaseModel):
    """HSLuv coordinates"""
    model_config = ConfigDict(frozen=True)

    h: float
    s: float
    l: float


class SpaceCoords(BaseModel):
    """Generic LCh-family coordinates, with opponent axes for IPT"""
    model_config = ConfigDict(frozen=True)

    l: float
    c: float
    h: float
    a: Optional[float] = None
    b: Optional[float] = None


class ColorStop(BaseModel):
    """One generated color"""
    model_config = ConfigDict(frozen=True)

    hsl: HSL
    hex: str = Field(..., description="sRGB hex string")
    display_string: str = Field(..., description="Presentation string in the output format")
    is_base: bool = False
    cam02: Optional[Cam02Coords] = None
    hsluv: Optional[HsluvCoords] = None
    coords: Optional[SpaceCoords] = None

    @field_validator('hex', mode='before')
    @classmethod
    def validate_hex(cls, v):
        """Validate and lowercase the hex string"""
        if not is_hex_color(v):
            raise ValueError(f"Invalid hex color: {v}")
        return v.lower()


class PaletteGroup(BaseModel):
    """A harmony point and its variant ramp"""
    model_config = ConfigDict(frozen=True)

    base: ColorStop
    variants: List[ColorStop] = Field(default_factory=list)


class SeedColor(BaseModel):
    """A named semantic seed color"""
    model_config = ConfigDict(frozen=True)

    name: SeedName
    hsl: HSL
    hex: str

    @field_validator('hex', mode='before')
    @classmethod
    def validate_hex(cls, v):
        if not is_hex_color(v):
            raise ValueError(f"Invalid hex color: {v}")
        return v.lower()


class ContrastScore(BaseModel):
    """Result of scoring a background/foreground pair"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    ratio: float
    hue_diff: float
    level: WcagLevel
    passed: bool = Field(..., alias="pass")


class WcagPair(BaseModel):
    """One audited token pair"""
    model_config = ConfigDict(frozen=True)

    category: str
    label: str
    desc: str
    bg: str
    fg: str
    bg_key: str
    fg_key: str
    is_non_text: bool = False
    is_border: bool = False
    is_weak: bool = False
    is_strong: bool = False
    type: PairType = PairType.SHELL
    score: ContrastScore


class Override(BaseModel):
    """A user override: either a hex color or unset.

    Stored maps may carry the legacy ``"unassigned"`` marker or arbitrary
    text; ``Override.parse`` maps anything that is not a hex color to unset.
    """
    model_config = ConfigDict(frozen=True)

    value: Optional[str] = None

    @field_validator('value', mode='before')
    @classmethod
    def validate_value(cls, v):
        if v is None:
            return None
        if not is_hex_color(v):
            raise ValueError(f"Override must be a hex color, got {v!r}")
        return v.lower()

    @classmethod
    def of(cls, hex_color: str) -> "Override":
        return cls(value=hex_color)

    @classmethod
    def unset(cls) -> "Override":
        return cls(value=None)

    @classmethod
    def parse(cls, raw: Any) -> "Override":
        """Interpret a stored override value."""
        if isinstance(raw, Override):
            return raw
        if is_hex_color(raw):
            return cls(value=raw)
        return cls(value=None)

    @property
    def is_set(self) -> bool:
        return self.value is not None


class ModeOverrides(BaseModel):
    """Override maps partitioned by theme mode"""

    light: Dict[str, str] = Field(default_factory=dict)
    dark: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def migrate(cls, raw: Optional[Dict[str, Any]]) -> "ModeOverrides":
        """Accept either the partitioned shape or a legacy flat map.

        A flat map (no ``light``/``dark`` keys) is treated as light-mode
        overrides.
        """
        if not raw:
            return cls()
        if 'light' in raw or 'dark' in raw:
            return cls(
                light=dict(raw.get('light') or {}),
                dark=dict(raw.get('dark') or {}),
            )
        return cls(light=dict(raw), dark={})

    def for_mode(self, mode: ThemeMode) -> Dict[str, str]:
        return self.dark if mode == ThemeMode.DARK else self.light


class InferenceResult(BaseModel):
    """Best-scoring parameters found by reverse analysis"""
    model_config = ConfigDict(frozen=True)

    harmony: HarmonyRule
    spread: float
    strategy: VariantStrategy
    brightness: float = 50.0
    error: float = Field(..., description="Weighted error of the winning candidate")


class ThemeParameters(BaseModel):
    """User-tunable inputs for generating a theme"""

    base_color: HSL = Field(default_factory=lambda: HSL(h=280, s=65, l=15))
    harmony: HarmonyRule = HarmonyRule.DOUBLE_SPLIT_COMPLEMENTARY
    spread: float = Field(30.0, ge=0, le=180)
    variant_count: int = Field(12, ge=1, le=12)
    light_brightness: float = Field(50.0, ge=0, le=100)
    dark_brightness: float = Field(50.0, ge=0, le=100)
    light_contrast: float = Field(50.0, ge=0, le=100)
    dark_contrast: float = Field(50.0, ge=0, le=100)
    strategy: VariantStrategy = VariantStrategy.GLACIAL
    color_space: ColorSpace = ColorSpace.HSL
    output_format: OutputFormat = OutputFormat.SRGB
    theme_name: str = "My Theme"
    mode: ThemeMode = ThemeMode.DARK
    seed_overrides: ModeOverrides = Field(default_factory=ModeOverrides)
    token_overrides: ModeOverrides = Field(default_factory=ModeOverrides)

    @model_validator(mode='before')
    @classmethod
    def migrate_overrides(cls, data):
        """Wrap legacy flat override maps into the light partition"""
        if isinstance(data, dict):
            for key in ('seed_overrides', 'token_overrides'):
                raw = data.get(key)
                if isinstance(raw, dict):
                    data = dict(data)
                    data[key] = ModeOverrides.migrate(raw)
        return data

    def brightness_for(self, mode: ThemeMode) -> float:
        return self.dark_brightness if mode == ThemeMode.DARK else self.light_brightness

    def contrast_for(self, mode: ThemeMode) -> float:
        return self.dark_contrast if mode == ThemeMode.DARK else self.light_contrast


class GeneratedTheme(BaseModel):
    """Everything generated for one theme mode"""

    mode: ThemeMode
    palette: List[PaletteGroup] = Field(default_factory=list)
    seeds: List[SeedColor] = Field(default_factory=list)
    ramps: Dict[str, List[ColorStop]] = Field(default_factory=dict)
    tokens: Dict[str, str] = Field(default_factory=dict)

    @property
    def is_dark(self) -> bool:
        return self.mode == ThemeMode.DARK
