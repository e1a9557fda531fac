"""Theme presets and parameter helpers.

Two kinds of preset exist. Named presets are YAML files holding a base
color, harmony, strategy and a set of token overrides. Thematic presets
are mood ranges from which a base color is drawn at random.
"""

import logging
import random
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Set, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator

from .schema import (
    HSL,
    HarmonyRule,
    ModeOverrides,
    ThemeMode,
    ThemeParameters,
    VariantStrategy,
    is_hex_color,
)

logger = logging.getLogger(__name__)


class PresetDefinition(BaseModel):
    """A named preset loaded from YAML"""

    name: str
    display_name: str = ""
    description: str = ""
    base_color: Optional[HSL] = None
    harmony: Optional[HarmonyRule] = None
    strategy: Optional[VariantStrategy] = None
    overrides: Dict[str, str] = Field(default_factory=dict)

    @field_validator('overrides', mode='before')
    @classmethod
    def validate_overrides(cls, v):
        """Keep hex values only, lowercased"""
        if not v:
            return {}
        cleaned = {}
        for token, value in v.items():
            if is_hex_color(value):
                cleaned[str(token)] = value.lower()
            else:
                logger.warning(f"Ignoring non-hex preset override {token}: {value!r}")
        return cleaned


class PresetRegistry:
    """Registry of built-in and user presets."""

    def __init__(self, user_dir: Optional[Path] = None):
        """Initialize the preset registry.

        Args:
            user_dir: Optional directory of user preset files
        """
        self.builtin_dir = Path(__file__).parent / "theme_presets"
        self.user_dir = Path(user_dir) if user_dir else None

        self._cache: Dict[str, PresetDefinition] = {}
        self._builtin: Set[str] = set()
        self._user: Set[str] = set()

        self._scan_builtin_presets()
        self._scan_user_presets()

    def _scan_builtin_presets(self) -> None:
        self._builtin.clear()

        if not self.builtin_dir.exists():
            logger.warning(f"Built-in presets directory not found: {self.builtin_dir}")
            return

        for preset_file in self.builtin_dir.glob("*.yaml"):
            self._builtin.add(preset_file.stem)
            logger.debug(f"Found built-in preset: {preset_file.stem}")

    def _scan_user_presets(self) -> None:
        self._user.clear()

        if self.user_dir is None or not self.user_dir.exists():
            return

        for preset_file in self.user_dir.glob("*.yaml"):
            self._user.add(preset_file.stem)
            logger.debug(f"Found user preset: {preset_file.stem}")

    def list_presets(self) -> List[Dict[str, Any]]:
        """Metadata for every preset; user presets shadow built-ins."""
        presets = []
        for name in sorted(self._builtin | self._user):
            kind = 'user' if name in self._user else 'builtin'
            try:
                preset = self.load(name)
                presets.append({
                    'name': name,
                    'display_name': preset.display_name,
                    'description': preset.description,
                    'type': kind,
                })
            except ValueError as e:
                logger.error(f"Error loading preset {name}: {e}")
                presets.append({
                    'name': name,
                    'display_name': name,
                    'description': f"Error loading preset: {e}",
                    'type': kind,
                    'error': True,
                })
        return presets

    def exists(self, name: str) -> bool:
        return name in self._builtin or name in self._user

    def load(self, name: str) -> PresetDefinition:
        """Load a preset by name.

        Raises:
            FileNotFoundError: If no preset file has this name
            ValueError: If the file is not a valid preset
        """
        if name in self._cache:
            return self._cache[name]

        path = None
        if self.user_dir is not None and (self.user_dir / f"{name}.yaml").exists():
            path = self.user_dir / f"{name}.yaml"
        elif (self.builtin_dir / f"{name}.yaml").exists():
            path = self.builtin_dir / f"{name}.yaml"
        if path is None:
            raise FileNotFoundError(f"Preset '{name}' not found")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}")

        data.setdefault('name', name)
        data.setdefault('display_name', name.replace('_', ' ').title())
        try:
            preset = PresetDefinition(**data)
        except Exception as e:
            raise ValueError(f"Invalid preset definition for '{name}': {e}")

        self._cache[name] = preset
        return preset

    def save(self, preset: PresetDefinition, overwrite: bool = False) -> Path:
        """Write a user preset.

        Raises:
            ValueError: If no user directory is configured
            FileExistsError: If the preset exists and ``overwrite`` is False
        """
        if self.user_dir is None:
            raise ValueError("No user preset directory configured")

        self.user_dir.mkdir(parents=True, exist_ok=True)
        path = self.user_dir / f"{preset.name}.yaml"
        if path.exists() and not overwrite:
            raise FileExistsError(f"Preset '{preset.name}' already exists")

        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(preset.model_dump(mode='json', exclude_none=True), f,
                      default_flow_style=False, sort_keys=False)

        self._user.add(preset.name)
        self._cache.pop(preset.name, None)
        logger.info(f"Saved user preset: {preset.name}")
        return path

    def clear_cache(self) -> None:
        self._cache.clear()
        self._scan_builtin_presets()
        self._scan_user_presets()


def apply_preset(params: ThemeParameters, preset: PresetDefinition,
                 mode: Optional[ThemeMode] = None) -> ThemeParameters:
    """Parameters with the preset's settings and its overrides for ``mode``.

    The preset's overrides replace the token overrides of that mode only.
    """
    mode = ThemeMode(mode or params.mode)
    overrides = params.token_overrides.model_copy(deep=True)
    if mode == ThemeMode.DARK:
        overrides.dark = dict(preset.overrides)
    else:
        overrides.light = dict(preset.overrides)

    update: Dict[str, Any] = {'token_overrides': overrides}
    if preset.base_color is not None:
        update['base_color'] = preset.base_color
    if preset.harmony is not None:
        update['harmony'] = preset.harmony
    if preset.strategy is not None:
        update['strategy'] = preset.strategy
    return params.model_copy(update=update)


class ThematicPreset(NamedTuple):
    """Mood preset: a random base drawn from these ranges"""
    h: Tuple[float, float]
    s: Tuple[float, float]
    l: Tuple[float, float]
    harmony: HarmonyRule
    strategy: VariantStrategy


THEMATIC_PRESETS: Dict[str, ThematicPreset] = {
    'cyberpunk': ThematicPreset((300, 320), (90, 100), (50, 60), HarmonyRule.ANALOGOUS, VariantStrategy.NEON),
    'cinematic': ThematicPreset((190, 220), (60, 80), (40, 55), HarmonyRule.SPLIT_COMPLEMENTARY, VariantStrategy.CINEMATIC),
    'pastel': ThematicPreset((0, 360), (30, 60), (70, 90), HarmonyRule.ANALOGOUS, VariantStrategy.PASTEL),
    'retro': ThematicPreset((20, 50), (60, 85), (45, 65), HarmonyRule.TETRADIC, VariantStrategy.VINTAGE),
    'vivid': ThematicPreset((0, 360), (85, 100), (45, 60), HarmonyRule.TRIADIC, VariantStrategy.VIBRANT),
    'earthy': ThematicPreset((25, 75), (25, 50), (30, 50), HarmonyRule.NATURAL, VariantStrategy.CLAY),
    'pop_art': ThematicPreset((0, 360), (80, 100), (50, 60), HarmonyRule.SQUARE, VariantStrategy.MEMPHIS),
    'midnight': ThematicPreset((220, 270), (40, 70), (15, 35), HarmonyRule.MONOCHROMATIC, VariantStrategy.DEEP),
    'psychedelic': ThematicPreset((0, 360), (90, 100), (50, 60), HarmonyRule.FULL_SPECTRUM, VariantStrategy.GLITCH),
    'warm': ThematicPreset((0, 60), (60, 90), (45, 65), HarmonyRule.ANALOGOUS, VariantStrategy.HEATWAVE),
    'cool': ThematicPreset((170, 250), (50, 80), (45, 65), HarmonyRule.ANALOGOUS, VariantStrategy.GLACIAL),
    'subtle': ThematicPreset((0, 360), (10, 30), (70, 90), HarmonyRule.MONOCHROMATIC, VariantStrategy.TINTS_SHADES),
    'neon': ThematicPreset((150, 180), (90, 100), (50, 60), HarmonyRule.ANALOGOUS, VariantStrategy.NEON),
}


def _clear_seed_overrides(update: Dict[str, Any]) -> Dict[str, Any]:
    update['seed_overrides'] = ModeOverrides()
    return update


def apply_thematic_preset(params: ThemeParameters, name: str,
                          rng: Optional[random.Random] = None) -> ThemeParameters:
    """Draw a base color from a thematic preset's ranges.

    Raises:
        KeyError: If ``name`` is not a thematic preset
    """
    preset = THEMATIC_PRESETS[name]
    rng = rng or random.Random()

    def draw(bounds):
        low, high = bounds
        return round(low + rng.random() * (high - low))

    base = HSL.normalized(draw(preset.h), draw(preset.s), draw(preset.l))
    return params.model_copy(update={
        'base_color': base,
        'harmony': preset.harmony,
        'strategy': preset.strategy,
    })


def randomize(params: ThemeParameters, rng: Optional[random.Random] = None) -> ThemeParameters:
    """Random but usable parameters: mid saturation and lightness, moderate spread."""
    rng = rng or random.Random()
    return params.model_copy(update=_clear_seed_overrides({
        'base_color': HSL(h=rng.randrange(360), s=40 + rng.randrange(60), l=40 + rng.randrange(30)),
        'harmony': rng.choice(list(HarmonyRule)),
        'strategy': rng.choice(list(VariantStrategy)),
        'variant_count': 12,
        'spread': 15 + rng.randrange(45),
        'light_contrast': 20 + rng.randrange(70),
        'dark_contrast': 20 + rng.randrange(70),
        'light_brightness': 30 + rng.randrange(40),
        'dark_brightness': 30 + rng.randrange(40),
    }))


def invert_base(params: ThemeParameters) -> ThemeParameters:
    """Rotate the base hue by 180 and mirror its lightness."""
    base = params.base_color
    inverted = HSL.normalized(base.h + 180, base.s, 100 - base.l)
    return params.model_copy(update=_clear_seed_overrides({'base_color': inverted}))


def chaos(params: ThemeParameters, rng: Optional[random.Random] = None) -> ThemeParameters:
    """Extreme random parameters: saturation and lightness pushed to the ends."""
    rng = rng or random.Random()
    h = rng.randrange(360)
    s = 80 + rng.random() * 20 if rng.random() > 0.5 else rng.random() * 30
    l = 70 + rng.random() * 30 if rng.random() > 0.5 else rng.random() * 30
    return params.model_copy(update=_clear_seed_overrides({
        'base_color': HSL.normalized(h, s, l),
        'harmony': rng.choice(list(HarmonyRule)),
        'strategy': rng.choice(list(VariantStrategy)),
        'variant_count': rng.randint(1, 12),
        'spread': float(rng.randrange(180)),
    }))
