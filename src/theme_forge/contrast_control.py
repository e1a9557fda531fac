"""Dynamic contrast intensity control.

Maps a single 0-100 intensity knob onto the light and dark contrast values
used for ramp generation. At 0 every variant collapses onto one color; at
100 ramps span the full black-to-white range.
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


@dataclass
class ContrastSettings:
    """Tunables for the intensity mapping"""
    min_contrast: float = 0.0
    max_contrast: float = 100.0
    contrast_multiplier: float = 1.0
    invert_on_extreme: bool = True


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ContrastControl:
    """Intensity to contrast mapping."""

    def __init__(self, settings: ContrastSettings = None):
        self.settings = settings or ContrastSettings()

    def calculate_contrast(self, intensity: float, is_dark_mode: bool) -> Tuple[float, float]:
        """Light and dark contrast values for an intensity.

        Args:
            intensity: 0-100, clamped
            is_dark_mode: Mode being generated

        Returns:
            ``(light_contrast, dark_contrast)``
        """
        intensity = _clamp(intensity, 0, 100)

        if intensity == 0:
            single = 20.0 if is_dark_mode else 80.0
            return single, single

        if intensity == 100:
            return (100.0, 0.0) if is_dark_mode else (0.0, 100.0)

        s = self.settings
        adjusted = (s.max_contrast - s.min_contrast) * (intensity / 100) * s.contrast_multiplier
        center = (s.max_contrast + s.min_contrast) / 2

        if is_dark_mode:
            light, dark = center - adjusted / 2, center + adjusted / 2
        else:
            light, dark = center + adjusted / 2, center - adjusted / 2

        if s.invert_on_extreme and intensity > 90:
            light, dark = dark, light

        return (
            _clamp(light, s.min_contrast, s.max_contrast),
            _clamp(dark, s.min_contrast, s.max_contrast),
        )

    def calculate_variant_lightness(self, base_lightness: float, variant_index: int,
                                    total_variants: int, intensity: float,
                                    is_dark_mode: bool) -> float:
        """Lightness of one ramp position under the intensity mapping.

        The mode's computed contrast scales the offset from ``base_lightness``.
        """
        if intensity == 0:
            return base_lightness

        light, dark = self.calculate_contrast(intensity, is_dark_mode)
        current = dark if is_dark_mode else light
        position = variant_index / (total_variants - 1) if total_variants > 1 else 0.0

        spread = abs(light - dark)
        if is_dark_mode:
            target = min(light, dark) + spread * position
        else:
            target = max(light, dark) - spread * position

        adjusted = base_lightness + (target - 50) * (current / 50)
        return _clamp(adjusted, 0, 100)

    def get_contrast_description(self, intensity: float) -> str:
        if intensity == 0:
            return "No Contrast (Single Color)"
        if intensity == 100:
            return "Maximum Dynamic Range"
        if intensity > 80:
            return "Extreme Dynamic Contrast"
        if intensity > 60:
            return "High Dynamic Contrast"
        if intensity > 40:
            return "Medium Dynamic Contrast"
        if intensity > 20:
            return "Low Dynamic Contrast"
        return "Minimal Dynamic Contrast"

    def configure(self, **settings) -> None:
        """Update settings; unknown names are ignored with a warning."""
        known = {f.name for f in fields(ContrastSettings)}
        for name, value in settings.items():
            if name not in known:
                logger.warning(f"Unknown contrast setting: {name}")
                continue
            setattr(self.settings, name, value)

    def get_settings(self) -> Dict[str, object]:
        return asdict(self.settings)


contrast_control = ContrastControl()
