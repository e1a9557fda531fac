"""Theme engine facade.

Ties the generators together: parameters in, palette, seeds, ramps and the
token map out, plus the audit and inference entry points. Built themes are
cached per mode and parameter content.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..cache import AnalysisCache, ContrastCache
from ..schema import (
    GeneratedTheme,
    InferenceResult,
    SeedColor,
    SeedName,
    ThemeMode,
    ThemeParameters,
    WcagPair,
)
from .audit import audit_theme, suggest_fixes
from .harmonies import generate_harmony
from .inference import ParameterInference, ProgressCallback
from .seeds import apply_seed_overrides, generate_seeds
from .tokens import build_seed_ramps, synthesize_tokens

logger = logging.getLogger(__name__)


class ThemeEngine:
    """Generates, audits and analyses themes."""

    def __init__(self, cache_size: int = 1000, progress_every: int = 50):
        """Initialize the theme engine.

        Args:
            cache_size: Entry bound for the contrast and analysis caches
            progress_every: Inference candidates between progress checkpoints
        """
        self.contrast_cache = ContrastCache(max_size=cache_size)
        self.analysis_cache = AnalysisCache(max_size=cache_size)
        self.inference = ParameterInference(cache=self.analysis_cache,
                                            progress_every=progress_every)

        # cache_key -> generated theme
        self._compiled_cache: Dict[str, GeneratedTheme] = {}

        logger.debug(f"ThemeEngine initialized with cache size {cache_size}")

    @classmethod
    def from_config(cls, config) -> 'ThemeEngine':
        """Create a theme engine from application config.

        Args:
            config: Application configuration object

        Returns:
            ThemeEngine instance
        """
        return cls(getattr(config, 'cache_size', 1000),
                   getattr(config, 'progress_every', 50))

    def build(self, params: ThemeParameters,
              mode: Optional[ThemeMode] = None) -> GeneratedTheme:
        """Generate a full theme for one mode.

        Args:
            params: Generation parameters and overrides
            mode: Theme mode, defaults to ``params.mode``

        Returns:
            GeneratedTheme instance

        Raises:
            ValueError: If the theme cannot be generated
        """
        mode = ThemeMode(mode or params.mode)
        try:
            cache_key = self._generate_cache_key(params, mode)
            if cache_key in self._compiled_cache:
                return self._compiled_cache[cache_key]

            brightness = params.brightness_for(mode)
            contrast = params.contrast_for(mode)

            palette = generate_harmony(
                params.base_color, params.harmony, params.spread,
                params.variant_count, contrast, params.strategy,
                params.color_space, params.output_format, brightness,
            )

            seeds = generate_seeds(params.base_color, params.harmony, params.spread, brightness)
            seeds = apply_seed_overrides(seeds, params.seed_overrides.for_mode(mode))

            ramps = build_seed_ramps(
                seeds, params.variant_count, contrast, params.strategy,
                params.color_space, params.output_format,
            )
            tokens = synthesize_tokens(
                seeds, ramps, mode == ThemeMode.DARK,
                params.token_overrides.for_mode(mode),
            )

            theme = GeneratedTheme(
                mode=mode,
                palette=palette,
                seeds=seeds,
                ramps={name.value: stops for name, stops in ramps.items()},
                tokens=tokens,
            )
            self._compiled_cache[cache_key] = theme

            logger.debug(f"Built {mode.value} theme '{params.theme_name}' with {len(tokens)} tokens")
            return theme

        except Exception as e:
            logger.error(f"Error building theme '{params.theme_name}': {e}")
            raise ValueError(f"Failed to build theme '{params.theme_name}': {e}")

    def build_both(self, params: ThemeParameters) -> Dict[ThemeMode, GeneratedTheme]:
        """Build the light and dark themes."""
        return {mode: self.build(params, mode) for mode in ThemeMode}

    def audit(self, params: ThemeParameters,
              mode: Optional[ThemeMode] = None) -> List[WcagPair]:
        """Audit the token map of a built theme."""
        theme = self.build(params, mode)
        return audit_theme(theme.tokens, cache=self.contrast_cache)

    def fix(self, params: ThemeParameters, mode: Optional[ThemeMode] = None,
            by_hue: bool = False) -> Dict[str, str]:
        """Token overrides that repair the failing pairs of a built theme."""
        return suggest_fixes(self.audit(params, mode), by_hue=by_hue)

    def infer(self, observed_seeds: Sequence[SeedColor],
              params: Optional[ThemeParameters] = None,
              progress: Optional[ProgressCallback] = None,
              use_ramps: bool = False) -> InferenceResult:
        """Infer generation parameters from observed seeds.

        Args:
            observed_seeds: Seeds to explain
            params: Contrast, space, output and ramp size of the ramps built
                during the fine pass
            progress: Progress callback
            use_ramps: Compare against the primary and neutral ramps of the
                theme built from ``params`` instead of the base color

        Returns:
            InferenceResult instance
        """
        observed_ramps = None
        contrast = 50.0
        kwargs = {}
        if params is not None:
            contrast = params.contrast_for(params.mode)
            kwargs = {
                'space': params.color_space,
                'output': params.output_format,
                'variant_count': params.variant_count,
            }
            if use_ramps:
                theme = self.build(params)
                observed_ramps = {
                    SeedName(name): stops for name, stops in theme.ramps.items()
                }
        return self.inference.run(observed_seeds, observed_ramps, progress,
                                  contrast=contrast, **kwargs)

    def cancel_inference(self) -> None:
        self.inference.cancel()

    def clear_cache(self) -> None:
        """Clear the theme, contrast and analysis caches."""
        self._compiled_cache.clear()
        self.contrast_cache.clear()
        self.analysis_cache.clear()
        logger.debug("Theme engine cache cleared")

    def _generate_cache_key(self, params: ThemeParameters, mode: ThemeMode) -> str:
        """Generate cache key for a theme build."""
        key_parts = [
            mode.value,
            params.model_dump_json(),
        ]
        return '_'.join(key_parts)
