"""Parameter inference.

Reverse-engineers the harmony rule, spread and variant strategy that best
reproduce an observed set of seeds, by running the seed generator as a
search oracle over the full parameter grid and refining the best few.
"""

import logging
import threading
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Union

from ..cache import AnalysisCache
from ..schema import (
    HSL,
    ColorSpace,
    ColorStop,
    HarmonyRule,
    InferenceResult,
    OutputFormat,
    SeedColor,
    SeedName,
    VariantStrategy,
)
from .converters import hex_to_hsl
from .seeds import generate_seeds
from .variants import generate_variants

logger = logging.getLogger(__name__)

NO_MATCH_ERROR = 999.0

SEED_WEIGHTS: Dict[SeedName, float] = {
    SeedName.PRIMARY: 5.0,
    SeedName.NEUTRAL: 4.0,
    SeedName.INTERACTIVE: 3.0,
}

# Applied in the coarse pass only
RULE_BIAS: Dict[HarmonyRule, float] = {
    HarmonyRule.ANALOGOUS: -5.0,
    HarmonyRule.COMPLEMENTARY: -3.0,
    HarmonyRule.MONOCHROMATIC: -2.0,
}

COARSE_SPREADS = [float(s) for s in range(0, 181, 15)]
FINE_WINDOW = 15.0
FINE_STEP = 2.5
TOP_CANDIDATES = 5
PROGRESS_EVERY = 50
DEFAULT_VARIANT_COUNT = 12

VIBRANT_STRATEGIES = [VariantStrategy.VIBRANT, VariantStrategy.NEON,
                      VariantStrategy.HYPER, VariantStrategy.ACID]
MUTED_STRATEGIES = [VariantStrategy.TONES, VariantStrategy.PASTEL,
                    VariantStrategy.CLAY, VariantStrategy.TINTS_SHADES]
NARROW_RULES = [HarmonyRule.MONOCHROMATIC, HarmonyRule.ANALOGOUS, HarmonyRule.ANALOGOUS_5]
WIDE_RULES = [HarmonyRule.COMPLEMENTARY, HarmonyRule.TRIADIC,
              HarmonyRule.TETRADIC, HarmonyRule.SQUARE]

RampItem = Union[ColorStop, HSL, str]
ProgressCallback = Callable[[int, int, str], None]


class InferenceCancelled(Exception):
    """Raised by a run that a newer run has superseded"""
    pass


class Candidate(NamedTuple):
    harmony: HarmonyRule
    strategy: VariantStrategy
    spread: float
    error: float


def _hue_distance(a: float, b: float) -> float:
    diff = abs(a - b) % 360
    return min(diff, 360 - diff)


def calculate_seed_error(observed: Sequence[SeedColor], generated: Sequence[SeedColor]) -> float:
    """Weighted average distance between observed and generated seeds.

    Each matched seed contributes ``hue * 2 + sat * 0.5 + lum * 0.5``,
    weighted 5 for primary, 4 for neutral, 3 for interactive and 1 for the
    rest. Returns 999 when no seed names match.
    """
    by_name = {seed.name: seed for seed in generated}
    total_error = 0.0
    total_weight = 0.0

    for target in observed:
        match = by_name.get(target.name)
        if match is None:
            continue
        error = (_hue_distance(match.hsl.h, target.hsl.h) * 2.0
                 + abs(match.hsl.s - target.hsl.s) * 0.5
                 + abs(match.hsl.l - target.hsl.l) * 0.5)
        weight = SEED_WEIGHTS.get(target.name, 1.0)
        total_error += error * weight
        total_weight += weight

    return total_error / total_weight if total_weight > 0 else NO_MATCH_ERROR


def prioritize_candidates(observed: Sequence[SeedColor],
                          strategies: Sequence[VariantStrategy],
                          rules: Sequence[HarmonyRule]):
    """Reorder the search so the likeliest candidates come first.

    High average saturation puts the vivid strategies first, low saturation
    the muted ones. A narrow hue spread puts the narrow rules first, a wide
    one the wide rules. Nothing is dropped.
    """
    strategies = list(strategies)
    rules = list(rules)
    if not observed:
        return strategies, rules

    def promote(items, preferred):
        front = [item for item in preferred if item in items]
        return front + [item for item in items if item not in front]

    hues = [seed.hsl.h for seed in observed]
    hue_spread = max(hues) - min(hues)
    avg_saturation = sum(seed.hsl.s for seed in observed) / len(observed)

    if avg_saturation > 70:
        strategies = promote(strategies, VIBRANT_STRATEGIES)
    elif avg_saturation < 30:
        strategies = promote(strategies, MUTED_STRATEGIES)

    if hue_spread < 60:
        rules = promote(rules, NARROW_RULES)
    elif hue_spread > 180:
        rules = promote(rules, WIDE_RULES)

    return strategies, rules


def infer_base(observed: Sequence[SeedColor]):
    """Brightness from the neutral seed, base color from the primary.

    Returns:
        ``(base, brightness)``; defaults to a mid grey base at brightness 50
        when the seeds are missing
    """
    by_name = {seed.name: seed for seed in observed}
    neutral = by_name.get(SeedName.NEUTRAL)
    primary = by_name.get(SeedName.PRIMARY)

    brightness = 50.0
    if neutral is not None:
        brightness = min(100.0, max(0.0, neutral.hsl.l - 5))

    if primary is None:
        return HSL(h=0, s=0, l=50), brightness

    off = brightness - 50
    base = HSL.normalized(primary.hsl.h, primary.hsl.s, primary.hsl.l - off)
    return base, brightness


def _ramp_hsl(item: RampItem) -> HSL:
    if isinstance(item, ColorStop):
        return item.hsl
    if isinstance(item, HSL):
        return item
    return hex_to_hsl(item)


class ParameterInference:
    """Two-pass parameter search with progress and supersede-style cancellation.

    Starting a run takes a new generation token. A run whose token is no
    longer current raises :class:`InferenceCancelled` at its next progress
    checkpoint.
    """

    def __init__(self, cache: Optional[AnalysisCache] = None,
                 progress_every: int = PROGRESS_EVERY):
        self.cache = cache
        self.progress_every = max(1, progress_every)
        self._lock = threading.Lock()
        self._generation = 0

    def _start(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def cancel(self) -> None:
        """Invalidate any run in flight."""
        with self._lock:
            self._generation += 1
        logger.debug("Inference cancelled")

    def _check(self, token: int) -> None:
        with self._lock:
            current = self._generation
        if token != current:
            raise InferenceCancelled(f"Inference run {token} superseded by run {current}")

    def _seeds(self, base: HSL, rule: HarmonyRule, spread: float,
               brightness: float, strategy: VariantStrategy) -> List[SeedColor]:
        if self.cache is None:
            return generate_seeds(base, rule, spread, brightness, strategy)
        key = (base.as_tuple(), rule, spread, brightness, strategy)
        return self.cache.seeds.get_or_compute(
            key, lambda: generate_seeds(base, rule, spread, brightness, strategy)
        )

    def _variants(self, seed: SeedColor, count: int, contrast: float,
                  strategy: VariantStrategy, space: ColorSpace,
                  output: OutputFormat) -> List[ColorStop]:
        if self.cache is None:
            return generate_variants(seed.hsl, count, contrast, strategy, space, output)
        key = (seed.hsl.as_tuple(), count, contrast, strategy, space, output)
        return self.cache.variants.get_or_compute(
            key, lambda: generate_variants(seed.hsl, count, contrast, strategy, space, output)
        )

    def _variant_error(self, seeds: List[SeedColor], strategy: VariantStrategy,
                       contrast: float, space: ColorSpace, output: OutputFormat,
                       reference: HSL, variant_count: int = DEFAULT_VARIANT_COUNT,
                       observed_ramps: Optional[Mapping[SeedName, Sequence[RampItem]]] = None) -> float:
        """Ramp error of the primary and neutral seeds under ``strategy``.

        The lightest, center and darkest stops of each generated ramp are
        compared with the observed ramp at the same index. Without observed
        ramps every key stop is compared with ``reference``. Seeds missing
        from supplied ramps are skipped; the result is the mean per stop.
        """
        error = 0.0
        samples = 0
        for seed in seeds:
            if seed.name not in (SeedName.PRIMARY, SeedName.NEUTRAL):
                continue
            observed = None
            if observed_ramps:
                observed = observed_ramps.get(seed.name)
                if not observed:
                    continue
            count = len(observed) // 2 if observed else variant_count
            generated = self._variants(seed, count, contrast, strategy, space, output)
            for idx in (0, count, 2 * count):
                if idx >= len(generated):
                    continue
                if observed is None:
                    want = reference
                elif idx < len(observed):
                    want = _ramp_hsl(observed[idx])
                else:
                    continue
                got = generated[idx].hsl
                error += abs(got.l - want.l) * 1.5 + abs(got.s - want.s) * 0.5
                samples += 1
        return error / samples if samples else 0.0

    def run(self, observed_seeds: Sequence[SeedColor],
            observed_ramps: Optional[Mapping[SeedName, Sequence[RampItem]]] = None,
            progress: Optional[ProgressCallback] = None,
            contrast: float = 50,
            space: ColorSpace = ColorSpace.HSL,
            output: OutputFormat = OutputFormat.SRGB,
            strategies: Optional[Sequence[VariantStrategy]] = None,
            rules: Optional[Sequence[HarmonyRule]] = None,
            prioritize: bool = False,
            variant_count: int = DEFAULT_VARIANT_COUNT) -> InferenceResult:
        """Search for the parameters that best reproduce ``observed_seeds``.

        Args:
            observed_seeds: Seeds to explain
            observed_ramps: Optional ramps per seed name. Primary and neutral
                ramps replace the base color as the fine pass reference
            progress: Called as ``progress(current, total, phase)`` with
                phase ``"coarse"`` or ``"fine"``
            contrast: Contrast of the ramps built in the fine pass
            space: Generation space of those ramps
            output: Display format of those ramps
            strategies: Strategies to consider, all by default
            rules: Harmony rules to consider, all by default
            prioritize: Reorder the search by the observed saturation and
                hue spread
            variant_count: Ramp size per side when no observed ramps are given

        Returns:
            The best InferenceResult found; ties keep the first candidate

        Raises:
            InferenceCancelled: If a newer run started or ``cancel`` was called
        """
        token = self._start()
        observed_seeds = list(observed_seeds)
        strategies = list(strategies) if strategies is not None else list(VariantStrategy)
        rules = list(rules) if rules is not None else list(HarmonyRule)
        if prioritize:
            strategies, rules = prioritize_candidates(observed_seeds, strategies, rules)

        base, brightness = infer_base(observed_seeds)
        logger.debug(f"Inferring from base {base.as_tuple()} at brightness {brightness}")

        # Pass 1: coarse grid
        total = len(strategies) * len(rules) * len(COARSE_SPREADS)
        processed = 0
        coarse: List[Candidate] = []
        for strategy in strategies:
            for rule in rules:
                for spread in COARSE_SPREADS:
                    seeds = self._seeds(base, rule, spread, brightness, strategy)
                    error = calculate_seed_error(observed_seeds, seeds) + RULE_BIAS.get(rule, 0.0)
                    coarse.append(Candidate(rule, strategy, spread, error))
                    processed += 1
                    if processed % self.progress_every == 0:
                        self._check(token)
                        if progress:
                            progress(processed, total, "coarse")

        if not coarse:
            raise ValueError("No harmony rules or strategies to search")

        coarse.sort(key=lambda c: c.error)
        top = coarse[:TOP_CANDIDATES]

        # Pass 2: fine spread search scored on seeds and ramps
        windows = []
        for candidate in top:
            start = max(0.0, candidate.spread - FINE_WINDOW)
            end = min(180.0, candidate.spread + FINE_WINDOW)
            steps = int((end - start) / FINE_STEP) + 1
            windows.append((candidate, [start + i * FINE_STEP for i in range(steps)]))

        total_fine = sum(len(spreads) for _, spreads in windows)
        processed = 0
        best = top[0]
        best_error = float("inf")
        for candidate, spreads in windows:
            for spread in spreads:
                seeds = self._seeds(base, candidate.harmony, spread, brightness, candidate.strategy)
                error = calculate_seed_error(observed_seeds, seeds)
                error += self._variant_error(seeds, candidate.strategy, contrast, space, output,
                                             base, variant_count, observed_ramps)
                if error < best_error:
                    best_error = error
                    best = candidate._replace(spread=spread, error=error)
                processed += 1
                if processed % self.progress_every == 0:
                    self._check(token)
                    if progress:
                        progress(processed, total_fine, "fine")

        self._check(token)
        if progress:
            progress(total_fine, total_fine, "fine")

        logger.info(f"Inferred {best.harmony.value} / {best.strategy.value} at spread {best.spread}")
        return InferenceResult(
            harmony=best.harmony,
            spread=best.spread,
            strategy=best.strategy,
            brightness=brightness,
            error=best_error,
        )


def infer_parameters(observed_seeds: Sequence[SeedColor],
                     observed_ramps: Optional[Mapping[SeedName, Sequence[RampItem]]] = None,
                     progress: Optional[ProgressCallback] = None,
                     **kwargs) -> InferenceResult:
    """Run a one-off :class:`ParameterInference` search."""
    return ParameterInference().run(observed_seeds, observed_ramps, progress, **kwargs)
