"""Color generation, token synthesis, contrast audit and parameter inference."""

from .harmonies import generate_harmony
from .variants import generate_variants
from .seeds import generate_seeds, apply_seed_overrides, seeds_to_dict
from .tokens import build_seed_ramps, synthesize_tokens
from .audit import audit_theme, score, suggest_fixes, summarize
from .inference import ParameterInference, InferenceCancelled, infer_parameters
from .theme_engine import ThemeEngine

__all__ = [
    "generate_harmony",
    "generate_variants",
    "generate_seeds",
    "apply_seed_overrides",
    "seeds_to_dict",
    "build_seed_ramps",
    "synthesize_tokens",
    "audit_theme",
    "score",
    "suggest_fixes",
    "summarize",
    "ParameterInference",
    "InferenceCancelled",
    "infer_parameters",
    "ThemeEngine",
]
