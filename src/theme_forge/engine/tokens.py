"""Design token synthesis.

Every token is sampled from one seed's variant ramp at a fixed fractional
position, 0 being the darkest stop and 1 the lightest. Light mode mirrors
the positions. A few tokens are constants: avatar swatches, the ANSI
terminal palette and the rgba shadow/overlay values.
"""

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..schema import (
    ColorSpace,
    ColorStop,
    OutputFormat,
    Override,
    SeedColor,
    SeedName,
    VariantStrategy,
)
from .variants import generate_variants

logger = logging.getLogger(__name__)

ThemeColors = Dict[str, str]
Ramp = Sequence[Union[ColorStop, str]]

P = SeedName.PRIMARY
N = SeedName.NEUTRAL
I = SeedName.INTERACTIVE
OK = SeedName.SUCCESS
W = SeedName.WARNING
E = SeedName.ERROR
F = SeedName.INFO
DA = SeedName.DIFF_ADD
DD = SeedName.DIFF_DELETE

# Light mode never samples background and surface tokens above this position
LIGHT_SURFACE_CLAMP = 0.65


def _semantic(prefix: str, seed: SeedName) -> Dict[str, Tuple[SeedName, float]]:
    """Surface, border, text and icon tokens shared by the status colors."""
    return {
        f"surface-{prefix}-base": (seed, 0.55),
        f"surface-{prefix}-hover": (seed, 0.6),
        f"surface-{prefix}-active": (seed, 0.65),
        f"surface-{prefix}-weak": (seed, 0.2),
        f"surface-{prefix}-strong": (seed, 0.75),
        f"text-on-{prefix}-base": (seed, 0.02),
        f"text-on-{prefix}-weak": (seed, 0.1),
        f"text-on-{prefix}-strong": (seed, 0.0),
        f"border-{prefix}-base": (seed, 0.5),
        f"border-{prefix}-hover": (seed, 0.55),
        f"border-{prefix}-selected": (seed, 0.6),
        f"icon-{prefix}-base": (seed, 0.7),
        f"icon-on-{prefix}-base": (seed, 0.02),
        f"icon-on-{prefix}-hover": (seed, 0.05),
        f"icon-on-{prefix}-selected": (seed, 0.0),
    }


def _action(prefix: str, seed: SeedName) -> Dict[str, Tuple[SeedName, float]]:
    """The ``<name>-base/hover/active/text`` quartet."""
    return {
        f"{prefix}-base": (seed, 0.5),
        f"{prefix}-hover": (seed, 0.55),
        f"{prefix}-active": (seed, 0.6),
        f"{prefix}-text": (seed, 0.95),
    }


def _states(prefix: str, seed: SeedName, start: float, step: float = 0.05) -> Dict[str, Tuple[SeedName, float]]:
    """base/hover/active/selected/disabled/focus ladder starting at ``start``."""
    return {
        f"{prefix}-base": (seed, start),
        f"{prefix}-hover": (seed, start + step),
        f"{prefix}-active": (seed, start + 2 * step),
        f"{prefix}-selected": (seed, start + 3 * step),
        f"{prefix}-disabled": (seed, max(0.0, start - 0.2)),
        f"{prefix}-focus": (seed, start + 4 * step),
    }


TOKEN_POSITIONS: Dict[str, Tuple[SeedName, float]] = {
    # Backgrounds
    "background-base": (P, 0.01),
    "background-weak": (P, 0.05),
    "background-strong": (P, 0.0),
    "background-stronger": (P, 0.0),

    # Surfaces
    "surface-base": (P, 0.08),
    "surface-base-hover": (P, 0.12),
    "surface-base-active": (P, 0.16),
    "surface-base-interactive-active": (I, 0.2),
    "surface-inset-base": (P, 0.03),
    "surface-inset-base-hover": (P, 0.06),
    "surface-inset-base-active": (P, 0.09),
    "surface-inset-strong": (P, 0.0),
    "surface-inset-strong-hover": (P, 0.03),
    "surface-raised-base": (P, 0.12),
    "surface-raised-base-hover": (P, 0.16),
    "surface-raised-base-active": (P, 0.2),
    "surface-raised-strong": (P, 0.16),
    "surface-raised-strong-hover": (P, 0.2),
    "surface-raised-stronger": (P, 0.2),
    "surface-raised-stronger-hover": (P, 0.24),
    "surface-raised-stronger-non-alpha": (P, 0.22),
    "surface-float-base": (P, 0.16),
    "surface-float-base-hover": (P, 0.2),
    "surface-float-base-active": (P, 0.24),
    "surface-float-strong": (P, 0.2),
    "surface-float-strong-hover": (P, 0.24),
    "surface-float-strong-active": (P, 0.28),
    "surface-weak": (N, 0.1),
    "surface-weaker": (N, 0.06),
    "surface-strong": (P, 0.24),
    "surface-brand-base": (P, 0.5),
    "surface-brand-hover": (P, 0.55),
    "surface-brand-active": (P, 0.6),
    "surface-interactive-base": (I, 0.3),
    "surface-interactive-hover": (I, 0.35),
    "surface-interactive-active": (I, 0.4),
    "surface-interactive-weak": (I, 0.15),
    "surface-interactive-weak-hover": (I, 0.2),
    "surface-diff-unchanged-base": (N, 0.05),
    "surface-diff-skip-base": (N, 0.1),
    "surface-diff-add-base": (DA, 0.15),
    "surface-diff-add-weak": (DA, 0.1),
    "surface-diff-add-weaker": (DA, 0.06),
    "surface-diff-add-strong": (DA, 0.25),
    "surface-diff-add-stronger": (DA, 0.35),
    "surface-diff-delete-base": (DD, 0.15),
    "surface-diff-delete-weak": (DD, 0.1),
    "surface-diff-delete-weaker": (DD, 0.06),
    "surface-diff-delete-strong": (DD, 0.25),
    "surface-diff-delete-stronger": (DD, 0.35),
    "surface-diff-hidden-base": (N, 0.15),
    "surface-diff-hidden-weak": (N, 0.1),
    "surface-diff-hidden-weaker": (N, 0.06),
    "surface-diff-hidden-strong": (N, 0.25),
    "surface-diff-hidden-stronger": (N, 0.35),

    # Text
    "text-base": (N, 0.92),
    "text-weak": (N, 0.75),
    "text-weaker": (N, 0.6),
    "text-strong": (N, 0.98),
    "text-stronger": (N, 1.0),
    "text-invert-base": (N, 0.05),
    "text-invert-weak": (N, 0.15),
    "text-invert-weaker": (N, 0.25),
    "text-invert-strong": (N, 0.0),
    "text-on-brand-base": (P, 0.98),
    "text-on-brand-weak": (P, 0.9),
    "text-on-brand-weaker": (P, 0.8),
    "text-on-brand-strong": (P, 1.0),
    "text-interactive-base": (I, 0.75),
    "text-on-interactive-base": (I, 0.02),
    "text-on-interactive-weak": (I, 0.1),
    "text-diff-add-base": (DA, 0.8),
    "text-diff-add-strong": (DA, 0.9),
    "text-diff-delete-base": (DD, 0.8),
    "text-diff-delete-strong": (DD, 0.9),

    # Inputs and buttons
    "input-base": (P, 0.1),
    "input-hover": (P, 0.14),
    "input-active": (P, 0.18),
    "input-disabled": (N, 0.2),
    "input-focus-ring": (I, 0.6),
    "button-secondary-base": (P, 0.2),
    "button-secondary-hover": (P, 0.25),
    "button-danger-base": (E, 0.5),
    "button-danger-hover": (E, 0.55),
    "button-danger-active": (E, 0.6),
    "button-ghost-hover": (P, 0.15),
    "button-ghost-hover2": (P, 0.2),

    # Borders
    "border-base": (N, 0.3),
    "border-hover": (N, 0.35),
    "border-active": (N, 0.4),
    "border-selected": (I, 0.6),
    "border-disabled": (N, 0.2),
    "border-focus": (I, 0.65),
    **_states("border-weak", N, 0.2),
    **_states("border-weaker", N, 0.12, 0.03),
    **_states("border-strong", N, 0.45),
    "border-interactive-base": (I, 0.5),
    "border-interactive-hover": (I, 0.55),
    "border-interactive-active": (I, 0.6),
    "border-interactive-selected": (I, 0.65),
    "border-color": (N, 0.3),

    # Navigation
    "tree-background-selected": (I, 0.25),
    "tree-background-hover": (P, 0.15),
    "tree-foreground-selected": (N, 0.98),
    "tree-foreground-hover": (N, 0.9),
    "tree-icon-selected": (I, 0.75),
    "tab-active-background": (P, 0.1),
    "tab-active-foreground": (N, 0.95),
    "tab-active-border": (I, 0.6),
    "tab-inactive-background": (P, 0.04),
    "tab-inactive-foreground": (N, 0.65),
    "tab-active": (I, 0.6),
    "tab-inactive": (P, 0.1),
    "tab-hover": (P, 0.15),
    "breadcrumb-background": (P, 0.04),
    "breadcrumb-foreground": (N, 0.7),
    "breadcrumb-foreground-hover": (N, 0.9),
    "breadcrumb-separator": (N, 0.45),

    # Terminal
    "terminal-cursor": (I, 0.7),
    "terminal-selection": (I, 0.25),

    # Icons
    "icon-base": (N, 0.75),
    "icon-hover": (N, 0.85),
    "icon-active": (N, 0.9),
    "icon-selected": (I, 0.7),
    "icon-disabled": (N, 0.35),
    "icon-focus": (I, 0.75),
    "icon-invert-base": (N, 0.05),
    **_states("icon-weak", N, 0.55),
    **_states("icon-strong", N, 0.8),
    "icon-brand-base": (P, 0.7),
    "icon-interactive-base": (I, 0.7),
    "icon-diff-add-base": (DA, 0.7),
    "icon-diff-add-hover": (DA, 0.75),
    "icon-diff-add-active": (DA, 0.8),
    "icon-diff-delete-base": (DD, 0.7),
    "icon-diff-delete-hover": (DD, 0.75),
    "icon-diff-modified-base": (W, 0.7),
    "icon-on-brand-base": (P, 0.98),
    "icon-on-brand-hover": (P, 0.95),
    "icon-on-brand-selected": (P, 1.0),
    "icon-on-interactive-base": (I, 0.02),
    "icon-agent-plan-base": (F, 0.7),
    "icon-agent-docs-base": (I, 0.7),
    "icon-agent-ask-base": (W, 0.7),
    "icon-agent-build-base": (OK, 0.7),

    # Status families
    **_semantic("success", OK),
    **_semantic("warning", W),
    **_semantic("critical", E),
    **_semantic("info", F),

    # Syntax
    "syntax-comment": (N, 0.55),
    "syntax-keyword": (I, 0.75),
    "syntax-function": (F, 0.75),
    "syntax-variable": (N, 0.9),
    "syntax-string": (OK, 0.75),
    "syntax-number": (W, 0.75),
    "syntax-type": (F, 0.8),
    "syntax-operator": (N, 0.8),
    "syntax-punctuation": (N, 0.7),
    "syntax-object": (P, 0.8),
    "syntax-regexp": (E, 0.75),
    "syntax-primitive": (W, 0.8),
    "syntax-property": (I, 0.8),
    "syntax-constant": (W, 0.7),
    "syntax-tag": (E, 0.7),
    "syntax-attribute": (F, 0.7),
    "syntax-value": (OK, 0.8),
    "syntax-namespace": (I, 0.85),
    "syntax-class": (F, 0.85),
    "syntax-success": (OK, 0.75),
    "syntax-warning": (W, 0.75),
    "syntax-critical": (E, 0.75),
    "syntax-info": (F, 0.75),
    "syntax-diff-add": (DA, 0.75),
    "syntax-diff-delete": (DD, 0.75),

    # Markdown
    "markdown-text": (N, 0.9),
    "markdown-heading": (I, 0.8),
    "markdown-link": (F, 0.75),
    "markdown-link-text": (I, 0.75),
    "markdown-code": (OK, 0.75),
    "markdown-block-quote": (N, 0.6),
    "markdown-emph": (W, 0.8),
    "markdown-strong": (N, 0.98),
    "markdown-horizontal-rule": (N, 0.35),
    "markdown-list-item": (I, 0.7),
    "markdown-list-enumeration": (F, 0.7),
    "markdown-image": (F, 0.75),
    "markdown-image-text": (N, 0.75),
    "markdown-code-block": (N, 0.85),

    # Editor
    "code-background": (P, 0.04),
    "code-foreground": (N, 0.9),
    "line-indicator": (N, 0.4),
    "line-indicator-active": (I, 0.7),
    "line-indicator-hover": (N, 0.55),
    "avatar-background": (F, 0.3),
    "avatar-foreground": (F, 0.9),
    "scrollbar-thumb": (N, 0.35),
    "scrollbar-track": (P, 0.04),
    "focus-ring": (I, 0.65),
    "selection-background": (I, 0.3),
    "selection-foreground": (N, 0.98),
    "selection-inactive-background": (N, 0.2),

    # Legacy flat aliases
    **_action("primary", P),
    **_action("secondary", F),
    **_action("accent", I),
    **_action("success", OK),
    **_action("warning", W),
    **_action("critical", E),
    **_action("info", F),
    **_action("interactive", I),
    "diff-add-base": (DA, 0.2),
    "diff-add-foreground": (DA, 0.85),
    "diff-delete-base": (DD, 0.2),
    "diff-delete-foreground": (DD, 0.85),
}

# (background, text) per avatar swatch
AVATAR_COLORS: Dict[str, Tuple[str, str]] = {
    "pink": ("#fbcfe8", "#9d174d"),
    "mint": ("#bbf7d0", "#166534"),
    "orange": ("#fed7aa", "#9a3412"),
    "purple": ("#e9d5ff", "#6b21a8"),
    "cyan": ("#a5f3fc", "#155e75"),
    "lime": ("#d9f99d", "#3f6212"),
    "blue": ("#bfdbfe", "#1e40af"),
    "green": ("#a7f3d0", "#065f46"),
    "yellow": ("#fef08a", "#854d0e"),
    "red": ("#fecaca", "#991b1b"),
    "gray": ("#e5e7eb", "#374151"),
}

ANSI_NAMES = [
    "black", "red", "green", "yellow", "blue", "magenta", "cyan", "white",
    "bright-black", "bright-red", "bright-green", "bright-yellow",
    "bright-blue", "bright-magenta", "bright-cyan", "bright-white",
]

ANSI_DARK = dict(zip(ANSI_NAMES, [
    "#000000", "#ef4444", "#22c55e", "#eab308", "#3b82f6", "#a855f7", "#06b6d4", "#e5e7eb",
    "#cac2d1", "#f379b8", "#4ade80", "#d6ee80", "#9b84ed", "#f190fd", "#22d3ee", "#ffffff",
]))

ANSI_LIGHT = dict(zip(ANSI_NAMES, [
    "#1f2937", "#dc2626", "#16a34a", "#ca8a04", "#23106f", "#9333ea", "#3d148d", "#280c55",
    "#3d3041", "#6b0f36", "#0f6a2b", "#4c3f0b", "#663fe4", "#a855f7", "#4d1cc6", "#37106f",
]))

SHADOW_OVERLAY = {
    True: {"shadow": "rgba(0, 0, 0, 0.5)", "overlay": "rgba(0, 0, 0, 0.6)"},
    False: {"shadow": "rgba(0, 0, 0, 0.15)", "overlay": "rgba(0, 0, 0, 0.3)"},
}


def constant_tokens(is_dark_mode: bool) -> ThemeColors:
    """Tokens that do not depend on the seeds."""
    tokens: ThemeColors = {}
    for name, (background, text) in AVATAR_COLORS.items():
        tokens[f"avatar-background-{name}"] = background
        tokens[f"avatar-text-{name}"] = text
    ansi = ANSI_DARK if is_dark_mode else ANSI_LIGHT
    for name, value in ansi.items():
        tokens[f"terminal-ansi-{name}"] = value
    tokens.update(SHADOW_OVERLAY[bool(is_dark_mode)])
    return tokens


TOKEN_NAMES: List[str] = list(TOKEN_POSITIONS) + list(constant_tokens(True))


def is_surface_token(token: str) -> bool:
    return token.startswith("background-") or token.startswith("surface-")


def sample_position(token: str, position: float, is_dark_mode: bool) -> float:
    """Fractional ramp position actually sampled for ``token``.

    Light mode mirrors positions. Background and surface tokens are held
    at or below ``LIGHT_SURFACE_CLAMP`` there; the constant assumes ramps
    near the default 25 stops.
    """
    if is_dark_mode:
        return position
    mirrored = 1 - position
    if is_surface_token(token):
        return min(LIGHT_SURFACE_CLAMP, mirrored)
    return mirrored


def _ramp_index(position: float, length: int) -> int:
    return int(math.floor(position * (length - 1) + 0.5))


def _stop_hex(stop: Union[ColorStop, str]) -> str:
    return stop if isinstance(stop, str) else stop.hex


def build_seed_ramps(seeds: List[SeedColor], count: int = 12, contrast: float = 50,
                     strategy: VariantStrategy = VariantStrategy.TINTS_SHADES,
                     space: ColorSpace = ColorSpace.HSL,
                     output: OutputFormat = OutputFormat.SRGB) -> Dict[SeedName, List[ColorStop]]:
    """Build one variant ramp per seed at neutral brightness.

    Seed HSL coordinates are read as coordinates of ``space``.
    """
    ramps: Dict[SeedName, List[ColorStop]] = {}
    for seed in seeds:
        ramps[seed.name] = generate_variants(seed.hsl, count, contrast, strategy, space, output)
    return ramps


def synthesize_tokens(seeds: List[SeedColor], ramps: Mapping[SeedName, Ramp],
                      is_dark_mode: bool,
                      overrides: Optional[Mapping[str, object]] = None) -> ThemeColors:
    """Expand seeds and their ramps into the flat token map.

    Args:
        seeds: The nine seeds
        ramps: Ramp per seed name, darkest first. Stops or hex strings.
        is_dark_mode: Sample positions as authored (dark) or mirrored (light)
        overrides: Token name to hex; unset, ``"unassigned"`` and
            malformed values are ignored

    Returns:
        Token name to color string
    """
    seed_hex = {seed.name: seed.hex for seed in seeds}
    neutral_hex = seed_hex.get(SeedName.NEUTRAL, "#808080")

    tokens: ThemeColors = {}
    for token, (seed_name, position) in TOKEN_POSITIONS.items():
        fallback = seed_hex.get(seed_name, neutral_hex)
        ramp = ramps.get(seed_name) or []
        if not ramp:
            tokens[token] = fallback
            continue
        index = _ramp_index(sample_position(token, position, is_dark_mode), len(ramp))
        tokens[token] = _stop_hex(ramp[index])

    tokens.update(constant_tokens(is_dark_mode))

    for token, raw in (overrides or {}).items():
        override = Override.parse(raw)
        if override.is_set:
            tokens[token] = override.value
        elif raw is not None:
            logger.debug(f"Ignoring override for {token}: {raw!r}")

    return tokens
