"""WCAG contrast audit.

Scores background/foreground token pairs against a role-dependent target
and searches for the closest passing replacement color.

The hue pass is intentional. Non-text, border and splash pairs pass when
the two colors are at least ``HUE_PASS_DEGREES`` apart in hue, even if their
luminance contrast is below target. Decorative elements that differ in hue
are distinguishable without luminance contrast; text never gets this
relaxation.
"""

import logging
import re
from typing import Dict, List, Mapping, NamedTuple, Optional

from ..cache import ContrastCache
from ..schema import ContrastScore, PairType, WcagLevel, WcagPair, is_hex_color
from .converters import hex_to_hsl, hex_to_rgb, hsl_to_hex

logger = logging.getLogger(__name__)

TEXT_TARGET = 4.5
DECORATIVE_TARGET = 1.1
HUE_PASS_DEGREES = 15.0
GRAYSCALE_SATURATION = 5.0


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of an sRGB hex color."""
    def channel(value: int) -> float:
        c = value / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (channel(v) for v in hex_to_rgb(hex_color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def get_contrast_ratio(bg: str, fg: str) -> float:
    """Contrast ratio ``(L1 + 0.05) / (L2 + 0.05)`` with L1 the lighter color."""
    lum1 = relative_luminance(bg)
    lum2 = relative_luminance(fg)
    lighter, darker = max(lum1, lum2), min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def get_wcag_level(ratio: float) -> WcagLevel:
    if ratio >= 7:
        return WcagLevel.AAA
    if ratio >= 4.5:
        return WcagLevel.AA
    if ratio >= 3:
        return WcagLevel.A
    return WcagLevel.FAIL


def get_hue_difference(color1: str, color2: str) -> float:
    """Circular hue distance in [0, 180]; 0 when either color is near-grey."""
    hsl1 = hex_to_hsl(color1)
    hsl2 = hex_to_hsl(color2)
    if hsl1.s < GRAYSCALE_SATURATION or hsl2.s < GRAYSCALE_SATURATION:
        return 0.0
    diff = abs(hsl1.h - hsl2.h) % 360
    return min(diff, 360 - diff)


def _is_splash(category: Optional[str]) -> bool:
    if not category:
        return False
    upper = category.upper()
    return "SPLASH" in upper or "LOGO" in upper


def get_target_contrast(is_non_text: bool = False, is_border: bool = False,
                        is_weak: bool = False, is_strong: bool = False,
                        category: Optional[str] = None) -> float:
    """Minimum contrast ratio a pair must reach.

    Text always targets 4.5 whatever its weak/strong flags. Non-text only
    targets 4.5 when strong, meaning it renders glyphs.
    """
    if _is_splash(category):
        return DECORATIVE_TARGET
    if is_border:
        return DECORATIVE_TARGET
    if is_non_text:
        return TEXT_TARGET if is_strong else DECORATIVE_TARGET
    return TEXT_TARGET


def score(bg: str, fg: str, is_non_text: bool = False, is_border: bool = False,
          is_weak: bool = False, is_strong: bool = False,
          category: Optional[str] = None) -> ContrastScore:
    """Score a background/foreground pair.

    Args:
        bg: Background hex
        fg: Foreground hex
        is_non_text: Foreground is an icon, surface or other decoration
        is_border: Foreground is a border, ring or separator
        is_weak: Foreground is a weak variant
        is_strong: Foreground is a strong variant
        category: Audit category, used for the splash/logo policy

    Returns:
        ContrastScore with the ratio rounded to two decimals
    """
    ratio = get_contrast_ratio(bg, fg)
    hue_diff = get_hue_difference(bg, fg)
    passed = ratio >= get_target_contrast(is_non_text, is_border, is_weak, is_strong, category)

    if not passed and (is_non_text or is_border or _is_splash(category)):
        passed = hue_diff >= HUE_PASS_DEGREES

    return ContrastScore(
        ratio=round(ratio, 2),
        hue_diff=hue_diff,
        level=get_wcag_level(ratio),
        passed=passed,
    )


def get_closest_passing_color(bg: str, fg: str, is_non_text: bool = False,
                              is_border: bool = False, is_weak: bool = False,
                              is_strong: bool = False,
                              category: Optional[str] = None) -> str:
    """Closest passing foreground found by varying lightness only.

    Scans integer lightness 0-100 at the foreground's hue and saturation.
    The candidate nearest the original lightness wins; ties go to the one
    nearer 50. Returns ``fg`` when it already passes or nothing passes.
    """
    flags = (is_non_text, is_border, is_weak, is_strong, category)
    if score(bg, fg, *flags).passed:
        return fg

    original = hex_to_hsl(fg)
    best = None
    best_rank = None
    for lightness in range(101):
        candidate = hsl_to_hex(original.h, original.s, lightness)
        if not score(bg, candidate, *flags).passed:
            continue
        rank = (abs(lightness - original.l), abs(lightness - 50))
        if best_rank is None or rank < best_rank:
            best, best_rank = candidate, rank

    if best is None:
        logger.debug(f"No passing lightness for {fg} on {bg}")
        return fg
    return best


def get_closest_hue_passing_color(bg: str, fg: str, is_non_text: bool = False,
                                  is_border: bool = False, is_weak: bool = False,
                                  is_strong: bool = False,
                                  category: Optional[str] = None) -> str:
    """Closest passing foreground found by rotating hue only.

    Ties keep the lower hue.
    """
    flags = (is_non_text, is_border, is_weak, is_strong, category)
    if score(bg, fg, *flags).passed:
        return fg

    original = hex_to_hsl(fg)
    best = None
    best_distance = None
    for hue in range(360):
        candidate = hsl_to_hex(hue, original.s, original.l)
        if not score(bg, candidate, *flags).passed:
            continue
        diff = abs(hue - original.h) % 360
        distance = min(diff, 360 - diff)
        if best_distance is None or distance < best_distance:
            best, best_distance = candidate, distance

    if best is None:
        logger.debug(f"No passing hue for {fg} on {bg}")
        return fg
    return best


def format_agent_label(text: str) -> str:
    """``kebab-case`` or ``camelCase`` to ``UPPER_SNAKE``."""
    if not text:
        return ""
    return re.sub(r'([a-z])([A-Z])', r'\1_\2', text.replace('-', '_')).upper()


class AuditEntry(NamedTuple):
    """One catalogue entry"""
    category: str
    label: str
    bg_key: str
    fg_key: str
    desc: str
    non_text: bool = False


def _upper_key(key: str) -> str:
    return key.upper().replace('-', '_')


def _build_catalogue() -> List[AuditEntry]:
    f = format_agent_label
    entries: List[AuditEntry] = []

    def add(category, label, bg_key, fg_key, desc, non_text=False):
        entries.append(AuditEntry(category, label, bg_key, fg_key, desc, non_text))

    cat = "LOG_00_SESSION_CRITICAL_AUDIT"
    add(cat, f("ACTIVE_SESSION_TEXT"), "surface-base-active", "text-text-strong", "ACTIVE SESSION TEXT")
    add(cat, f("ACTIVE_SESSION_ICON"), "surface-base-active", "text-icon-weak", "ACTIVE SESSION ICON", True)
    add(cat, f("HOVER_SESSION_TEXT"), "surface-raised-base-hover", "text-text-strong", "HOVER SESSION TEXT")
    add(cat, f("HOVER_SESSION_ICON"), "surface-raised-base-hover", "text-icon-weak", "HOVER SESSION ICON", True)

    cat = "LOG_01_TYPOGRAPHY"
    for bg in ("background-base", "background-strong"):
        for fg in ("text-base", "text-weak", "text-strong"):
            label = f"{f(fg.replace('text-', '', 1))}_ON_{f(bg.replace('background-', '', 1))}"
            add(cat, label, bg, fg, f"{fg} ON {bg}")

    cat = "LOG_02_SURFACES"
    surfaces = [
        "surface-base", "surface-base-hover",
        "surface-inset-base", "surface-inset-strong",
        "surface-raised-base", "surface-raised-strong", "surface-raised-stronger-non-alpha",
        "surface-float-base", "surface-float-strong",
    ]
    for bg in surfaces:
        name = f(bg.replace("surface-", "", 1))
        add(cat, name, "background-base", bg, f"SURFACE {_upper_key(bg)} ON BACKGROUND", True)
        add(cat, f"TEXT_ON_{name}", bg, "text-base", f"TEXT_BASE_ON_{_upper_key(bg)}")
        add(cat, f"ICON_ON_{name}", bg, "icon-base", f"ICON_BASE_ON_{_upper_key(bg)}", True)
        if "-hover" in bg:
            add(cat, f"{name}_VS_BASE", bg.replace("-hover", "", 1), bg, "HOVER VS BASE STATE", True)

    cat = "LOG_03_ACTIONS"
    interactive_surfaces = [
        ("surface-brand-base", "text-on-brand-base", "BRAND_BASE"),
        ("surface-brand-hover", "text-on-brand-base", "BRAND_HOVER"),
        ("surface-brand-active", "text-on-brand-base", "BRAND_ACTIVE"),
        ("surface-brand-base", "text-on-brand-strong", "BRAND_STRONG"),
        ("surface-interactive-base", "text-on-interactive-base", "INTERACTIVE_BASE"),
        ("surface-interactive-hover", "text-on-interactive-base", "INTERACTIVE_HOVER"),
        ("surface-interactive-active", "text-on-interactive-base", "INTERACTIVE_ACTIVE"),
        ("surface-interactive-weak", "text-on-interactive-weak", "INTERACTIVE_WEAK"),
        ("surface-interactive-weak-hover", "text-on-interactive-weak", "INTERACTIVE_WEAK_HOVER"),
    ]
    for bg, fg, label in interactive_surfaces:
        add(cat, f(label), bg, fg, f"TEXT_ON_{_upper_key(bg)}")
        if "-hover" in bg:
            add(cat, f"{f(label)}_VS_BASE", bg.replace("-hover", "-base", 1), bg, "HOVER VS BASE STATE", True)
        elif "-active" in bg:
            add(cat, f"{f(label)}_VS_BASE", bg.replace("-active", "-base", 1), bg, "ACTIVE VS BASE STATE", True)
    add(cat, f("INTERACTIVE_TEXT"), "background-base", "text-interactive-base", "INTERACTIVE_TEXT_ON_BACKGROUND")
    add(cat, f("INTERACTIVE_ICON"), "background-base", "icon-interactive-base", "INTERACTIVE_ICON_CONTRAST", True)
    for state in ("", "_HOVER", "_ACTIVE", "_SELECTED"):
        suffix = state.lstrip("_").lower() or "base"
        add(cat, f(f"INTERACTIVE_BORDER{state}"), "background-base", f"border-interactive-{suffix}",
            f"INTERACTIVE_BORDER{state}_CONTRAST", True)

    cat = "LOG_04_BUTTONS"
    add(cat, f("SECONDARY_BASE"), "button-secondary-base", "text-base", "SECONDARY_BUTTON_TEXT")
    add(cat, f("SECONDARY_HOVER"), "button-secondary-hover", "text-base", "SECONDARY_BUTTON_HOVER_TEXT")
    add(cat, f("SECONDARY_HOVER_VS_BASE"), "button-secondary-base", "button-secondary-hover", "SECONDARY HOVER VS BASE", True)
    add(cat, f("GHOST_HOVER"), "button-ghost-hover", "text-base", "GHOST_BUTTON_HOVER_TEXT")
    add(cat, f("GHOST_HOVER_VS_BASE"), "background-base", "button-ghost-hover", "GHOST HOVER VS BASE", True)
    add(cat, f("GHOST_HOVER2"), "button-ghost-hover2", "text-base", "GHOST_BUTTON_HOVER2_TEXT")
    add(cat, f("GHOST_HOVER2_VS_BASE"), "background-base", "button-ghost-hover2", "GHOST HOVER2 VS BASE", True)
    add(cat, f("DANGER_BASE"), "button-danger-base", "text-on-critical-base", "DANGER_BUTTON_TEXT")
    add(cat, f("DANGER_HOVER"), "button-danger-hover", "text-on-critical-base", "DANGER_BUTTON_HOVER_TEXT")
    add(cat, f("DANGER_HOVER_VS_BASE"), "button-danger-base", "button-danger-hover", "DANGER HOVER VS BASE", True)
    add(cat, f("DANGER_ACTIVE"), "button-danger-active", "text-on-critical-base", "DANGER_BUTTON_ACTIVE_TEXT")
    add(cat, f("DANGER_ACTIVE_VS_BASE"), "button-danger-base", "button-danger-active", "DANGER ACTIVE VS BASE", True)

    cat = "LOG_05_SEMANTIC"
    for kind in ("success", "warning", "critical", "info"):
        upper = kind.upper()
        for suffix in ("base", "hover", "active", "weak", "strong"):
            state = suffix.upper()
            bg = f"surface-{kind}-{suffix}"
            fg = f"text-on-{kind}-strong" if suffix == "strong" else f"text-on-{kind}-base"
            add(cat, f(f"{kind}_{state}"), bg, fg, f"{upper}_{state}_SURFACE_CONTRAST")
            add(cat, f(f"{kind}_STRONG_ON_{state}"), bg, f"text-on-{kind}-strong",
                f"{upper}_STRONG_TEXT_ON_{state}_SURFACE")
            if suffix in ("hover", "active"):
                add(cat, f(f"{kind}_{state}_VS_BASE"), f"surface-{kind}-base", bg, f"{state} VS BASE STATE", True)
        add(cat, f(f"{kind}_ICON"), "background-base", f"icon-{kind}-base", f"{upper}_ICON_ON_BACKGROUND", True)
        add(cat, f(f"{kind}_BORDER"), "background-base", f"border-{kind}-base", f"{upper}_BORDER_ON_BACKGROUND", True)
        add(cat, f(f"{kind}_STRONG_ON_BG"), "background-base", f"text-on-{kind}-strong", f"{upper}_STRONG_TEXT_ON_MAIN_BG")
        add(cat, f(f"{kind}_BASE_ON_BG"), "background-base", f"text-on-{kind}-base", f"{upper}_BASE_TEXT_ON_MAIN_BG")

    cat = "LOG_06_DIFFS"
    stronger_text = {"add": "text-on-success-base", "delete": "text-on-critical-base", "hidden": "text-base"}
    for kind in ("add", "delete", "hidden"):
        label = kind.upper()
        add(cat, f(f"{label}_TEXT"), f"surface-diff-{kind}-base", f"text-diff-{kind}-base", f"DIFF_{label}_TEXT_CONTRAST")
        add(cat, f(f"{label}_WEAK"), f"surface-diff-{kind}-weak", f"text-diff-{kind}-base", f"{label}_TEXT_ON_WEAK_BACKGROUND")
        add(cat, f(f"{label}_WEAKER"), f"surface-diff-{kind}-weaker", f"text-diff-{kind}-base",
            f"{label}_TEXT_ON_WEAKER_BACKGROUND")
        add(cat, f(f"{label}_STRONG"), f"surface-diff-{kind}-strong", f"text-diff-{kind}-strong", f"STRONG_{label}_TEXT_CONTRAST")
        add(cat, f(f"{label}_STRONGER"), f"surface-diff-{kind}-stronger", stronger_text[kind],
            f"{label}_TEXT_ON_STRONGER_BACKGROUND")
        add(cat, f(f"{label}_ICON"), "background-base", f"icon-diff-{kind}-base", f"DIFF_{label}_ICON_ON_BACKGROUND", True)
    add(cat, f("SKIP_BACKGROUND"), "background-base", "surface-diff-skip-base", "SKIP_LINE_CONTRAST", True)
    add(cat, f("UNCHANGED_BACKGROUND"), "background-base", "surface-diff-unchanged-base", "UNCHANGED_LINE_CONTRAST", True)
    add(cat, f("SYNTAX_DIFF_ADD"), "code-background", "syntax-diff-add", "SYNTAX_DIFF_ADD_ON_CODE_BG")
    add(cat, f("SYNTAX_DIFF_DELETE"), "code-background", "syntax-diff-delete", "SYNTAX_DIFF_DELETE_ON_CODE_BG")

    cat = "LOG_07_INPUTS"
    add(cat, f("INPUT_TEXT"), "input-base", "text-base", "TEXT_INSIDE_INPUT_FIELD")
    add(cat, f("INPUT_BORDER"), "background-base", "border-base", "INPUT_BORDER_ON_BACKGROUND", True)
    add(cat, f("INPUT_PLACEHOLDER"), "input-base", "text-weaker", "PLACEHOLDER_TEXT_CONTRAST")
    add(cat, f("INPUT_HOVER"), "input-hover", "text-base", "TEXT_IN_HOVERED_INPUT")
    add(cat, f("INPUT_ACTIVE"), "input-active", "text-base", "TEXT_IN_ACTIVE_INPUT")
    add(cat, f("INPUT_DISABLED"), "background-base", "input-disabled", "DISABLED_INPUT_BACKGROUND_CONTRAST", True)
    add(cat, f("INPUT_SELECTED_BORDER"), "background-base", "border-selected", "SELECTED_INPUT_BORDER_CONTRAST", True)
    add(cat, f("INPUT_FOCUS_RING"), "background-base", "input-focus-ring", "INPUT FOCUS RING", True)

    cat = "LOG_08_TERMINAL"
    for color in ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"):
        add(cat, f(color), "background-base", f"terminal-ansi-{color}", f"TERMINAL {color.upper()} ON BACKGROUND")
        add(cat, f(f"bright-{color}"), "background-base", f"terminal-ansi-bright-{color}",
            f"TERMINAL BRIGHT {color.upper()} ON BACKGROUND")
    add(cat, f("TERMINAL_CURSOR"), "background-base", "terminal-cursor", "TERMINAL CURSOR CONTRAST", True)
    add(cat, f("TERMINAL_SELECTION"), "terminal-selection", "text-base", "TERMINAL SELECTION CONTRAST")

    cat = "LOG_09_COMPARISONS"
    comparisons = [
        ("TEXT_BASE_VS_ICON_BASE", "text-base", "TEXT (4.5:1) VS ICON (1.1:1)", False),
        ("ICON_BASE_VS_TEXT_BASE", "icon-base", "ICON (1.1:1) VS TEXT (4.5:1)", True),
        ("ACTIVE_INDICATOR_VS_BORDER", "line-indicator-active", "ACTIVE INDICATOR (4.5:1) VS BORDER (1.1:1)", True),
        ("BORDER_VS_ACTIVE_INDICATOR", "border-base", "BORDER (1.1:1) VS ACTIVE INDICATOR (4.5:1)", True),
        ("STATUS_ICON_VS_DECORATIVE", "status-icon", "STATUS ICON (4.5:1) VS DECORATIVE (1.1:1)", True),
        ("ICON_WEAK_VS_STATUS", "icon-weak", "WEAK ICON (1.1:1) VS STATUS (4.5:1)", True),
        ("TAB_ACTIVE_VS_INACTIVE", "tab-active", "ACTIVE TAB (4.5:1) VS INACTIVE (1.1:1)", True),
        ("SURFACE_WEAK_VS_ACTIVE", "surface-weak", "WEAK SURFACE (1.1:1) VS ACTIVE (4.5:1)", True),
        ("TERMINAL_CURSOR_VS_BORDER", "terminal-cursor", "CURSOR (4.5:1) VS BORDER (1.1:1)", True),
        ("LOGO_VS_TEXT", "logo-base-strong", "LOGO (1.1:1) VS TEXT (4.5:1)", True),
    ]
    for label, fg, desc, non_text in comparisons:
        add(cat, f(label), "background-base", fg, desc, non_text)

    cat = "LOG_09_AVATARS"
    avatars = ("pink", "mint", "orange", "purple", "cyan", "lime", "blue", "green", "yellow", "red", "gray")
    for color in avatars:
        add(cat, f(color), f"avatar-background-{color}", f"avatar-text-{color}", f"AVATAR_{color.upper()}_CONTRAST")
    for color in avatars:
        add(cat, f(f"EXPANDED_{color}"), f"avatar-background-{color}", f"avatar-text-{color}",
            f"EXPANDED_AVATAR_{color.upper()}_CONTRAST")

    cat = "LOG_10_SYNTAX"
    syntax_tokens = [
        "syntax-comment", "syntax-keyword", "syntax-function", "syntax-variable",
        "syntax-string", "syntax-number", "syntax-type", "syntax-operator",
        "syntax-punctuation", "syntax-object", "syntax-regexp", "syntax-primitive",
        "syntax-property", "syntax-constant", "syntax-tag", "syntax-attribute",
        "syntax-value", "syntax-namespace", "syntax-class",
        "syntax-success", "syntax-warning", "syntax-critical", "syntax-info",
        "syntax-diff-add", "syntax-diff-delete",
    ]
    for token in syntax_tokens:
        parts = token.split("-")
        label = f(f"{parts[1]}_{parts[2]}" if len(parts) > 2 else parts[1])
        add(cat, label, "code-background", token, f"SYNTAX {label} ON EDITOR BACKGROUND")

    cat = "LOG_11_UI_EXTRAS"
    add(cat, f("LINE_INDICATOR"), "background-base", "line-indicator", "LINE INDICATOR CONTRAST")
    add(cat, f("LINE_INDICATOR_ACTIVE"), "background-base", "line-indicator-active", "ACTIVE LINE INDICATOR CONTRAST")
    add(cat, f("LINE_INDICATOR_HOVER"), "background-base", "line-indicator-hover", "HOVER LINE INDICATOR CONTRAST")
    add(cat, f("TAB_ACTIVE"), "background-base", "tab-active", "ACTIVE TAB INDICATOR CONTRAST", True)
    add(cat, f("TAB_INACTIVE"), "background-base", "tab-inactive", "INACTIVE TAB INDICATOR CONTRAST", True)
    add(cat, f("TAB_HOVER"), "background-base", "tab-hover", "HOVER TAB INDICATOR CONTRAST", True)
    add(cat, f("FOCUS_RING"), "background-base", "focus-ring", "FOCUS RING CONTRAST", True)
    add(cat, f("SCROLLBAR"), "scrollbar-track", "scrollbar-thumb", "SCROLLBAR CONTRAST", True)
    add(cat, f("SELECTION"), "selection-background", "selection-foreground", "SELECTION CONTRAST", True)
    add(cat, f("INACTIVE_SELECTION"), "selection-inactive-background", "text-base", "INACTIVE SELECTION CONTRAST", True)

    cat = "LOG_12_SPLASH_LOADING"
    add(cat, f("LOGO_BASE"), "background-base", "icon-base", "OPENCODE LOGO BASE ON BACKGROUND", True)
    add(cat, f("LOGO_STRONG"), "background-base", "icon-strong-base", "OPENCODE LOGO STRONG ON BACKGROUND", True)
    add(cat, f("LOGO_WEAK"), "background-base", "icon-weak-base", "OPENCODE LOGO WEAK ON BACKGROUND", True)
    add(cat, f("LOGO_BASE_STRONG"), "icon-base", "icon-strong-base", "LOGO BASE VS STRONG", True)
    add(cat, f("LOGO_BASE_WEAK"), "icon-base", "icon-weak-base", "LOGO BASE VS WEAK", True)
    add(cat, f("LOGO_STRONG_WEAK"), "icon-strong-base", "icon-weak-base", "LOGO STRONG VS WEAK", True)
    add(cat, f("LOADING_SPINNER"), "background-base", "icon-interactive-base", "LOADING SPINNER CONTRAST", True)
    add(cat, f("LOADING_TEXT"), "background-base", "text-weak", "LOADING TEXT CONTRAST")

    cat = "LOG_13_TREE_UI"
    add(cat, f("TREE_BG_SELECTED"), "background-base", "tree-background-selected", "TREE SELECTED BG CONTRAST", True)
    add(cat, f("TREE_BG_HOVER"), "background-base", "tree-background-hover", "TREE HOVER BG CONTRAST", True)
    add(cat, f("TREE_SELECTED_TEXT"), "tree-background-selected", "tree-foreground-selected", "TREE SELECTED TEXT CONTRAST")
    add(cat, f("TREE_HOVER_TEXT"), "tree-background-hover", "tree-foreground-hover", "TREE HOVER TEXT CONTRAST")
    add(cat, f("TREE_ICON_SELECTED"), "tree-background-selected", "tree-icon-selected", "TREE SELECTED ICON CONTRAST", True)
    add(cat, f("TREE_TEXT_ON_BASE"), "background-base", "text-base", "TREE TEXT ON MAIN BACKGROUND")
    add(cat, f("TREE_TEXT_WEAK_ON_BASE"), "background-base", "text-weak", "TREE WEAK TEXT ON MAIN BACKGROUND")

    cat = "LOG_14_TABS_EXTENDED"
    add(cat, f("TAB_ACTIVE_BG"), "background-base", "tab-active-background", "ACTIVE TAB BG CONTRAST", True)
    add(cat, f("TAB_ACTIVE_TEXT"), "tab-active-background", "tab-active-foreground", "ACTIVE TAB TEXT CONTRAST")
    add(cat, f("TAB_ACTIVE_BORDER"), "background-base", "tab-active-border", "ACTIVE TAB BORDER/INDICATOR", True)
    add(cat, f("TAB_INACTIVE_BG"), "background-base", "tab-inactive-background", "INACTIVE TAB BG CONTRAST", True)
    add(cat, f("TAB_INACTIVE_TEXT"), "tab-inactive-background", "tab-inactive-foreground", "INACTIVE TAB TEXT CONTRAST")
    add(cat, f("TAB_HOVER_TEXT"), "background-base", "text-strong", "TAB HOVER TEXT CONTRAST")

    cat = "LOG_15_BREADCRUMBS"
    add(cat, f("BREADCRUMB_TEXT"), "background-base", "breadcrumb-foreground", "BREADCRUMB TEXT ON BG")
    add(cat, f("BREADCRUMB_HOVER"), "background-base", "breadcrumb-foreground-hover", "BREADCRUMB HOVER TEXT ON BG")
    add(cat, f("BREADCRUMB_SEP"), "background-base", "breadcrumb-separator", "BREADCRUMB SEPARATOR CONTRAST", True)
    add(cat, f("BREADCRUMB_BG"), "background-base", "breadcrumb-background", "BREADCRUMB BG CONTRAST", True)

    cat = "LOG_16_BORDERS_FUNCTIONAL"
    for kind in ("interactive", "success", "warning", "critical", "info"):
        upper = kind.upper()
        add(cat, f(f"{kind}_BORDER_BASE"), "background-base", f"border-{kind}-base", f"{upper} BORDER ON BG", True)
        add(cat, f(f"{kind}_BORDER_HOVER"), "background-base", f"border-{kind}-hover", f"{upper} BORDER HOVER ON BG", True)
        add(cat, f(f"{kind}_BORDER_SELECT"), "background-base", f"border-{kind}-selected",
            f"{upper} BORDER SELECTED ON BG", True)

    cat = "LOG_17_MARKDOWN_DETAILED"
    markdown = [
        ("markdown-text", "TEXT"), ("markdown-heading", "HEADING"), ("markdown-link", "LINK"),
        ("markdown-link-text", "LINK_TEXT"), ("markdown-code", "CODE_INLINE"),
        ("markdown-block-quote", "BLOCKQUOTE"), ("markdown-emph", "EMPHASIS"),
        ("markdown-strong", "STRONG"), ("markdown-list-item", "LIST_ITEM"),
        ("markdown-list-enumeration", "LIST_ENUM"), ("markdown-image", "IMAGE"),
        ("markdown-image-text", "IMAGE_TEXT"),
    ]
    for key, label in markdown:
        add(cat, f(label), "background-base", key, f"MARKDOWN {label} ON BACKGROUND")
    add(cat, f("CODE_BLOCK_BG"), "background-base", "markdown-code-block", "MARKDOWN CODE BLOCK CONTRAST", True)
    add(cat, f("HR_LINE"), "background-base", "markdown-horizontal-rule", "MARKDOWN HORIZONTAL RULE", True)

    cat = "LOG_18_EDITOR_ADDITIONAL"
    add(cat, f("CODE_FOREGROUND"), "code-background", "code-foreground", "EDITOR DEFAULT TEXT CONTRAST")
    add(cat, f("LINE_INDICATOR"), "background-base", "line-indicator", "LINE INDICATOR CONTRAST")
    add(cat, f("LINE_INDICATOR_ACTIVE"), "background-base", "line-indicator-active", "ACTIVE LINE INDICATOR CONTRAST")
    add(cat, f("TAB_ACTIVE"), "background-base", "tab-active", "ACTIVE TAB CONTRAST", True)
    add(cat, f("TAB_INACTIVE"), "background-base", "tab-inactive", "INACTIVE TAB CONTRAST", True)
    add(cat, f("TAB_HOVER"), "background-base", "tab-hover", "HOVER TAB CONTRAST", True)

    cat = "LOG_19_BORDERS"
    borders = [
        "border-base", "border-hover", "border-active", "border-selected",
        "border-weak-base", "border-weak-hover", "border-weak-active",
        "border-weaker-base", "border-weaker-hover", "border-weaker-active",
        "border-strong-base", "border-strong-hover", "border-strong-active",
        "border-interactive-base", "border-success-base", "border-warning-base",
        "border-critical-base", "border-info-base",
    ]
    for token in borders:
        add(cat, f(token.replace("border-", "", 1)), "background-base", token,
            f"BORDER {_upper_key(token)} ON BACKGROUND", True)

    cat = "LOG_30_ICONS_DETAILED"
    for strength in ("", "weak-", "weaker-", "strong-"):
        for variant in ("base", "hover", "active", "selected"):
            token = f"icon-{strength}{variant}"
            add(cat, f(token), "background-base", token, f"ICON {token.upper()} ON BACKGROUND", True)

    cat = "LOG_20_SELECTIONS"
    add(cat, f("SELECTION_TEXT"), "selection-background", "selection-foreground", "SELECTION TEXT CONTRAST")
    add(cat, f("BASE_TEXT_ON_SELECTION"), "selection-background", "text-base", "BASE TEXT ON SELECTION BACKGROUND")
    add(cat, f("INACTIVE_SELECTION_TEXT"), "selection-inactive-background", "text-base", "TEXT ON INACTIVE SELECTION")
    add(cat, f("SELECTION_VS_BG"), "background-base", "selection-background", "SELECTION BACKGROUND VS BASE", True)
    add(cat, f("INACTIVE_SELECTION_VS_BG"), "background-base", "selection-inactive-background",
        "INACTIVE SELECTION VS BASE", True)
    add(cat, f("SELECTION_TEXT_BASE"), "selection-background", "text-base", "BASE TEXT ON SELECTION")
    add(cat, f("SELECTION_TEXT_WEAK"), "selection-background", "text-weak", "WEAK TEXT ON SELECTION")
    add(cat, f("SELECTION_DIFF_ADD"), "selection-background", "text-diff-add-base", "DIFF ADD TEXT ON SELECTION")
    add(cat, f("SELECTION_DIFF_DELETE"), "selection-background", "text-diff-delete-base", "DIFF DELETE TEXT ON SELECTION")

    cat = "LOG_36_SESSION_ITEM_DETAILS"
    for bg in ("tree-background-selected", "selection-background"):
        prefix = "TREE_SEL" if "tree" in bg else "GEN_SEL"
        add(cat, f(f"{prefix}_BASE_TEXT"), bg, "text-base", "PRIMARY TEXT ON SESSION SELECTION")
        add(cat, f(f"{prefix}_WEAK_TEXT"), bg, "text-weak", "SECONDARY/PATH TEXT ON SESSION SELECTION")
        add(cat, f(f"{prefix}_DIFF_ADD"), bg, "text-diff-add-base", "GREEN DIFF COUNT ON SESSION SELECTION")
        add(cat, f(f"{prefix}_DIFF_DELETE"), bg, "text-diff-delete-base", "RED DIFF COUNT ON SESSION SELECTION")
        add(cat, f(f"{prefix}_ICON_BASE"), bg, "icon-base", "ICON ON SESSION SELECTION", True)
        add(cat, f(f"{prefix}_ICON_WEAK"), bg, "icon-weak-base", "WEAK ICON ON SESSION SELECTION", True)

    cat = "LOG_21_SEMANTIC_SURFACES"
    for kind in ("brand", "interactive", "success", "warning", "critical", "info"):
        upper = kind.upper()
        bg = f"surface-{kind}-base"
        fg = f"text-on-{kind}-base"
        add(cat, f(f"{kind}_TEXT_ON_BASE"), bg, fg, f"TEXT ON {upper} BASE")
        add(cat, f(f"{kind}_TEXT_WEAK_ON_BASE"), bg, f"text-on-{kind}-weak", f"WEAK TEXT ON {upper} BASE")
        add(cat, f(f"{kind}_TEXT_STRONG_ON_BASE"), bg, f"text-on-{kind}-strong", f"STRONG TEXT ON {upper} BASE")
        add(cat, f(f"{kind}_TEXT_ON_HOVER"), f"surface-{kind}-hover", fg, f"TEXT ON {upper} HOVER")
        add(cat, f(f"{kind}_TEXT_ON_ACTIVE"), f"surface-{kind}-active", fg, f"TEXT ON {upper} ACTIVE")
        add(cat, f(f"{kind}_BASE_TEXT_ON_WEAK"), f"surface-{kind}-weak", "text-base", f"BASE TEXT ON WEAK {upper}")

    cat = "LOG_22_INVERTED_TEXT"
    add(cat, f("INVERT_TEXT_ON_STRONG"), "surface-strong", "text-invert-base", "INVERTED TEXT ON STRONG SURFACE")
    add(cat, f("INVERT_TEXT_ON_BRAND"), "surface-brand-base", "text-invert-base", "INVERTED TEXT ON BRAND SURFACE")
    add(cat, f("INVERT_ICON_ON_STRONG"), "surface-strong", "icon-invert-base", "INVERTED ICON ON STRONG SURFACE", True)

    cat = "LOG_22_COLORED_TEXT_ICON"
    for kind in ("brand", "success", "warning", "critical", "info"):
        upper = kind.upper()
        bg = f"surface-{kind}-base"
        for variant in ("weak", "weaker"):
            add(cat, f(f"{upper}_{variant.upper()}_TEXT"), bg, f"text-on-{kind}-{variant}",
                f"{variant.upper()} TEXT ON {upper} BASE")
        add(cat, f(f"{upper}_ICON"), bg, f"icon-on-{kind}-base", f"{upper} ICON ON {upper} BASE", True)

    cat = "LOG_23_AGENT_UI"
    for icon in ("plan", "docs", "ask", "build"):
        add(cat, f(f"AGENT_{icon.upper()}_ICON"), "background-base", f"icon-agent-{icon}-base",
            f"AGENT {icon.upper()} ICON CONTRAST", True)

    cat = "LOG_24_INTERACTIVE_STATES"
    for state in ("hover", "active", "selected"):
        upper = state.upper()
        add(cat, f(f"ICON_{upper}"), "background-base", f"icon-{state}", f"ICON {upper} ON BACKGROUND", True)
        add(cat, f(f"BORDER_{upper}"), "background-base", f"border-{state}", f"BORDER {upper} ON BACKGROUND", True)

    cat = "LOG_25_SEMANTIC_DETAILED"
    for kind in ("brand", "success", "warning", "critical", "info"):
        for state in ("hover", "selected"):
            add(cat, f(f"{kind}_ICON_{state}"), f"surface-{kind}-base", f"icon-on-{kind}-{state}",
                f"{kind.upper()} ICON {state.upper()} ON {kind.upper()} BASE", True)

    cat = "LOG_26_COMPLEX_SURFACES"
    add(cat, f("RAISED_STRONGER_NON_ALPHA"), "background-base", "surface-raised-stronger-non-alpha",
        "RAISED STRONGER (NON-ALPHA) SURFACE CONTRAST", True)
    add(cat, f("FLOAT_STRONG_ACTIVE"), "background-base", "surface-float-strong-active",
        "FLOAT STRONG ACTIVE SURFACE CONTRAST", True)
    add(cat, f("INTERACTIVE_ACTIVE_SURFACE"), "background-base", "surface-base-interactive-active",
        "INTERACTIVE ACTIVE SURFACE CONTRAST", True)

    cat = "LOG_27_INVERTED_TEXT_ICON"
    for bg, label in (("surface-strong", "STRONG"), ("surface-brand-base", "BRAND"), ("surface-critical-base", "CRITICAL")):
        add(cat, f(f"INVERT_TEXT_ON_{label}"), bg, "text-invert-base", f"INVERTED TEXT ON {label}")
        add(cat, f(f"INVERT_ICON_ON_{label}"), bg, "icon-invert-base", f"INVERTED ICON ON {label}", True)

    cat = "LOG_28_INPUT_DETAILED"
    add(cat, f("INPUT_DISABLED_TEXT"), "input-disabled", "text-weaker", "DISABLED INPUT TEXT CONTRAST")
    add(cat, f("INPUT_HOVER_BORDER"), "background-base", "border-hover", "INPUT HOVER BORDER CONTRAST", True)
    add(cat, f("INPUT_ACTIVE_BORDER"), "background-base", "border-active", "INPUT ACTIVE BORDER CONTRAST", True)
    add(cat, f("INPUT_HOVER_VS_BASE"), "input-base", "input-hover", "INPUT HOVER VS BASE CONTRAST", True)
    add(cat, f("INPUT_ACTIVE_VS_BASE"), "input-base", "input-active", "INPUT ACTIVE VS BASE CONTRAST", True)
    add(cat, f("INPUT_ACTIVE_VS_HOVER"), "input-hover", "input-active", "INPUT ACTIVE VS HOVER CONTRAST", True)
    add(cat, f("INPUT_BASE_VS_BG"), "background-base", "input-base", "INPUT BASE VS BACKGROUND", True)

    cat = "LOG_29_DIFF_EXTRAS"
    add(cat, f("DIFF_MODIFIED_ICON"), "background-base", "icon-diff-modified-base", "DIFF MODIFIED ICON CONTRAST", True)
    add(cat, f("DIFF_ADD_HOVER_ICON"), "background-base", "icon-diff-add-hover", "DIFF ADD HOVER ICON CONTRAST", True)
    add(cat, f("DIFF_ADD_ACTIVE_ICON"), "background-base", "icon-diff-add-active", "DIFF ADD ACTIVE ICON CONTRAST", True)

    cat = "LOG_32_MISC_BORDERS_ICONS"
    add(cat, f("BORDER_COLOR"), "background-base", "border-color", "GENERAL BORDER COLOR CONTRAST", True)
    add(cat, f("BORDER_DISABLED"), "background-base", "border-disabled", "DISABLED BORDER CONTRAST", True)
    add(cat, f("ICON_WEAK_HOVER"), "background-base", "icon-weak-hover", "WEAK ICON HOVER CONTRAST", True)
    add(cat, f("ICON_STRONG_SELECTED"), "background-base", "icon-strong-selected", "STRONG ICON SELECTED CONTRAST", True)

    cat = "LOG_33_SURFACE_TEXT_PAIRS"
    for surface in ("inset", "raised", "float"):
        upper = surface.upper()
        bg = f"surface-{surface}-base"
        add(cat, f(f"{upper}_TEXT_BASE"), bg, "text-base", f"TEXT ON {upper} SURFACE")
        add(cat, f(f"{upper}_TEXT_WEAK"), bg, "text-weak", f"WEAK TEXT ON {upper} SURFACE")
        add(cat, f(f"{upper}_TEXT_STRONG"), bg, "text-strong", f"STRONG TEXT ON {upper} SURFACE")
    add(cat, f("INSET_STRONG_TEXT"), "surface-inset-strong", "text-base", "TEXT ON INSET STRONG SURFACE")

    cat = "LOG_34_INTERACTIVE_SURFACE_PAIRS"
    for surface in ("brand", "interactive"):
        upper = surface.upper()
        bg = f"surface-{surface}-base"
        add(cat, f(f"{upper}_TEXT"), bg, f"text-on-{surface}-base", f"{upper} TEXT ON SURFACE")
        add(cat, f(f"{upper}_ICON"), bg, f"icon-on-{surface}-base", f"{upper} ICON ON SURFACE", True)

    cat = "LOG_35_BUTTON_TEXT"
    add(cat, f("SECONDARY_BUTTON_TEXT"), "button-secondary-base", "text-base", "SECONDARY BUTTON TEXT")
    add(cat, f("DANGER_BUTTON_TEXT"), "button-danger-base", "text-on-critical-base", "DANGER BUTTON TEXT")
    add(cat, f("GHOST_BUTTON_TEXT"), "background-base", "text-base", "GHOST BUTTON TEXT (NORMAL)")
    add(cat, f("GHOST_BUTTON_HOVER_TEXT"), "button-ghost-hover", "text-base", "GHOST BUTTON TEXT (HOVER)")
    add(cat, f("SECONDARY_BUTTON_HOVER_VS_BASE"), "button-secondary-base", "button-secondary-hover",
        "SECONDARY BUTTON HOVER VS BASE", True)
    add(cat, f("DANGER_BUTTON_HOVER_VS_BASE"), "button-danger-base", "button-danger-hover",
        "DANGER BUTTON HOVER VS BASE", True)
    add(cat, f("GHOST_BUTTON_HOVER_VS_BG"), "background-base", "button-ghost-hover",
        "GHOST BUTTON HOVER VS BACKGROUND", True)

    return entries


AUDIT_CATALOGUE: List[AuditEntry] = _build_catalogue()

_BORDER_MARKERS = ("border", "ring", "divider", "rule", "separator")
_TEXT_MARKERS = ("text", "foreground", "title", "label", "placeholder", "description", "syntax")


def classify_pair(category: str, label: str, fg_key: str, non_text: bool = False) -> Dict[str, bool]:
    """Derive role flags from the foreground key and label."""
    is_border = any(marker in fg_key for marker in _BORDER_MARKERS)
    is_explicit_text = not is_border and (
        any(marker in fg_key for marker in _TEXT_MARKERS)
        or ("icon" in fg_key and "DIFF" in category)
    )
    is_non_text = non_text or (
        not is_explicit_text
        and "TEXT" not in label
        and "FOREGROUND" not in label
        and "DIFF" not in label
    )
    return {
        "is_non_text": is_non_text,
        "is_border": is_border,
        "is_weak": "weak" in fg_key,
        "is_strong": "strong" in fg_key,
    }


def pair_type(category: str) -> PairType:
    if "SURFACES" in category:
        return PairType.SHELL
    if "TYPOGRAPHY" in category:
        return PairType.READ
    if "INTERACTIVE" in category or "ACTIONS" in category or "BUTTONS" in category:
        return PairType.ACTION
    if "STATUS" in category or "SEMANTIC" in category:
        return PairType.DIFF
    return PairType.SHELL


def audit_theme(theme_colors: Mapping[str, str],
                cache: Optional[ContrastCache] = None) -> List[WcagPair]:
    """Score every catalogue pair present in ``theme_colors``.

    Pairs are deduplicated on ``category:bg_key:fg_key``. Pairs whose keys
    are missing, or whose values are not hex colors, are skipped.
    """
    pairs: List[WcagPair] = []
    seen = set()

    for entry in AUDIT_CATALOGUE:
        pair_id = f"{entry.category}:{entry.bg_key}:{entry.fg_key}"
        if pair_id in seen:
            continue
        seen.add(pair_id)

        bg = theme_colors.get(entry.bg_key)
        fg = theme_colors.get(entry.fg_key)
        if bg is None or fg is None:
            continue
        if not (is_hex_color(bg) and is_hex_color(fg)):
            logger.debug(f"Skipping {pair_id}: non-hex value")
            continue

        flags = classify_pair(entry.category, entry.label, entry.fg_key, entry.non_text)
        if cache is not None:
            key = ContrastCache.make_key(bg, fg, category=entry.category, **flags)
            result = cache.get_or_compute(key, lambda: score(bg, fg, category=entry.category, **flags))
        else:
            result = score(bg, fg, category=entry.category, **flags)

        pairs.append(WcagPair(
            category=entry.category,
            label=entry.label,
            desc=entry.desc,
            bg=bg,
            fg=fg,
            bg_key=entry.bg_key,
            fg_key=entry.fg_key,
            type=pair_type(entry.category),
            score=result,
            **flags,
        ))

    logger.debug(f"Audited {len(pairs)} pairs")
    return pairs


def summarize(pairs: List[WcagPair]) -> Dict[str, object]:
    """Pass/fail totals, overall and per category."""
    by_category: Dict[str, Dict[str, int]] = {}
    for pair in pairs:
        counts = by_category.setdefault(pair.category, {"passed": 0, "failed": 0})
        counts["passed" if pair.score.passed else "failed"] += 1

    passed = sum(1 for pair in pairs if pair.score.passed)
    return {
        "total": len(pairs),
        "passed": passed,
        "failed": len(pairs) - passed,
        "categories": by_category,
    }


def suggest_fixes(pairs: List[WcagPair], by_hue: bool = False) -> Dict[str, str]:
    """Replacement colors for the foreground of each failing pair.

    The first failing pair for a foreground token decides its fix. Tokens
    for which no passing color exists are left out.
    """
    search = get_closest_hue_passing_color if by_hue else get_closest_passing_color
    fixes: Dict[str, str] = {}
    for pair in pairs:
        if pair.score.passed or pair.fg_key in fixes:
            continue
        fixed = search(pair.bg, pair.fg, pair.is_non_text, pair.is_border,
                       pair.is_weak, pair.is_strong, pair.category)
        if fixed != pair.fg:
            fixes[pair.fg_key] = fixed
    return fixes
