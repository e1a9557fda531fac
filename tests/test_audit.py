"""Tests for the WCAG contrast audit."""

import pytest

from theme_forge.cache import ContrastCache
from theme_forge.engine.audit import (
    AUDIT_CATALOGUE,
    audit_theme,
    classify_pair,
    format_agent_label,
    get_closest_hue_passing_color,
    get_closest_passing_color,
    get_contrast_ratio,
    get_hue_difference,
    get_target_contrast,
    get_wcag_level,
    pair_type,
    score,
    suggest_fixes,
    summarize,
)
from theme_forge.schema import PairType, WcagLevel


class TestScoring:
    """Test contrast ratios and pass rules."""

    def test_black_on_white(self):
        """Black on white is the maximum 21:1."""
        result = score("#ffffff", "#000000")
        assert result.ratio == 21.0
        assert result.level == WcagLevel.AAA
        assert result.passed

    def test_identical_colors(self):
        """A color on itself is 1:1 and fails."""
        result = score("#777777", "#777777")
        assert result.ratio == 1.0
        assert result.level == WcagLevel.FAIL
        assert not result.passed
        assert result.hue_diff == 0

    def test_ratio_is_symmetric(self):
        """Swapping background and foreground gives the same ratio."""
        assert get_contrast_ratio("#336699", "#eeeeee") == pytest.approx(
            get_contrast_ratio("#eeeeee", "#336699"))

    def test_wcag_levels(self):
        """Levels follow the 7 / 4.5 / 3 thresholds."""
        assert get_wcag_level(7.0) == WcagLevel.AAA
        assert get_wcag_level(4.5) == WcagLevel.AA
        assert get_wcag_level(3.0) == WcagLevel.A
        assert get_wcag_level(2.99) == WcagLevel.FAIL

    def test_targets(self):
        """Text targets 4.5, decoration 1.1 unless strong."""
        assert get_target_contrast() == 4.5
        assert get_target_contrast(is_weak=True) == 4.5
        assert get_target_contrast(is_non_text=True) == 1.1
        assert get_target_contrast(is_non_text=True, is_strong=True) == 4.5
        assert get_target_contrast(category="LOG_99_SPLASH") == 1.1

    def test_hue_difference(self):
        """Hue difference is circular and zero for greys."""
        assert get_hue_difference("#ff0000", "#00ffff") == pytest.approx(180)
        assert get_hue_difference("#ff0000", "#ff00ff") == pytest.approx(60)
        assert get_hue_difference("#ff0000", "#808080") == 0

    def test_hue_passes_decoration_only(self):
        """Low-ratio pairs with distinct hues pass only as decoration."""
        assert not score("#ff0000", "#009000").passed
        assert score("#ff0000", "#009000", is_non_text=True).passed


class TestAutoFix:
    """Test closest passing color search."""

    def test_passing_color_is_unchanged(self):
        """A color that already passes is returned as is."""
        assert get_closest_passing_color("#000000", "#ffffff") == "#ffffff"
        assert get_closest_hue_passing_color("#000000", "#ffffff") == "#ffffff"

    def test_lightness_fix_passes(self):
        """The lightness fix reaches the target and darkens on white."""
        fixed = get_closest_passing_color("#ffffff", "#cccccc")
        assert fixed != "#cccccc"
        assert score("#ffffff", fixed).passed
        assert get_contrast_ratio("#ffffff", fixed) >= 4.5

    def test_lightness_fix_is_closest(self):
        """A failing mid grey is fixed to a passing one."""
        fixed = get_closest_passing_color("#ffffff", "#999999")
        assert score("#ffffff", fixed).passed
        assert not score("#ffffff", "#999999").passed

    def test_grey_hue_fix_gives_up(self):
        """Rotating the hue of a grey changes nothing, so it is returned."""
        assert get_closest_hue_passing_color("#ffffff", "#eeeeee") == "#eeeeee"

    def test_hue_fix_for_decoration(self):
        """Decoration can be fixed by rotating the hue."""
        fixed = get_closest_hue_passing_color("#ff0000", "#ff0a00", is_non_text=True)
        assert score("#ff0000", fixed, is_non_text=True).passed


class TestCatalogue:
    """Test the audit catalogue and pair classification."""

    def test_format_agent_label(self):
        """Keys become UPPER_SNAKE labels."""
        assert format_agent_label("surface-base") == "SURFACE_BASE"
        assert format_agent_label("diffAdd") == "DIFF_ADD"
        assert format_agent_label("") == ""

    def test_catalogue_is_populated(self):
        """The catalogue spans many categories."""
        categories = {entry.category for entry in AUDIT_CATALOGUE}
        assert "LOG_01_TYPOGRAPHY" in categories
        assert len(categories) > 10

    def test_classify_border(self):
        """Border keys are non-text borders."""
        flags = classify_pair("LOG_10_INPUTS", "INPUT_BORDER", "border-base")
        assert flags["is_border"]
        assert flags["is_non_text"]

    def test_classify_text(self):
        """Text keys are text, with weak/strong from the key."""
        flags = classify_pair("LOG_01_TYPOGRAPHY", "WEAK_ON_BASE", "text-weak")
        assert not flags["is_non_text"]
        assert flags["is_weak"]
        assert not flags["is_strong"]

    def test_pair_type(self):
        """Categories map to coarse pair types."""
        assert pair_type("LOG_01_TYPOGRAPHY") == PairType.READ
        assert pair_type("LOG_02_SURFACES") == PairType.SHELL
        assert pair_type("LOG_03_ACTIONS") == PairType.ACTION
        assert pair_type("LOG_05_STATUS") == PairType.DIFF


class TestAuditTheme:
    """Test auditing a token map."""

    def setup_method(self):
        """A minimal token map."""
        self.colors = {
            "background-base": "#ffffff",
            "text-base": "#eeeeee",
            "text-strong": "#000000",
        }

    def test_only_present_pairs(self):
        """Pairs with missing keys are skipped."""
        pairs = audit_theme(self.colors)
        typography = {p.fg_key: p for p in pairs if p.category == "LOG_01_TYPOGRAPHY"}
        assert set(typography) == {"text-base", "text-strong"}
        assert typography["text-strong"].score.passed
        assert not typography["text-base"].score.passed

    def test_non_hex_values_skipped(self):
        """Non-hex values are not audited."""
        assert audit_theme({"background-base": "#000000", "text-base": "rgba(0, 0, 0, 0.5)"}) == []

    def test_pairs_are_unique(self, params):
        """No category/background/foreground triple appears twice."""
        from theme_forge.engine.theme_engine import ThemeEngine
        pairs = ThemeEngine().audit(params)
        ids = [f"{p.category}:{p.bg_key}:{p.fg_key}" for p in pairs]
        assert pairs
        assert len(ids) == len(set(ids))

    def test_cache_gives_same_results(self):
        """Cached scoring matches uncached scoring."""
        cache = ContrastCache()
        first = audit_theme(self.colors, cache=cache)
        second = audit_theme(self.colors, cache=cache)
        assert [p.score for p in first] == [p.score for p in audit_theme(self.colors)]
        assert [p.score for p in second] == [p.score for p in first]
        assert len(cache) > 0
        assert cache.hits > 0

    def test_summarize(self):
        """Summary totals add up, per category too."""
        pairs = audit_theme(self.colors)
        summary = summarize(pairs)
        assert summary["total"] == len(pairs)
        assert summary["passed"] + summary["failed"] == summary["total"]
        assert summary["categories"]["LOG_01_TYPOGRAPHY"] == {"passed": 1, "failed": 1}

    def test_suggest_fixes(self):
        """Fixes are offered for failing foregrounds and pass."""
        fixes = suggest_fixes(audit_theme(self.colors))
        assert "text-base" in fixes
        assert "text-strong" not in fixes
        assert score("#ffffff", fixes["text-base"]).passed


class TestContrastMonotonicity:
    """Test ratio ordering."""

    def test_darker_text_on_white_scores_higher(self):
        """Darker greys on white give strictly higher ratios."""
        greys = ["#eeeeee", "#bbbbbb", "#888888", "#555555", "#222222", "#000000"]
        ratios = [get_contrast_ratio("#ffffff", grey) for grey in greys]
        assert ratios == sorted(ratios)
        assert len(set(ratios)) == len(ratios)
