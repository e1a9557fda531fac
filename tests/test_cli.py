"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from theme_forge import cli
from theme_forge.cli import main, resolve_enum
from theme_forge.schema import HarmonyRule, VariantStrategy


class TestResolveEnum:
    """Test lenient enum lookup."""

    def test_matches(self):
        """Values, names and suffix-free values resolve."""
        assert resolve_enum(HarmonyRule, "Triadic (3)") == HarmonyRule.TRIADIC
        assert resolve_enum(HarmonyRule, "triadic") == HarmonyRule.TRIADIC
        assert resolve_enum(HarmonyRule, "split_complementary") == HarmonyRule.SPLIT_COMPLEMENTARY
        assert resolve_enum(VariantStrategy, "neon glow") == VariantStrategy.NEON

    def test_unknown(self):
        """Unknown names are rejected."""
        import click
        with pytest.raises(click.BadParameter):
            resolve_enum(HarmonyRule, "nonsense")


class TestCli:
    """Test CLI commands against a temporary config."""

    @pytest.fixture(autouse=True)
    def setup_runner(self, tmp_path):
        """Runner and a config file in a temp directory."""
        self.runner = CliRunner()
        self.tmp_path = tmp_path
        self.config = str(tmp_path / "config.yaml")
        (tmp_path / "config.yaml").write_text(
            f"data_dir: {tmp_path}\nvariant_count: 4\nharmony: Analogous (3)\n"
        )

    def invoke(self, *args):
        return self.runner.invoke(main, ["--config", self.config, *args])

    def test_help(self):
        """Running without a command prints help."""
        result = self.invoke()
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_generate(self):
        """generate prints parameters and palette."""
        result = self.invoke("generate", "--hue", "120", "--harmony", "triadic")
        assert result.exit_code == 0
        assert "Triadic (3)" in result.output
        assert "Palette" in result.output

    def test_generate_randomized(self):
        """generate accepts the random helpers."""
        result = self.invoke("generate", "--randomize", "--seed", "4")
        assert result.exit_code == 0

    def test_bad_harmony(self):
        """An unknown harmony is a usage error."""
        result = self.invoke("generate", "--harmony", "nonsense")
        assert result.exit_code != 0

    def test_seeds(self):
        """seeds lists the nine seeds."""
        result = self.invoke("seeds")
        assert result.exit_code == 0
        assert "primary" in result.output
        assert "diffDelete" in result.output

    def test_seeds_output_format(self):
        """seeds adds a column in the requested display format."""
        result = self.invoke("seeds", "--output-format", "CMYK")
        assert result.exit_code == 0
        assert "cmyk(" in result.output

    def test_no_color_config(self, monkeypatch):
        """no_color in the config turns off console colors."""
        monkeypatch.setattr(cli.console, "no_color", False)
        (self.tmp_path / "config.yaml").write_text(f"data_dir: {self.tmp_path}\nno_color: true\n")
        result = self.invoke("seeds")
        assert result.exit_code == 0
        assert cli.console.no_color is True

    def test_tokens_json(self):
        """tokens can print JSON filtered by prefix."""
        result = self.invoke("tokens", "--json", "--filter", "text-")
        assert result.exit_code == 0
        tokens = json.loads(result.output)
        assert tokens
        assert all(name.startswith("text-") for name in tokens)

    def test_audit(self):
        """audit prints a summary."""
        result = self.invoke("audit", "--mode", "light")
        assert result.exit_code == 0
        assert "Pairs:" in result.output

    def test_fix_json(self):
        """fix can print JSON."""
        result = self.invoke("fix", "--json")
        assert result.exit_code == 0
        assert isinstance(json.loads(result.output), dict)

    def test_export_stdout(self):
        """export prints the theme document."""
        result = self.invoke("export", "--name", "CLI Theme")
        assert result.exit_code == 0
        document = json.loads(result.output)
        assert document["id"] == "cli-theme"
        assert set(document) >= {"light", "dark"}

    def test_export_file(self):
        """export writes a YAML file."""
        target = self.tmp_path / "theme.yaml"
        result = self.invoke("export", "--format", "yaml", "--output", str(target))
        assert result.exit_code == 0
        assert target.exists()

    def test_presets(self):
        """presets lists named and thematic presets."""
        result = self.invoke("presets")
        assert result.exit_code == 0
        assert "aura" in result.output
        assert "cyberpunk" in result.output

    def test_apply_named_preset(self):
        """apply-preset applies a named preset."""
        result = self.invoke("apply-preset", "ayu")
        assert result.exit_code == 0
        assert "token overrides applied" in result.output

    def test_apply_thematic_preset(self):
        """apply-preset applies a thematic preset."""
        result = self.invoke("apply-preset", "midnight", "--seed", "1")
        assert result.exit_code == 0
        assert "Monochromatic" in result.output

    def test_apply_unknown_preset(self):
        """Unknown presets exit with an error."""
        result = self.invoke("apply-preset", "nope")
        assert result.exit_code == 1

    def test_contrast(self):
        """contrast describes an intensity."""
        result = self.invoke("contrast", "100")
        assert result.exit_code == 0
        assert "Maximum Dynamic Range" in result.output

    def test_infer_without_seeds(self):
        """infer fails cleanly when the file has no seeds."""
        seeds_file = self.tmp_path / "seeds.json"
        seeds_file.write_text(json.dumps({"unrelated": "#ffffff"}))
        result = self.invoke("infer", str(seeds_file))
        assert result.exit_code == 1
        assert "No seed colors" in result.output
