"""Tests for theme export."""

import json

import yaml

from theme_forge.engine.theme_engine import ThemeEngine
from theme_forge.export import (
    THEME_SCHEMA_URL,
    ExportFormat,
    ExportManager,
    build_theme_document,
    theme_id,
)
from theme_forge.schema import SEED_NAMES, ModeOverrides


class TestThemeDocument:
    """Test the exported document shape."""

    def test_theme_id(self):
        """Ids are lowercase with hyphens."""
        assert theme_id("My Cool Theme") == "my-cool-theme"

    def test_document_shape(self, params):
        """Both modes carry nine seeds and the token map."""
        document = build_theme_document(params)
        assert document["$schema"] == THEME_SCHEMA_URL
        assert document["name"] == "Test Theme"
        assert document["id"] == "test-theme"
        for mode in ("light", "dark"):
            assert list(document[mode]["seeds"]) == [name.value for name in SEED_NAMES]
            assert "background-base" in document[mode]["overrides"]

    def test_modes_differ(self, params):
        """Light and dark token maps are sampled differently."""
        document = build_theme_document(params)
        assert document["light"]["overrides"]["background-base"] != document["dark"]["overrides"]["background-base"]

    def test_manual_overrides_win(self, params):
        """Manual overrides replace generated tokens in their mode."""
        params = params.model_copy(update={
            "token_overrides": ModeOverrides(dark={"text-base": "#123456"}),
        })
        document = build_theme_document(params)
        assert document["dark"]["overrides"]["text-base"] == "#123456"
        assert document["light"]["overrides"]["text-base"] != "#123456"


class TestExportManager:
    """Test serialization and writing."""

    def setup_method(self):
        """Create a manager."""
        self.manager = ExportManager(ThemeEngine())

    def test_json(self, params):
        """JSON export parses back to the document."""
        content = self.manager.export_theme(params, ExportFormat.JSON)
        assert json.loads(content) == build_theme_document(params)

    def test_yaml(self, params):
        """YAML export parses back to the document."""
        content = self.manager.export_theme(params, ExportFormat.YAML)
        assert yaml.safe_load(content)["id"] == "test-theme"

    def test_write_to_file(self, params, tmp_path):
        """Exports are written, creating directories."""
        target = tmp_path / "out" / "theme.json"
        content = self.manager.export_theme(params, ExportFormat.JSON, str(target))
        assert target.read_text(encoding="utf-8") == content

    def test_formats(self):
        """Supported formats and extensions."""
        assert self.manager.get_supported_formats() == ["json", "yaml"]
        assert self.manager.get_file_extension(ExportFormat.YAML) == "yaml"
