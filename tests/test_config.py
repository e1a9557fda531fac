"""Tests for configuration management."""

import yaml

from theme_forge.config import (
    Config,
    ConfigModel,
    SyncConfig,
    config_to_dict,
    get_config,
    load_config,
    save_config,
)
from theme_forge.schema import HarmonyRule, ThemeMode, VariantStrategy


class TestConfigModel:
    """Test the configuration dataclass."""

    def test_defaults(self):
        """Defaults describe a dark glacial theme."""
        config = ConfigModel()
        assert config.mode == "dark"
        assert config.strategy == VariantStrategy.GLACIAL.value
        assert isinstance(config.sync, SyncConfig)
        assert not config.data_dir.startswith("~")

    def test_yaml_round_trip(self):
        """Config survives YAML serialization."""
        config = ConfigModel(spread=45.0, theme_name="Round Trip")
        restored = ConfigModel.from_yaml(config.to_yaml())
        assert restored.spread == 45.0
        assert restored.theme_name == "Round Trip"
        assert isinstance(restored.sync, SyncConfig)

    def test_unknown_keys_ignored(self):
        """Unknown keys do not break loading."""
        config = ConfigModel.from_yaml("spread: 60\nfavourite_colour: teal\n")
        assert config.spread == 60

    def test_to_parameters(self):
        """Defaults become generation parameters."""
        config = ConfigModel(base_hue=400, harmony=HarmonyRule.TRIADIC.value, mode="light")
        params = config.to_parameters()
        assert params.base_color.h == 40
        assert params.harmony == HarmonyRule.TRIADIC
        assert params.mode == ThemeMode.LIGHT

    def test_paths(self, tmp_path):
        """Config and preset paths live in the data directory."""
        config = ConfigModel(data_dir=str(tmp_path))
        assert config.get_config_path() == tmp_path / "config.yaml"
        assert config.get_presets_dir() == tmp_path / "presets"

    def test_sync_path(self):
        """The sync file path joins directory and filename."""
        sync = SyncConfig(theme_path="/tmp/styles", filename="theme.json")
        assert str(sync.get_file_path()) == "/tmp/styles/theme.json"

    def test_unknown_sync_keys_ignored(self):
        """Unknown nested sync keys do not break loading."""
        config = ConfigModel.from_yaml("sync:\n  debounce_ms: 200\n  filename: x.json\n")
        assert config.sync.filename == "x.json"
        assert config.sync.enabled is True


class TestConfigManager:
    """Test loading and saving."""

    def test_load_creates_default(self, tmp_path):
        """A missing file is created with defaults."""
        path = tmp_path / "config.yaml"
        config = load_config(path)
        assert path.exists()
        assert config.spread == 30.0
        assert get_config() is config

    def test_save_and_reload(self, tmp_path):
        """Saved values are read back on reload."""
        path = tmp_path / "config.yaml"
        save_config(ConfigModel(variant_count=4), path)
        assert yaml.safe_load(path.read_text())["variant_count"] == 4
        assert Config.reload(path).variant_count == 4

    def test_invalid_file_uses_defaults(self, tmp_path):
        """A broken file falls back to defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("spread: [oops")
        assert Config.reload(path).spread == 30.0

    def test_config_to_dict(self):
        """The dict view includes nested sync settings."""
        data = config_to_dict(ConfigModel())
        assert data["sync"]["filename"] == "custom-theme.json"
