"""Configuration management for theme-forge."""

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .schema import (
    HSL,
    ColorSpace,
    HarmonyRule,
    OutputFormat,
    ThemeMode,
    ThemeParameters,
    VariantStrategy,
)

logger = logging.getLogger(__name__)


@dataclass
class SyncConfig:
    """Where exported themes are synced to."""

    # Relative to the working directory
    theme_path: str = "../../opencode/packages/ui/src/styles"
    filename: str = "custom-theme.json"
    enabled: bool = True

    def get_file_path(self) -> Path:
        return Path(self.theme_path) / self.filename


@dataclass
class ConfigModel:
    """Global configuration model for theme-forge."""

    # Generation defaults
    base_hue: float = 280.0
    base_saturation: float = 65.0
    base_lightness: float = 15.0
    harmony: str = HarmonyRule.DOUBLE_SPLIT_COMPLEMENTARY.value
    spread: float = 30.0
    variant_count: int = 12
    strategy: str = VariantStrategy.GLACIAL.value
    color_space: str = ColorSpace.HSL.value
    output_format: str = OutputFormat.SRGB.value
    mode: str = ThemeMode.DARK.value
    theme_name: str = "My Theme"

    # Engine
    cache_size: int = 1000
    progress_every: int = 50

    # File paths
    data_dir: str = "~/.theme-forge"

    # Sync
    sync: SyncConfig = field(default_factory=SyncConfig)

    # UI
    no_color: bool = False

    def __post_init__(self):
        """Post-initialization setup."""
        self.data_dir = os.path.expanduser(self.data_dir)
        if isinstance(self.sync, dict):
            known = {f.name for f in fields(SyncConfig)}
            self.sync = SyncConfig(**{k: v for k, v in self.sync.items() if k in known})

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.dump(asdict(self), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML; unknown keys are ignored."""
        data = yaml.safe_load(yaml_str) or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        for key in sorted(unknown):
            logger.warning(f"Ignoring unknown config key: {key}")
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_parameters(self) -> ThemeParameters:
        """Generation parameters seeded from these defaults."""
        return ThemeParameters(
            base_color=HSL.normalized(self.base_hue, self.base_saturation, self.base_lightness),
            harmony=HarmonyRule(self.harmony),
            spread=self.spread,
            variant_count=self.variant_count,
            strategy=VariantStrategy(self.strategy),
            color_space=ColorSpace(self.color_space),
            output_format=OutputFormat(self.output_format),
            mode=ThemeMode(self.mode),
            theme_name=self.theme_name,
        )

    def get_config_path(self) -> Path:
        return Path(self.data_dir) / "config.yaml"

    def get_presets_dir(self) -> Path:
        return Path(self.data_dir) / "presets"


class Config:
    """Configuration manager for theme-forge."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file or create default."""
        if cls._instance is not None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    config = ConfigModel.from_yaml(f.read())
                logger.debug(f"Loaded configuration from {config_path}")
            except Exception as e:
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.warning("Using default configuration.")
        else:
            cls.save(config, config_path)
            logger.debug(f"Created default configuration at {config_path}")

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()
        config_path = Path(config_path)

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w') as f:
                f.write(config.to_yaml())
            logger.debug(f"Configuration saved to {config_path}")
        except OSError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load(config_path)


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)


def config_to_dict(config: ConfigModel) -> Dict[str, Any]:
    return asdict(config)
