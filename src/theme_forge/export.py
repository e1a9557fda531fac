"""
Theme export

Builds the desktop theme document (seeds and full token map for both
modes) and serializes it as JSON or YAML.
"""

import json
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml

from .engine.seeds import seeds_to_dict
from .engine.theme_engine import ThemeEngine
from .schema import ThemeMode, ThemeParameters

THEME_SCHEMA_URL = "https://opencode.ai/desktop-theme.json"


class ExportFormat(Enum):
    """Supported export formats"""
    JSON = "json"
    YAML = "yaml"


def theme_id(name: str) -> str:
    """Lowercase the name and turn spaces into hyphens."""
    return name.lower().replace(" ", "-")


def build_theme_document(params: ThemeParameters,
                         engine: Optional[ThemeEngine] = None) -> Dict[str, Any]:
    """Assemble the export document for both modes.

    Each mode carries its nine seeds and the full token map; manual token
    overrides are already merged into the map and win over generated values.
    """
    engine = engine or ThemeEngine()
    document: Dict[str, Any] = {
        "$schema": THEME_SCHEMA_URL,
        "name": params.theme_name,
        "id": theme_id(params.theme_name),
    }
    for mode in (ThemeMode.LIGHT, ThemeMode.DARK):
        theme = engine.build(params, mode)
        document[mode.value] = {
            "seeds": seeds_to_dict(theme.seeds),
            "overrides": dict(theme.tokens),
        }
    return document


class BaseExporter(ABC):
    """Abstract base class for exporters"""

    @abstractmethod
    def export_theme(self, document: Dict[str, Any]) -> str:
        """Serialize a theme document"""
        pass

    @abstractmethod
    def get_file_extension(self) -> str:
        pass


class JSONExporter(BaseExporter):
    def export_theme(self, document: Dict[str, Any]) -> str:
        return json.dumps(document, indent=2, ensure_ascii=False)

    def get_file_extension(self) -> str:
        return "json"


class YAMLExporter(BaseExporter):
    def export_theme(self, document: Dict[str, Any]) -> str:
        return yaml.dump(document, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def get_file_extension(self) -> str:
        return "yaml"


class ExportManager:
    """Manages export formats and writing"""

    def __init__(self, engine: Optional[ThemeEngine] = None):
        self.engine = engine or ThemeEngine()
        self.exporters = {
            ExportFormat.JSON: JSONExporter(),
            ExportFormat.YAML: YAMLExporter(),
        }

    def export_theme(self, params: ThemeParameters, format: ExportFormat = ExportFormat.JSON,
                     output_path: Optional[str] = None) -> str:
        """Export a theme in the given format, optionally writing it to a file"""
        if format not in self.exporters:
            raise ValueError(f"Export format {format.value} not supported")

        document = build_theme_document(params, self.engine)
        content = self.exporters[format].export_theme(document)

        if output_path:
            self._write_to_file(content, output_path)

        return content

    def get_supported_formats(self) -> List[str]:
        return [fmt.value for fmt in self.exporters.keys()]

    def get_file_extension(self, format: ExportFormat) -> str:
        if format not in self.exporters:
            return "txt"
        return self.exporters[format].get_file_extension()

    def _write_to_file(self, content: str, file_path: str):
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)
