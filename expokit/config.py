from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

CONFIG_FILENAME = ".expokit.yml"

DEFAULT_EXCLUDE = (
    ".git",
    ".gitignore",
    "android/",
    "ios/",
    "node_modules/",
    "/copy-template.sh",
    "/README.md",
)
DEFAULT_TARGET_FILES = ("app.json", "package.json")
DEFAULT_MANIFEST_FILE = "app.json"
DEFAULT_SLUG_PLACEHOLDER = "lenmie-expo-template"
DEFAULT_BUNDLE_ID_PREFIX = "com.javiso."
DEFAULT_BUNDLE_ID_PLACEHOLDER = "lenmieexpotemplate"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class ScaffoldConfig:
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    target_files: tuple[str, ...] = DEFAULT_TARGET_FILES
    manifest_file: str = DEFAULT_MANIFEST_FILE
    slug_placeholder: str = DEFAULT_SLUG_PLACEHOLDER
    bundle_id_prefix: str = DEFAULT_BUNDLE_ID_PREFIX
    bundle_id_placeholder: str = DEFAULT_BUNDLE_ID_PLACEHOLDER
    name_placeholder: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScaffoldConfig":
        """Overlay ``data`` on the defaults, rejecting unknown keys and bad types."""
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for key, value in data.items():
            if key in ("exclude", "target_files"):
                if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
                    raise ConfigError(f"'{key}' must be a list of non-empty strings")
                values[key] = tuple(value)
            elif key == "name_placeholder":
                if value is not None and (not isinstance(value, str) or not value):
                    raise ConfigError("'name_placeholder' must be a non-empty string or null")
                values[key] = value
            else:
                if not isinstance(value, str) or not value:
                    raise ConfigError(f"'{key}' must be a non-empty string")
                values[key] = value

        return cls(**values)

    @property
    def bundle_id_pattern(self) -> str:
        return f"{self.bundle_id_prefix}{self.bundle_id_placeholder}"


def load_config(source_root: Path) -> ScaffoldConfig:
    marker = source_root / CONFIG_FILENAME
    if not marker.exists():
        return ScaffoldConfig()

    try:
        data = yaml.safe_load(marker.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Could not parse {marker}: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError(f"{marker} must contain a mapping")
    return ScaffoldConfig.from_mapping(data)
