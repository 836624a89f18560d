"""Configuration helpers for the lead finder."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import Coordinates

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LEAD_FINDER_CONFIG"
DEFAULT_BACKEND_CLASS = "lead_finder.backend.gemini.GeminiBackend"
DEFAULT_HISTORY_PATH = Path("~/.lead_finder/history.json")
DEFAULT_PAGE_SIZE = 10
DEFAULT_EXPORT_FILENAME = "leads.csv"


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


@dataclass
class Settings:
    """Runtime settings shared by the CLI and the desktop application."""

    backend_class: str = DEFAULT_BACKEND_CLASS
    backend_options: Dict[str, Any] = field(default_factory=dict)
    history_path: Path = DEFAULT_HISTORY_PATH
    page_size: int = DEFAULT_PAGE_SIZE
    export_filename: str = DEFAULT_EXPORT_FILENAME
    location: Optional[Coordinates] = None


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Configuration file '{file_path}' could not be parsed: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping")
    return data


def settings_from_config(config: Dict[str, Any]) -> Settings:
    """Validate a configuration mapping and convert it into :class:`Settings`."""

    settings = Settings()

    backend = config.get("backend") or {}
    if not isinstance(backend, dict):
        raise ConfigurationError("'backend' must be a mapping with 'class' and 'options'")
    settings.backend_class = backend.get("class") or DEFAULT_BACKEND_CLASS
    options = backend.get("options") or {}
    if not isinstance(options, dict):
        raise ConfigurationError("'backend.options' must be a mapping")
    settings.backend_options = dict(options)

    if config.get("history_path"):
        settings.history_path = Path(str(config["history_path"]))

    if "page_size" in config:
        try:
            page_size = int(config["page_size"])
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("'page_size' must be an integer") from exc
        if page_size <= 0:
            raise ConfigurationError("'page_size' must be positive")
        settings.page_size = page_size

    if config.get("export_filename"):
        settings.export_filename = str(config["export_filename"])

    location = config.get("location")
    if location:
        if not isinstance(location, dict):
            raise ConfigurationError("'location' must be a mapping with 'latitude' and 'longitude'")
        coordinates = Coordinates.from_values(location.get("latitude"), location.get("longitude"))
        if coordinates is None:
            raise ConfigurationError(f"Invalid location {location!r}")
        settings.location = coordinates

    return settings


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """Load settings from ``path``, the ``LEAD_FINDER_CONFIG`` file, or defaults."""

    config_path = path or os.environ.get(CONFIG_ENV_VAR)
    if not config_path:
        LOGGER.debug("No configuration file given; using defaults")
        return Settings()
    return settings_from_config(load_configuration(config_path))
