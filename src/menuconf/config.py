"""
User settings, stored as a small YAML file.

Example:

    import_mode: Ask
    import_keep_choice: true
    export_format: MateConfSchemaV2
    log_level: INFO

Missing keys, and a missing file, fall back to the defaults below.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Union

import yaml

from .conflicts import ResolutionPolicy
from .dialects import Dialect
from .errors import SettingsError

DEFAULT_IMPORT_MODE = ResolutionPolicy.NO_IMPORT
DEFAULT_EXPORT_FORMAT = Dialect.FLAT_DUMP
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """
    Properties:
        import_mode: Policy applied when an imported id already exists
        import_keep_choice: In batch imports, reuse the first "Ask" answer
        export_format: Dialect used when none is given explicitly
        log_level: Level passed to setup_logger()
    """

    import_mode: ResolutionPolicy = DEFAULT_IMPORT_MODE
    import_keep_choice: bool = False
    export_format: Dialect = DEFAULT_EXPORT_FORMAT
    log_level: str = DEFAULT_LOG_LEVEL


def settings_to_dict(settings: Settings) -> Dict[str, Any]:
    return {
        "import_mode": settings.import_mode.value,
        "import_keep_choice": settings.import_keep_choice,
        "export_format": settings.export_format.value,
        "log_level": settings.log_level,
    }


def settings_from_dict(d: Dict[str, Any]) -> Settings:
    if not isinstance(d, dict):
        raise SettingsError(f"settings must be a mapping, got {type(d).__name__}")
    try:
        import_mode = ResolutionPolicy.from_id(str(d.get("import_mode", DEFAULT_IMPORT_MODE.value)))
        export_format = Dialect.from_id(str(d.get("export_format", DEFAULT_EXPORT_FORMAT.value)))
    except ValueError as exc:
        raise SettingsError(str(exc)) from exc

    keep_choice = d.get("import_keep_choice", False)
    if not isinstance(keep_choice, bool):
        raise SettingsError(f"import_keep_choice must be a boolean, got {keep_choice!r}")

    log_level = str(d.get("log_level", DEFAULT_LOG_LEVEL)).upper()
    if log_level not in _LOG_LEVELS:
        raise SettingsError(f"Unknown log level: {log_level}")

    return Settings(
        import_mode=import_mode,
        import_keep_choice=keep_choice,
        export_format=export_format,
        log_level=log_level,
    )


def load_settings(path: Union[str, os.PathLike]) -> Settings:
    """Load settings from a YAML file; defaults when the file does not exist."""
    if not os.path.exists(path):
        return Settings()
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise SettingsError(f"{path}: {exc}") from exc
    if data is None:
        return Settings()
    return settings_from_dict(data)


def save_settings(settings: Settings, path: Union[str, os.PathLike]) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        yaml.safe_dump(settings_to_dict(settings), fh, sort_keys=False)


__all__ = [
    "Settings",
    "settings_to_dict",
    "settings_from_dict",
    "load_settings",
    "save_settings",
]
