"""Settings resolution: defaults, optional YAML file, then environment."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from devicectl.core.errors import SettingsError

LOGGER = logging.getLogger(__name__)

DATA_FILE_ENV = "DEVICECTL_DATA_FILE"
LOG_LEVEL_ENV = "DEVICECTL_LOG_LEVEL"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    data_file: Path
    log_level: str = "WARNING"


def _config_dir() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "devicectl"


def _data_dir() -> Path:
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "devicectl"


def settings_path() -> Path:
    return _config_dir() / "config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("devicectl.schemas").joinpath("settings.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Could not read settings file {path}: {exc}") from exc

    try:
        loaded = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping at root")

    try:
        _load_schema_validator().validate(loaded)
    except ValidationError as exc:
        where = ".".join(str(p) for p in exc.path)
        where = f" ({where})" if where else ""
        raise SettingsError(f"Schema validation failed for {path}{where}: {exc.message}") from exc
    return loaded


def _normalize_level(value: str, *, context: str) -> str:
    level = value.strip().upper()
    if level not in _LOG_LEVELS:
        raise SettingsError(f"{context} must be one of {', '.join(_LOG_LEVELS)}, got '{value}'")
    return level


def load_settings() -> Settings:
    data_file = _data_dir() / "devices.txt"
    log_level = "WARNING"

    path = settings_path()
    if path.is_file():
        doc = _read_yaml(path)
        if "data_file" in doc:
            data_file = Path(doc["data_file"]).expanduser()
            if not data_file.is_absolute():
                data_file = path.parent / data_file
        if "log_level" in doc:
            log_level = _normalize_level(doc["log_level"], context=f"{path}: log_level")
        LOGGER.debug("Applied settings from %s", path)

    env_data_file = os.environ.get(DATA_FILE_ENV)
    if env_data_file:
        data_file = Path(env_data_file).expanduser()
    env_log_level = os.environ.get(LOG_LEVEL_ENV)
    if env_log_level:
        log_level = _normalize_level(env_log_level, context=LOG_LEVEL_ENV)

    return Settings(data_file=data_file, log_level=log_level)


def configure_logging(level: str) -> None:
    logging.getLogger("devicectl").setLevel(level)
