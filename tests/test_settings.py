from __future__ import annotations

import logging
from pathlib import Path

import pytest

from devicectl.core.errors import SettingsError
from devicectl.core.settings import configure_logging, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("DEVICECTL_DATA_FILE", raising=False)
    monkeypatch.delenv("DEVICECTL_LOG_LEVEL", raising=False)


def _write_settings(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "cfg" / "devicectl" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_defaults_use_xdg_data_dir(tmp_path: Path) -> None:
    settings = load_settings()
    assert settings.data_file == tmp_path / "data" / "devicectl" / "devices.txt"
    assert settings.log_level == "WARNING"


def test_yaml_file_overrides_defaults(tmp_path: Path) -> None:
    _write_settings(
        tmp_path,
        """
data_file: inventory/devices.txt
log_level: debug
""",
    )

    settings = load_settings()
    assert settings.data_file == tmp_path / "cfg" / "devicectl" / "inventory" / "devices.txt"
    assert settings.log_level == "DEBUG"


def test_environment_overrides_yaml(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _write_settings(tmp_path, "log_level: ERROR\n")
    monkeypatch.setenv("DEVICECTL_DATA_FILE", str(tmp_path / "env.txt"))
    monkeypatch.setenv("DEVICECTL_LOG_LEVEL", "info")

    settings = load_settings()
    assert settings.data_file == tmp_path / "env.txt"
    assert settings.log_level == "INFO"


def test_unknown_key_rejected(tmp_path: Path) -> None:
    _write_settings(tmp_path, "capacity: 30\n")
    with pytest.raises(SettingsError, match="Schema validation failed"):
        load_settings()


def test_non_mapping_rejected(tmp_path: Path) -> None:
    _write_settings(tmp_path, "- just\n- a list\n")
    with pytest.raises(SettingsError):
        load_settings()


def test_invalid_yaml_rejected(tmp_path: Path) -> None:
    _write_settings(tmp_path, "data_file: [unterminated\n")
    with pytest.raises(SettingsError, match="Invalid YAML"):
        load_settings()


def test_invalid_env_log_level_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVICECTL_LOG_LEVEL", "chatty")
    with pytest.raises(SettingsError):
        load_settings()


def test_empty_settings_file_uses_defaults(tmp_path: Path) -> None:
    _write_settings(tmp_path, "")
    assert load_settings().log_level == "WARNING"


def test_configure_logging_sets_package_level() -> None:
    logger = logging.getLogger("devicectl")
    previous = logger.level
    try:
        configure_logging("DEBUG")
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
