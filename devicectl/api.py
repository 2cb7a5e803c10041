"""Public entry points for devicectl.

Scripts should import devices, errors, the manager, and the file adapters from
here. `open_manager` and `save_manager` wire a manager to the configured data
file.
"""

from __future__ import annotations

from devicectl.core.errors import (
    BatteryTooLowError,
    CapacityExceededError,
    ConnectionRejectedError,
    CorruptedLineError,
    DevicectlError,
    DeviceNotFoundError,
    DeviceValidationError,
    DuplicateIdError,
    ErrorKind,
    InvalidFormatError,
    InvalidIdPrefixError,
    MissingOperatingSystemError,
    OutOfRangeError,
    PowerOnError,
    SettingsError,
    StorageError,
    TypeMismatchError,
)
from devicectl.core.model import (
    Device,
    DeviceKind,
    EmbeddedDevice,
    LowBatteryEvent,
    PersonalComputer,
    Smartwatch,
)
from devicectl.core.parser import ParseResult, parse_line, try_parse_line
from devicectl.core.repository import MAX_CAPACITY, DeviceRepository
from devicectl.core.service import DeviceManager, LoadFailure
from devicectl.core.settings import Settings, configure_logging, load_settings
from devicectl.storage.base import LineSink, LineSource
from devicectl.storage.memory import ListLineSink, ListLineSource
from devicectl.storage.textfile import TextFileLineSink, TextFileLineSource

__all__ = [
    "DevicectlError",
    "ErrorKind",
    "CorruptedLineError",
    "DeviceValidationError",
    "InvalidIdPrefixError",
    "OutOfRangeError",
    "InvalidFormatError",
    "DuplicateIdError",
    "CapacityExceededError",
    "DeviceNotFoundError",
    "TypeMismatchError",
    "PowerOnError",
    "MissingOperatingSystemError",
    "BatteryTooLowError",
    "ConnectionRejectedError",
    "StorageError",
    "SettingsError",
    "Device",
    "DeviceKind",
    "PersonalComputer",
    "Smartwatch",
    "EmbeddedDevice",
    "LowBatteryEvent",
    "ParseResult",
    "parse_line",
    "try_parse_line",
    "MAX_CAPACITY",
    "DeviceRepository",
    "DeviceManager",
    "LoadFailure",
    "Settings",
    "load_settings",
    "configure_logging",
    "LineSource",
    "LineSink",
    "ListLineSource",
    "ListLineSink",
    "TextFileLineSource",
    "TextFileLineSink",
    "open_manager",
    "save_manager",
]


def open_manager(settings: Settings | None = None) -> DeviceManager:
    """Build a manager from the configured data file.

    A data file that does not exist yet gives an empty manager; any other
    read failure raises `StorageError`.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    if not settings.data_file.exists():
        return DeviceManager()
    return DeviceManager(TextFileLineSource(settings.data_file))


def save_manager(manager: DeviceManager, settings: Settings | None = None) -> None:
    settings = settings or load_settings()
    manager.save_all(TextFileLineSink(settings.data_file))
