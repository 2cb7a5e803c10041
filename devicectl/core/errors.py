"""Domain-specific errors for devicectl."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    corrupted_line = "corrupted_line"
    validation = "validation"
    duplicate_id = "duplicate_id"
    capacity_exceeded = "capacity_exceeded"
    not_found = "not_found"
    type_mismatch = "type_mismatch"
    power_on = "power_on"
    storage = "storage"
    settings = "settings"


class DevicectlError(Exception):
    """Base error for devicectl."""

    kind: ErrorKind


class CorruptedLineError(DevicectlError):
    """Raised when a data line cannot be split into valid fields."""

    kind = ErrorKind.corrupted_line

    def __init__(self, line_index: int, reason: str) -> None:
        super().__init__(f"Line {line_index} is corrupted: {reason}")
        self.line_index = line_index
        self.reason = reason


class DeviceValidationError(DevicectlError):
    """Raised when a device field violates its variant's invariants."""

    kind = ErrorKind.validation


class InvalidIdPrefixError(DeviceValidationError):
    """Raised when a device id does not start with its variant's prefix."""


class OutOfRangeError(DeviceValidationError):
    """Raised when a numeric field is outside its allowed range."""


class InvalidFormatError(DeviceValidationError):
    """Raised when a text field is malformed."""


class DuplicateIdError(DevicectlError):
    """Raised when adding a device whose id is already stored."""

    kind = ErrorKind.duplicate_id


class CapacityExceededError(DevicectlError):
    """Raised when adding to a full repository."""

    kind = ErrorKind.capacity_exceeded


class DeviceNotFoundError(DevicectlError):
    """Raised when no stored device has the requested id."""

    kind = ErrorKind.not_found


class TypeMismatchError(DevicectlError):
    """Raised when an edit would change the stored device's variant."""

    kind = ErrorKind.type_mismatch


class PowerOnError(DevicectlError):
    """Base error for failed power-on preconditions."""

    kind = ErrorKind.power_on


class MissingOperatingSystemError(PowerOnError):
    """Raised when a personal computer without an OS is turned on."""


class BatteryTooLowError(PowerOnError):
    """Raised when a smartwatch battery cannot cover a power-on."""


class ConnectionRejectedError(PowerOnError):
    """Raised when an embedded device is refused by its network."""


class StorageError(DevicectlError):
    """Raised when reading or writing device lines fails."""

    kind = ErrorKind.storage


class SettingsError(DevicectlError):
    """Raised when the settings file cannot be read or validated."""

    kind = ErrorKind.settings
