"""Line parsing for the comma-separated device data file."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from devicectl.core.errors import CorruptedLineError, DevicectlError
from devicectl.core.model import Device, EmbeddedDevice, PersonalComputer, Smartwatch

_BATTERY_RE = re.compile(r"^-?[0-9]+$")


@dataclass(frozen=True)
class ParseResult:
    line_index: int
    raw_line: str
    device: Device | None = None
    error: DevicectlError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _parse_bool(value: str, line_index: int) -> bool:
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise CorruptedLineError(line_index, f"enabled flag '{value}' must be true or false")


def _check_field_count(fields: list[str], line_index: int, *, minimum: int, maximum: int) -> None:
    if len(fields) < minimum:
        raise CorruptedLineError(
            line_index, f"expected at least {minimum} fields, got {len(fields)}"
        )
    if len(fields) > maximum:
        raise CorruptedLineError(
            line_index, f"expected at most {maximum} fields, got {len(fields)}"
        )


def _build_personal_computer(fields: list[str], line_index: int) -> Device:
    _check_field_count(fields, line_index, minimum=3, maximum=4)
    operating_system = fields[3] if len(fields) == 4 and fields[3] else None
    return PersonalComputer(
        fields[0],
        fields[1],
        _parse_bool(fields[2], line_index),
        operating_system,
    )


def _build_smartwatch(fields: list[str], line_index: int) -> Device:
    _check_field_count(fields, line_index, minimum=4, maximum=4)
    battery = fields[3].removesuffix("%")
    if not _BATTERY_RE.match(battery):
        raise CorruptedLineError(
            line_index, f"battery level '{fields[3]}' is not an integer percentage"
        )
    battery_level = int(battery)
    return Smartwatch(
        fields[0],
        fields[1],
        _parse_bool(fields[2], line_index),
        battery_level,
    )


def _build_embedded(fields: list[str], line_index: int) -> Device:
    _check_field_count(fields, line_index, minimum=5, maximum=5)
    return EmbeddedDevice(
        fields[0],
        fields[1],
        _parse_bool(fields[2], line_index),
        fields[3],
        fields[4],
    )


_BUILDERS: tuple[tuple[str, Callable[[list[str], int], Device]], ...] = (
    (Smartwatch.id_prefix, _build_smartwatch),
    (EmbeddedDevice.id_prefix, _build_embedded),
    (PersonalComputer.id_prefix, _build_personal_computer),
)


def parse_line(raw_line: str, line_index: int) -> Device:
    """Turn one data line into a typed device.

    Raises `CorruptedLineError` for an unknown prefix, a wrong field count,
    or an unparseable flag/number. Values that parse but break a variant's
    invariants raise that variant's `DeviceValidationError`.
    """
    line = raw_line.strip()
    if not line:
        raise CorruptedLineError(line_index, "line is empty")

    for prefix, builder in _BUILDERS:
        if line.startswith(prefix):
            fields = [field.strip() for field in line.split(",")]
            return builder(fields, line_index)

    raise CorruptedLineError(line_index, f"unknown device prefix in '{line}'")


def try_parse_line(raw_line: str, line_index: int) -> ParseResult:
    try:
        device = parse_line(raw_line, line_index)
    except DevicectlError as exc:
        return ParseResult(line_index=line_index, raw_line=raw_line, error=exc)
    return ParseResult(line_index=line_index, raw_line=raw_line, device=device)
