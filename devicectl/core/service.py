"""Device manager used by scripts and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from devicectl.core.errors import DevicectlError, DeviceNotFoundError, ErrorKind
from devicectl.core.model import Device, LowBatteryEvent, Smartwatch
from devicectl.core.parser import ParseResult, try_parse_line
from devicectl.core.repository import DeviceRepository
from devicectl.storage.base import LineSink, LineSource

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadFailure:
    line_index: int
    raw_line: str
    kind: ErrorKind
    message: str


class DeviceManager:
    """Loads devices from a line source and exposes CRUD and power operations.

    Loading is best-effort: a line that cannot be parsed or stored is logged,
    recorded in `load_failures`, and skipped. Every other operation raises
    its `DevicectlError` to the caller.
    """

    def __init__(
        self,
        source: LineSource | None = None,
        *,
        repository: DeviceRepository | None = None,
    ) -> None:
        self.repository = repository if repository is not None else DeviceRepository()
        self.notifications: list[LowBatteryEvent] = []
        self._unsubscribers: dict[str, Callable[[], None]] = {}
        for device in self.repository:
            self._watch(device)

        failures: list[LoadFailure] = []
        if source is not None:
            for index, raw_line in enumerate(source.read_lines()):
                failure = self._load_line(try_parse_line(raw_line, index))
                if failure is not None:
                    failures.append(failure)
            LOGGER.info(
                "Loaded %d devices (%d lines skipped)", len(self.repository), len(failures)
            )
        self.load_failures = tuple(failures)

    def _load_line(self, result: ParseResult) -> LoadFailure | None:
        if result.device is None:
            error = result.error
        else:
            try:
                self.add_device(result.device)
                return None
            except DevicectlError as exc:
                error = exc

        match error.kind:
            case ErrorKind.corrupted_line | ErrorKind.validation:
                LOGGER.warning("Skipping line %d: %s", result.line_index, error)
            case ErrorKind.duplicate_id | ErrorKind.capacity_exceeded:
                LOGGER.warning("Line %d was not stored: %s", result.line_index, error)
            case _:
                LOGGER.warning("Line %d failed: %s", result.line_index, error)
        return LoadFailure(
            line_index=result.line_index,
            raw_line=result.raw_line,
            kind=error.kind,
            message=str(error),
        )

    def _on_low_battery(self, event: LowBatteryEvent) -> None:
        LOGGER.warning(
            "Battery level is low on %s. Current level is: %d%%",
            event.device_id,
            event.battery_level,
        )
        self.notifications.append(event)

    def _watch(self, device: Device) -> None:
        if isinstance(device, Smartwatch):
            self._unsubscribers[device.id] = device.subscribe(self._on_low_battery)

    def _unwatch(self, device_id: str) -> None:
        unsubscribe = self._unsubscribers.pop(device_id, None)
        if unsubscribe is not None:
            unsubscribe()

    def _require(self, device_id: str) -> Device:
        device = self.repository.get(device_id)
        if device is None:
            raise DeviceNotFoundError(f"Device with ID {device_id} is not stored.")
        return device

    def add_device(self, device: Device) -> None:
        self.repository.add(device)
        self._watch(device)
        LOGGER.debug("Added %s", device.id)

    def edit_device(self, device: Device) -> None:
        self.repository.update(device)
        self._unwatch(device.id)
        self._watch(device)
        LOGGER.debug("Replaced %s", device.id)

    def remove_device_by_id(self, device_id: str) -> None:
        self.repository.remove(device_id)
        self._unwatch(device_id)
        LOGGER.debug("Removed %s", device_id)

    def get_device_by_id(self, device_id: str) -> Device | None:
        return self.repository.get(device_id)

    def turn_on_device(self, device_id: str) -> None:
        self._require(device_id).turn_on()
        LOGGER.debug("Turned on %s", device_id)

    def turn_off_device(self, device_id: str) -> None:
        self._require(device_id).turn_off()
        LOGGER.debug("Turned off %s", device_id)

    def devices(self) -> tuple[Device, ...]:
        return self.repository.all()

    def list_all(self) -> list[str]:
        return [device.describe() for device in self.repository]

    def save_all(self, sink: LineSink) -> None:
        lines = [device.serialize() for device in self.repository]
        sink.write_lines(lines)
        LOGGER.info("Saved %d devices", len(lines))
