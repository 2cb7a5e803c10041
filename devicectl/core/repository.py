"""Bounded in-memory device store."""

from __future__ import annotations

from collections.abc import Iterator

from devicectl.core.errors import (
    CapacityExceededError,
    DeviceNotFoundError,
    DuplicateIdError,
    TypeMismatchError,
)
from devicectl.core.model import Device

MAX_CAPACITY = 15


class DeviceRepository:
    """Ordered device registry keyed by device id.

    Insertion order is kept for enumeration. Every method either completes
    or raises before touching the stored records.
    """

    def __init__(self, capacity: int = MAX_CAPACITY) -> None:
        self.capacity = capacity
        self._devices: list[Device] = []

    def _index_of(self, device_id: str) -> int | None:
        for index, stored in enumerate(self._devices):
            if stored.id == device_id:
                return index
        return None

    def add(self, device: Device) -> None:
        if self._index_of(device.id) is not None:
            raise DuplicateIdError(f"Device with ID {device.id} is already stored.")
        if len(self._devices) >= self.capacity:
            raise CapacityExceededError(
                f"Cannot store {device.id}: repository is full ({self.capacity} devices)."
            )
        self._devices.append(device)

    def update(self, device: Device) -> Device:
        """Replace the stored record that has `device.id` and return the old one.

        The replacement must have the same `kind` tag as the stored record;
        a different variant raises `TypeMismatchError`. The record is swapped
        whole, no fields are merged.
        """
        index = self._index_of(device.id)
        if index is None:
            raise DeviceNotFoundError(f"Device with ID {device.id} is not stored.")
        previous = self._devices[index]
        if previous.kind is not device.kind:
            raise TypeMismatchError(
                f"Type mismatch for {device.id}: stored device is {previous.kind.value}, "
                f"got {device.kind.value}."
            )
        self._devices[index] = device
        return previous

    def remove(self, device_id: str) -> Device:
        index = self._index_of(device_id)
        if index is None:
            raise DeviceNotFoundError(f"Device with ID {device_id} is not stored.")
        return self._devices.pop(index)

    def get(self, device_id: str) -> Device | None:
        index = self._index_of(device_id)
        return None if index is None else self._devices[index]

    def all(self) -> tuple[Device, ...]:
        return tuple(self._devices)

    def __len__(self) -> int:
        return len(self._devices)

    def __contains__(self, device_id: object) -> bool:
        return isinstance(device_id, str) and self._index_of(device_id) is not None

    def __iter__(self) -> Iterator[Device]:
        return iter(self.all())
