"""Device records shared by the parser, repository, and manager."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from devicectl.core.errors import (
    BatteryTooLowError,
    ConnectionRejectedError,
    InvalidFormatError,
    InvalidIdPrefixError,
    MissingOperatingSystemError,
    OutOfRangeError,
)

_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9]?[0-9])"
_IPV4_RE = re.compile(rf"^{_OCTET}(?:\.{_OCTET}){{3}}$")
_FORBIDDEN_CHARS = (",", "\n", "\r")

TRUSTED_NETWORK_MARKER = "MD Ltd."
LOW_BATTERY_THRESHOLD = 20
MIN_POWER_ON_BATTERY = 11
POWER_ON_BATTERY_COST = 10


class DeviceKind(str, Enum):
    """Closed set of device variants. Each maps to exactly one class below."""

    personal_computer = "personal_computer"
    smartwatch = "smartwatch"
    embedded = "embedded"


@dataclass(frozen=True)
class LowBatteryEvent:
    device_id: str
    battery_level: int


LowBatteryListener = Callable[[LowBatteryEvent], None]


def _check_text(value: str, *, context: str) -> str:
    if any(char in value for char in _FORBIDDEN_CHARS):
        raise InvalidFormatError(f"{context} must not contain commas or line breaks: {value!r}")
    return value


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def is_valid_ipv4(value: str) -> bool:
    return bool(_IPV4_RE.match(value))


class Device(ABC):
    """Common state of every managed device.

    `id` is fixed at construction. Subclasses define `kind` and `id_prefix`
    and provide their own power-on rules and persisted layout.
    """

    kind: ClassVar[DeviceKind]
    id_prefix: ClassVar[str]

    def __init__(self, device_id: str, name: str, enabled: bool = False) -> None:
        if not device_id.startswith(self.id_prefix):
            raise InvalidIdPrefixError(
                f"{type(self).__name__} id '{device_id}' must start with '{self.id_prefix}'"
            )
        self._id = _check_text(device_id, context="id")
        self.name = name
        self.enabled = enabled

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = _check_text(value, context=f"{self._id}.name")

    def turn_on(self) -> None:
        self.enabled = True

    def turn_off(self) -> None:
        self.enabled = False

    def _state_word(self) -> str:
        return "enabled" if self.enabled else "disabled"

    def _base_fields(self) -> list[str]:
        return [self._id, self._name, _format_bool(self.enabled)]

    @abstractmethod
    def serialize(self) -> str:
        """Return the persisted line for this device."""

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable one-line summary."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Device):
            return NotImplemented
        return self.kind is other.kind and self.serialize() == other.serialize()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.serialize()!r})"


class PersonalComputer(Device):
    kind = DeviceKind.personal_computer
    id_prefix = "P-"

    def __init__(
        self,
        device_id: str,
        name: str,
        enabled: bool = False,
        operating_system: str | None = None,
    ) -> None:
        super().__init__(device_id, name, enabled)
        self.operating_system = operating_system

    @property
    def operating_system(self) -> str | None:
        return self._operating_system

    @operating_system.setter
    def operating_system(self, value: str | None) -> None:
        if value is not None:
            value = _check_text(value, context=f"{self.id}.operating_system") or None
        self._operating_system = value

    def turn_on(self) -> None:
        if not self._operating_system:
            raise MissingOperatingSystemError(
                f"Personal computer {self.id} has no operating system installed"
            )
        super().turn_on()

    def serialize(self) -> str:
        fields = self._base_fields()
        if self._operating_system:
            fields.append(self._operating_system)
        return ",".join(fields)

    def describe(self) -> str:
        os_name = self._operating_system or "no OS"
        return f"Personal computer {self.name} ({self.id}) is {self._state_word()} with {os_name}"


class Smartwatch(Device):
    """Battery-powered watch.

    Setting `battery_level` below 20 emits a `LowBatteryEvent`. Subscribed
    listeners receive it directly; with no listeners it is queued until
    `drain_events()` so callers may poll instead of subscribing.
    """

    kind = DeviceKind.smartwatch
    id_prefix = "SW-"

    def __init__(
        self,
        device_id: str,
        name: str,
        enabled: bool = False,
        battery_level: int = 100,
    ) -> None:
        super().__init__(device_id, name, enabled)
        self._listeners: list[LowBatteryListener] = []
        self._pending: list[LowBatteryEvent] = []
        self._battery_level = self._checked_level(battery_level)

    def _checked_level(self, value: int) -> int:
        if value < 0 or value > 100:
            raise OutOfRangeError(f"{self.id}.battery_level must be within 0..100, got {value}")
        return value

    @property
    def battery_level(self) -> int:
        return self._battery_level

    @battery_level.setter
    def battery_level(self, value: int) -> None:
        self._battery_level = self._checked_level(value)
        if value < LOW_BATTERY_THRESHOLD:
            self._emit(LowBatteryEvent(device_id=self.id, battery_level=value))

    def subscribe(self, listener: LowBatteryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def drain_events(self) -> list[LowBatteryEvent]:
        events, self._pending = self._pending, []
        return events

    def _emit(self, event: LowBatteryEvent) -> None:
        if not self._listeners:
            self._pending.append(event)
            return
        for listener in list(self._listeners):
            listener(event)

    def turn_on(self) -> None:
        if self._battery_level < MIN_POWER_ON_BATTERY:
            raise BatteryTooLowError(
                f"Smartwatch {self.id} battery at {self._battery_level}% is too low to turn on"
            )
        super().turn_on()
        self.battery_level = self._battery_level - POWER_ON_BATTERY_COST

    def serialize(self) -> str:
        return ",".join([*self._base_fields(), f"{self._battery_level}%"])

    def describe(self) -> str:
        return (
            f"Smartwatch {self.name} ({self.id}) is {self._state_word()} "
            f"and has {self._battery_level}% battery"
        )


class EmbeddedDevice(Device):
    kind = DeviceKind.embedded
    id_prefix = "ED-"

    def __init__(
        self,
        device_id: str,
        name: str,
        enabled: bool,
        ip_address: str,
        network_name: str,
    ) -> None:
        super().__init__(device_id, name, enabled)
        self.ip_address = ip_address
        self.network_name = network_name
        self._connected = False

    @property
    def ip_address(self) -> str:
        return self._ip_address

    @ip_address.setter
    def ip_address(self, value: str) -> None:
        if not is_valid_ipv4(value):
            raise InvalidFormatError(f"{self.id}.ip_address '{value}' is not a dotted-quad IPv4 address")
        self._ip_address = value

    @property
    def network_name(self) -> str:
        return self._network_name

    @network_name.setter
    def network_name(self, value: str) -> None:
        self._network_name = _check_text(value, context=f"{self.id}.network_name")

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if TRUSTED_NETWORK_MARKER not in self._network_name:
            raise ConnectionRejectedError(
                f"Embedded device {self.id} refused by network '{self._network_name}'"
            )
        self._connected = True

    def turn_on(self) -> None:
        self.connect()
        super().turn_on()

    def turn_off(self) -> None:
        super().turn_off()
        self._connected = False

    def serialize(self) -> str:
        return ",".join([*self._base_fields(), self._ip_address, self._network_name])

    def describe(self) -> str:
        return (
            f"Embedded device {self.name} ({self.id}) is {self._state_word()} "
            f"with IP address {self._ip_address} on {self._network_name}"
        )

