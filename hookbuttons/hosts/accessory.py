"""In-memory accessory, service, and characteristic objects.

A `DeviceRecord` is the persisted half of an accessory (uuid, display name and
context). Its services and characteristics are rebuilt on every start and are
never written to the accessory cache.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ServiceType(str, Enum):
    ACCESSORY_INFORMATION = "AccessoryInformation"
    STATELESS_PROGRAMMABLE_SWITCH = "StatelessProgrammableSwitch"
    BATTERY = "Battery"


class CharacteristicType(str, Enum):
    NAME = "Name"
    MANUFACTURER = "Manufacturer"
    MODEL = "Model"
    SERIAL_NUMBER = "SerialNumber"
    PROGRAMMABLE_SWITCH_EVENT = "ProgrammableSwitchEvent"
    BATTERY_LEVEL = "BatteryLevel"
    STATUS_LOW_BATTERY = "StatusLowBattery"
    CHARGING_STATE = "ChargingState"


Subscriber = Callable[["Characteristic", Any], None]


class Characteristic:
    def __init__(self, kind: CharacteristicType, value: Any = None) -> None:
        self.kind = kind
        self.value = value
        self._getter: Callable[[], Any] | None = None
        self._subscribers: list[Subscriber] = []
        self._lock = threading.Lock()

    def on_get(self, handler: Callable[[], Any]) -> Characteristic:
        """Serve reads from `handler` instead of the stored value."""
        self._getter = handler
        return self

    def get_value(self) -> Any:
        if self._getter is not None:
            return self._getter()
        return self.value

    def set_value(self, value: Any) -> Characteristic:
        self.value = value
        return self

    def update_value(self, value: Any) -> Characteristic:
        """Store `value` and push it to subscribers."""
        self.value = value
        self._publish(value)
        return self

    def send_event_notification(self, value: Any) -> None:
        """Push a one-shot event to subscribers without keeping it as state."""
        self._publish(value)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def _publish(self, value: Any) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(self, value)


class Service:
    def __init__(self, kind: ServiceType) -> None:
        self.kind = kind
        self.characteristics: dict[CharacteristicType, Characteristic] = {}

    def get_characteristic(self, kind: CharacteristicType) -> Characteristic:
        characteristic = self.characteristics.get(kind)
        if characteristic is None:
            characteristic = Characteristic(kind)
            self.characteristics[kind] = characteristic
        return characteristic

    def set_characteristic(self, kind: CharacteristicType, value: Any) -> Service:
        self.get_characteristic(kind).set_value(value)
        return self


@dataclass(eq=False)
class DeviceRecord:
    uuid: str
    display_name: str
    context: dict[str, Any] = field(default_factory=dict)
    services: dict[ServiceType, Service] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.add_service(ServiceType.ACCESSORY_INFORMATION)

    def get_service(self, kind: ServiceType) -> Service | None:
        return self.services.get(kind)

    def add_service(self, kind: ServiceType) -> Service:
        service = self.services.get(kind)
        if service is None:
            service = Service(kind)
            self.services[kind] = service
        return service

    def to_dict(self) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "display_name": self.display_name,
            "context": self.context,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeviceRecord:
        return cls(
            uuid=str(data["uuid"]),
            display_name=str(data["display_name"]),
            context=dict(data.get("context") or {}),
        )
