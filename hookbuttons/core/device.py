"""Runtime handle for one virtual button accessory."""

from __future__ import annotations

import logging
import threading

from hookbuttons.core.battery import BatteryState
from hookbuttons.core.classifier import classify
from hookbuttons.core.model import ChargingState, StatusLowBattery
from hookbuttons.hosts.accessory import CharacteristicType, DeviceRecord, ServiceType

MANUFACTURER = "hookbuttons"
MODEL_NAME = "Virtual Button"
LOGGER = logging.getLogger(__name__)


class ButtonDevice:
    """Couples a persisted record to its battery state and exposed services.

    `trigger` is the only mutating entry point. Mutations for one device are
    serialized by a per-device state lock. Characteristic notifications are
    sent after it is released, under a publish lock that keeps battery pushes
    for one device in update order.
    """

    def __init__(self, record: DeviceRecord) -> None:
        self.record = record
        self.battery = BatteryState()
        self._lock = threading.Lock()
        self._publish_lock = threading.Lock()

        info = record.add_service(ServiceType.ACCESSORY_INFORMATION)
        info.set_characteristic(CharacteristicType.MANUFACTURER, MANUFACTURER)
        info.set_characteristic(CharacteristicType.MODEL, MODEL_NAME)
        info.set_characteristic(CharacteristicType.SERIAL_NUMBER, record.uuid)

        self.switch_service = record.add_service(ServiceType.STATELESS_PROGRAMMABLE_SWITCH)
        self.switch_service.set_characteristic(CharacteristicType.NAME, f"{self.name} Switch")
        self._switch_event = self.switch_service.get_characteristic(CharacteristicType.PROGRAMMABLE_SWITCH_EVENT)

        self.battery_service = record.add_service(ServiceType.BATTERY)
        self.battery_service.set_characteristic(CharacteristicType.NAME, f"{self.name} Battery")
        self._battery_level = self.battery_service.get_characteristic(CharacteristicType.BATTERY_LEVEL)
        self._battery_level.on_get(self.handle_battery_level_get)
        self._status_low_battery = self.battery_service.get_characteristic(CharacteristicType.STATUS_LOW_BATTERY)
        self._status_low_battery.on_get(self.handle_status_low_battery_get)
        self.battery_service.get_characteristic(CharacteristicType.CHARGING_STATE).on_get(
            lambda: ChargingState.NOT_CHARGEABLE
        )

        LOGGER.debug("Finished initializing accessory: %s", record.display_name)

    @property
    def uuid(self) -> str:
        return self.record.uuid

    @property
    def name(self) -> str:
        device = self.record.context.get("device") or {}
        return str(device.get("name", self.record.display_name))

    def trigger(self, event_token: str, battery_level: float | None = None) -> bool:
        """Apply one physical button event.

        Returns False when `event_token` has no press-event mapping. A battery
        level sent along with such a token is still applied.
        """
        if battery_level is not None:
            # Pushes for one device land in update order.
            with self._publish_lock:
                with self._lock:
                    level, is_low = self.battery.update(battery_level)
                self._publish_battery(level, is_low)

        event = classify(event_token)
        if event is None:
            LOGGER.error("Unknown event type: %s", event_token)
            return False

        LOGGER.debug("Button %s triggered: %s", self.record.display_name, event_token)
        self._switch_event.send_event_notification(event)
        return True

    def handle_battery_level_get(self) -> int:
        with self._lock:
            return self.battery.current_level()

    def handle_status_low_battery_get(self) -> StatusLowBattery:
        with self._lock:
            return _low_battery_status(self.battery.current_is_low())

    def _publish_battery(self, level: int, is_low: bool) -> None:
        self._battery_level.update_value(level)
        self._status_low_battery.update_value(_low_battery_status(is_low))
        LOGGER.debug("Battery level for %s: %d%%", self.record.display_name, level)


def _low_battery_status(is_low: bool) -> StatusLowBattery:
    if is_low:
        return StatusLowBattery.BATTERY_LEVEL_LOW
    return StatusLowBattery.BATTERY_LEVEL_NORMAL
