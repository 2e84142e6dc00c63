from __future__ import annotations

import threading
from typing import Any

from hookbuttons.core.device import ButtonDevice
from hookbuttons.core.model import ChargingState, PressEvent, StatusLowBattery
from hookbuttons.hosts.accessory import Characteristic, CharacteristicType, DeviceRecord, ServiceType


def _device(name: str = "Front Door") -> ButtonDevice:
    record = DeviceRecord(uuid=f"uuid-{name}", display_name=name, context={"device": {"name": name}})
    return ButtonDevice(record)


class Recorder:
    def __init__(self, device: ButtonDevice) -> None:
        self.events: list[Any] = []
        self.battery: list[tuple[CharacteristicType, Any]] = []
        device.switch_service.get_characteristic(CharacteristicType.PROGRAMMABLE_SWITCH_EVENT).subscribe(
            self._on_event
        )
        for kind in (CharacteristicType.BATTERY_LEVEL, CharacteristicType.STATUS_LOW_BATTERY):
            device.battery_service.get_characteristic(kind).subscribe(self._on_battery)

    def _on_event(self, characteristic: Characteristic, value: Any) -> None:
        self.events.append(value)

    def _on_battery(self, characteristic: Characteristic, value: Any) -> None:
        self.battery.append((characteristic.kind, value))


def test_services_are_set_up() -> None:
    device = _device()
    record = device.record

    info = record.get_service(ServiceType.ACCESSORY_INFORMATION)
    assert info is not None
    assert info.get_characteristic(CharacteristicType.MODEL).get_value() == "Virtual Button"
    assert info.get_characteristic(CharacteristicType.SERIAL_NUMBER).get_value() == "uuid-Front Door"

    switch = record.get_service(ServiceType.STATELESS_PROGRAMMABLE_SWITCH)
    assert switch is device.switch_service
    assert switch.get_characteristic(CharacteristicType.NAME).get_value() == "Front Door Switch"

    battery = record.get_service(ServiceType.BATTERY)
    assert battery is device.battery_service
    assert battery.get_characteristic(CharacteristicType.NAME).get_value() == "Front Door Battery"
    assert battery.get_characteristic(CharacteristicType.CHARGING_STATE).get_value() == ChargingState.NOT_CHARGEABLE


def test_rebuilding_handle_reuses_services() -> None:
    device = _device()
    again = ButtonDevice(device.record)
    assert again.switch_service is device.switch_service
    assert again.battery_service is device.battery_service


def test_battery_reads_come_from_state() -> None:
    device = _device()
    level = device.battery_service.get_characteristic(CharacteristicType.BATTERY_LEVEL)
    low = device.battery_service.get_characteristic(CharacteristicType.STATUS_LOW_BATTERY)
    assert level.get_value() == 100
    assert low.get_value() == StatusLowBattery.BATTERY_LEVEL_NORMAL

    device.battery.update(3)
    assert level.get_value() == 3
    assert low.get_value() == StatusLowBattery.BATTERY_LEVEL_LOW


def test_click_sends_single_press_and_keeps_battery() -> None:
    device = _device()
    recorder = Recorder(device)

    assert device.trigger("click") is True

    assert recorder.events == [PressEvent.SINGLE_PRESS]
    assert recorder.battery == []
    assert device.battery.current_level() == 100


def test_hold_with_battery_updates_both() -> None:
    device = _device()
    recorder = Recorder(device)

    assert device.trigger("hold", 5) is True

    assert recorder.events == [PressEvent.LONG_PRESS]
    assert recorder.battery == [
        (CharacteristicType.BATTERY_LEVEL, 5),
        (CharacteristicType.STATUS_LOW_BATTERY, StatusLowBattery.BATTERY_LEVEL_LOW),
    ]
    assert device.battery.current_level() == 5
    assert device.battery.current_is_low() is True


def test_unknown_event_still_applies_battery() -> None:
    device = _device()
    recorder = Recorder(device)

    assert device.trigger("wiggle", 60) is False

    assert recorder.events == []
    assert device.battery.current_level() == 60
    assert (CharacteristicType.BATTERY_LEVEL, 60) in recorder.battery


def test_each_trigger_is_delivered() -> None:
    device = _device()
    recorder = Recorder(device)

    device.trigger("click")
    device.trigger("click")
    device.trigger("double-press")

    assert recorder.events == [PressEvent.SINGLE_PRESS, PressEvent.SINGLE_PRESS, PressEvent.DOUBLE_PRESS]


def test_subscriber_can_read_state_during_notification() -> None:
    device = _device()
    seen: list[int] = []
    level = device.battery_service.get_characteristic(CharacteristicType.BATTERY_LEVEL)
    level.subscribe(lambda characteristic, value: seen.append(characteristic.get_value()))

    device.trigger("click", 42)

    assert seen == [42]


def test_busy_device_does_not_block_another() -> None:
    first = _device("Front Door")
    second = _device("Garage")
    finished = threading.Event()

    def _press_second() -> None:
        second.trigger("click", 50)
        finished.set()

    with first._lock:
        worker = threading.Thread(target=_press_second)
        worker.start()
        assert finished.wait(timeout=2.0)
    worker.join(timeout=2.0)

    assert second.battery.current_level() == 50
    assert first.battery.current_level() == 100


def test_concurrent_battery_pushes_follow_state_order() -> None:
    device = _device()
    level = device.battery_service.get_characteristic(CharacteristicType.BATTERY_LEVEL)
    low = device.battery_service.get_characteristic(CharacteristicType.STATUS_LOW_BATTERY)
    entered = threading.Event()
    release = threading.Event()
    second_done = threading.Event()

    def _hold_on_low_level(characteristic: Characteristic, value: Any) -> None:
        if value == 5:
            entered.set()
            release.wait(timeout=5.0)

    level.subscribe(_hold_on_low_level)

    def _press_second() -> None:
        device.trigger("click", 50)
        second_done.set()

    first = threading.Thread(target=device.trigger, args=("click", 5))
    first.start()
    assert entered.wait(timeout=2.0)

    second = threading.Thread(target=_press_second)
    second.start()
    assert not second_done.wait(timeout=0.2)

    release.set()
    first.join(timeout=2.0)
    second.join(timeout=2.0)

    assert second_done.is_set()
    assert device.battery.current_level() == 50
    assert level.value == 50
    assert low.value == StatusLowBattery.BATTERY_LEVEL_NORMAL
