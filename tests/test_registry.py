from __future__ import annotations

from collections.abc import Sequence

import pytest

from hookbuttons.core.errors import AccessoryStoreError
from hookbuttons.core.identity import generate_uuid
from hookbuttons.core.registry import DeviceRegistry
from hookbuttons.hosts.accessory import DeviceRecord
from hookbuttons.hosts.memory import MemoryAccessoryStore


class RecordingStore(MemoryAccessoryStore):
    def __init__(self, records: Sequence[DeviceRecord] = ()) -> None:
        super().__init__(records)
        self.registered: list[str] = []
        self.updated: list[str] = []
        self.unregistered: list[str] = []

    def register(self, records: Sequence[DeviceRecord]) -> None:
        super().register(records)
        self.registered.extend(r.display_name for r in records)

    def update(self, records: Sequence[DeviceRecord]) -> None:
        super().update(records)
        self.updated.extend(r.display_name for r in records)

    def unregister(self, records: Sequence[DeviceRecord]) -> None:
        super().unregister(records)
        self.unregistered.extend(r.display_name for r in records)


def _record(name: str) -> DeviceRecord:
    return DeviceRecord(uuid=generate_uuid(name), display_name=name, context={"device": {"name": name}})


def test_fresh_registry_adds_all_configured() -> None:
    store = RecordingStore()
    registry = DeviceRegistry(store)

    result = registry.reconcile(["Front Door", "Garage"])

    assert result.added == ("Front Door", "Garage")
    assert result.restored == ()
    assert result.removed == ()
    assert store.registered == ["Front Door", "Garage"]
    assert len(registry) == 2
    assert {r.display_name for r in store.load()} == {"Front Door", "Garage"}


def test_reconcile_restores_adds_and_removes() -> None:
    store = RecordingStore([_record("A"), _record("B")])
    registry = DeviceRegistry(store)

    result = registry.reconcile(["B", "C"])

    assert result.restored == ("B",)
    assert result.added == ("C",)
    assert result.removed == ("A",)
    assert store.registered == ["C"]
    assert store.updated == ["B"]
    assert store.unregistered == ["A"]

    assert generate_uuid("A") not in registry
    assert generate_uuid("B") in registry
    assert generate_uuid("C") in registry
    assert [d.name for d in registry.devices()] == ["B", "C"]
    assert registry.record(generate_uuid("A")) is None


def test_reconcile_is_idempotent() -> None:
    store = RecordingStore([_record("A")])
    registry = DeviceRegistry(store)
    registry.reconcile(["A", "B"])
    handles = {d.uuid: d for d in registry.devices()}

    second = registry.reconcile(["A", "B"])

    assert second.added == ()
    assert second.removed == ()
    assert set(second.restored) == {"A", "B"}
    assert {d.uuid: d for d in registry.devices()} == handles
    assert store.registered == ["B"]


def test_restored_handle_keeps_battery_state_across_reconcile() -> None:
    registry = DeviceRegistry(RecordingStore())
    registry.reconcile(["A"])
    device = registry.lookup(generate_uuid("A"))
    assert device is not None
    device.trigger("click", 20)

    registry.reconcile(["A"])

    again = registry.lookup(generate_uuid("A"))
    assert again is device
    assert again.battery.current_level() == 20


def test_restore_refreshes_context() -> None:
    stale = _record("Porch")
    stale.context = {"device": {"name": "old"}}
    registry = DeviceRegistry(RecordingStore([stale]))

    registry.reconcile(["Porch"])

    record = registry.record(generate_uuid("Porch"))
    assert record is stale
    assert record.context["device"] == {"name": "Porch"}


def test_duplicate_names_collapse() -> None:
    store = RecordingStore()
    registry = DeviceRegistry(store)

    result = registry.reconcile(["A", "A"])

    assert result.added == ("A",)
    assert len(registry) == 1
    assert store.registered == ["A"]


def test_empty_configuration_removes_everything() -> None:
    store = RecordingStore([_record("A"), _record("B")])
    registry = DeviceRegistry(store)

    result = registry.reconcile([])

    assert set(result.removed) == {"A", "B"}
    assert len(registry) == 0
    assert store.load() == []


def test_lookup_unknown_returns_none() -> None:
    registry = DeviceRegistry(RecordingStore())
    registry.reconcile(["A"])
    assert registry.lookup(generate_uuid("Z")) is None


def test_store_failure_aborts_reconcile() -> None:
    class BrokenStore(RecordingStore):
        def register(self, records: Sequence[DeviceRecord]) -> None:
            raise AccessoryStoreError("disk full")

    registry = DeviceRegistry(BrokenStore())
    with pytest.raises(AccessoryStoreError):
        registry.reconcile(["A"])
