"""Reconciliation of configured button names against persisted accessories."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence

from hookbuttons.core.device import ButtonDevice
from hookbuttons.core.identity import generate_uuid
from hookbuttons.core.model import ReconcileResult
from hookbuttons.hosts.accessory import DeviceRecord
from hookbuttons.hosts.base import AccessoryStore

LOGGER = logging.getLogger(__name__)


class DeviceRegistry:
    """Owns every `ButtonDevice` and the uuid index used to find them.

    Records persisted by a previous run are read from `store` once, at
    construction. `reconcile` then aligns them with the configured names.
    """

    def __init__(
        self,
        store: AccessoryStore,
        *,
        uuid_fn: Callable[[str], str] = generate_uuid,
    ) -> None:
        self._store = store
        self._uuid_fn = uuid_fn
        self._records: dict[str, DeviceRecord] = {}
        self._handles: dict[str, ButtonDevice] = {}
        for record in store.load():
            LOGGER.info("Loading accessory from cache: %s", record.display_name)
            self._records[record.uuid] = record

    def reconcile(self, configured_names: Sequence[str]) -> ReconcileResult:
        added: list[str] = []
        restored: list[str] = []
        configured: dict[str, str] = {}

        for name in configured_names:
            uuid = self._uuid_fn(name)
            if uuid in configured:
                LOGGER.warning("Ignoring duplicate button name: %s", name)
                continue
            configured[uuid] = name

            record = self._records.get(uuid)
            if record is not None:
                LOGGER.info("Restoring existing accessory from cache: %s", record.display_name)
                record.context["device"] = {"name": name}
                self._store.update([record])
                if uuid not in self._handles:
                    self._handles[uuid] = ButtonDevice(record)
                restored.append(name)
            else:
                LOGGER.info("Adding new accessory: %s", name)
                record = DeviceRecord(uuid=uuid, display_name=name, context={"device": {"name": name}})
                self._handles[uuid] = ButtonDevice(record)
                self._store.register([record])
                self._records[uuid] = record
                added.append(name)

        stale = [record for uuid, record in self._records.items() if uuid not in configured]
        removed: list[str] = []
        for record in stale:
            LOGGER.info("Removing accessory: %s", record.display_name)
            self._handles.pop(record.uuid, None)
            self._store.unregister([record])
            del self._records[record.uuid]
            removed.append(record.display_name)

        return ReconcileResult(added=tuple(added), restored=tuple(restored), removed=tuple(removed))

    def lookup(self, uuid: str) -> ButtonDevice | None:
        return self._handles.get(uuid)

    def record(self, uuid: str) -> DeviceRecord | None:
        return self._records.get(uuid)

    def devices(self) -> list[ButtonDevice]:
        return sorted(self._handles.values(), key=lambda d: d.name)

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._handles

    def __iter__(self) -> Iterator[ButtonDevice]:
        return iter(self.devices())
