"""Process-local accessory store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from hookbuttons.core.errors import AccessoryStoreError
from hookbuttons.hosts.accessory import DeviceRecord

LOGGER = logging.getLogger(__name__)


class MemoryAccessoryStore:
    def __init__(self, records: Sequence[DeviceRecord] = ()) -> None:
        self._records: dict[str, DeviceRecord] = {record.uuid: record for record in records}
        self._lock = threading.Lock()

    def load(self) -> list[DeviceRecord]:
        with self._lock:
            return list(self._records.values())

    def register(self, records: Sequence[DeviceRecord]) -> None:
        with self._lock:
            for record in records:
                if record.uuid in self._records:
                    raise AccessoryStoreError(
                        f"Accessory {record.display_name} ({record.uuid}) is already registered"
                    )
                self._records[record.uuid] = record
            self._persist()

    def update(self, records: Sequence[DeviceRecord]) -> None:
        with self._lock:
            for record in records:
                if record.uuid not in self._records:
                    LOGGER.warning("Ignoring update for unregistered accessory %s", record.display_name)
                    continue
                self._records[record.uuid] = record
            self._persist()

    def unregister(self, records: Sequence[DeviceRecord]) -> None:
        with self._lock:
            for record in records:
                self._records.pop(record.uuid, None)
            self._persist()

    def _persist(self) -> None:
        """Hook for subclasses that write records somewhere durable. Called with the lock held."""
