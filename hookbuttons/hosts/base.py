"""Accessory persistence interfaces."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from hookbuttons.hosts.accessory import DeviceRecord


class AccessoryStore(Protocol):
    def load(self) -> list[DeviceRecord]:
        """Return every record persisted by a previous run."""

    def register(self, records: Sequence[DeviceRecord]) -> None:
        """Persist newly created records."""

    def update(self, records: Sequence[DeviceRecord]) -> None:
        """Persist changes to already registered records."""

    def unregister(self, records: Sequence[DeviceRecord]) -> None:
        """Forget records that are no longer configured."""
