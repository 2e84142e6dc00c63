"""Accessory store backed by a JSON cache file."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from hookbuttons.core.errors import AccessoryStoreError
from hookbuttons.hosts.accessory import DeviceRecord
from hookbuttons.hosts.memory import MemoryAccessoryStore

LOGGER = logging.getLogger(__name__)
_CACHE_VERSION = 1


def default_cache_path() -> Path:
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "hookbuttons/accessories.json"


class JSONAccessoryStore(MemoryAccessoryStore):
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_cache_path()
        super().__init__(_read_cache(self.path))

    def _persist(self) -> None:
        payload = {
            "version": _CACHE_VERSION,
            "accessories": [record.to_dict() for record in self._records.values()],
        }
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise AccessoryStoreError(f"Could not write accessory cache {self.path}: {exc}") from exc
        LOGGER.debug("Wrote %d accessories to %s", len(self._records), self.path)


def _read_cache(path: Path) -> list[DeviceRecord]:
    if not path.exists():
        return []
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AccessoryStoreError(f"Could not read accessory cache {path}: {exc}") from exc

    try:
        loaded: Any = json.loads(content)
    except json.JSONDecodeError as exc:
        raise AccessoryStoreError(f"Invalid JSON in accessory cache {path}: {exc}") from exc

    if not isinstance(loaded, dict) or not isinstance(loaded.get("accessories"), list):
        raise AccessoryStoreError(f"Accessory cache {path} must contain an 'accessories' list")

    records: list[DeviceRecord] = []
    for item in loaded["accessories"]:
        try:
            records.append(DeviceRecord.from_dict(item))
        except (KeyError, TypeError, ValueError) as exc:
            raise AccessoryStoreError(f"Malformed accessory entry in {path}: {item!r}") from exc
    return records
