"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from hookbuttons.core.config_loader import load_config
from hookbuttons.core.device import ButtonDevice
from hookbuttons.core.model import ButtonConfig, ReconcileResult, Route
from hookbuttons.core.registry import DeviceRegistry
from hookbuttons.core.routing import ButtonRouter, build_route_table
from hookbuttons.hosts.accessory import Characteristic, DeviceRecord
from hookbuttons.hosts.base import AccessoryStore
from hookbuttons.hosts.json_store import JSONAccessoryStore
from hookbuttons.transports.http_server import ButtonWebhookServer

LOGGER = logging.getLogger(__name__)


class ButtonService:
    """Builds the registry, route table, and listener from one configuration.

    Construction only reads configuration and the accessory cache. `setup`
    reconciles the cache and builds the router; `serve` additionally starts
    the listener.
    """

    def __init__(
        self,
        *,
        config: ButtonConfig | None = None,
        config_path: Path | None = None,
        store: AccessoryStore | None = None,
    ) -> None:
        if config is None:
            loaded = load_config(config_path)
            config = loaded.config
            self.load_warnings = loaded.warnings
        else:
            self.load_warnings = ()
        self.config = config
        self.store = store if store is not None else JSONAccessoryStore(config.cache_path)
        self.registry = DeviceRegistry(self.store)
        self.routes = build_route_table(config.buttons)
        self.router: ButtonRouter | None = None
        self.server: ButtonWebhookServer | None = None

    def setup(self) -> ReconcileResult:
        result = self.registry.reconcile(self.config.buttons)
        self.router = ButtonRouter(self.registry, self.routes)
        for device in self.registry.devices():
            _log_notifications(device)
        return result

    def serve(self, *, host: str | None = None, port: int | None = None) -> ButtonWebhookServer:
        if self.router is None:
            self.setup()
        self.server = ButtonWebhookServer(
            host=host or self.config.host,
            port=self.config.port if port is None else port,
            router=self._require_router(),
        )
        self.server.start()
        return self.server

    def _require_router(self) -> ButtonRouter:
        if self.router is None:
            raise RuntimeError("ButtonService.setup() has not run")
        return self.router

    def stop(self) -> None:
        if self.server is not None:
            self.server.stop()
            self.server = None

    def list_routes(self) -> list[Route]:
        return sorted(self.routes.values(), key=lambda r: r.name)

    def list_cached(self) -> list[tuple[DeviceRecord, bool]]:
        """Return cached records paired with whether they are still configured."""
        configured = {route.uuid for route in self.routes.values()}
        records = sorted(self.store.load(), key=lambda r: r.display_name)
        return [(record, record.uuid in configured) for record in records]

    def list_devices(self) -> list[ButtonDevice]:
        return self.registry.devices()


def _log_notifications(device: ButtonDevice) -> None:
    def _on_change(characteristic: Characteristic, value: Any) -> None:
        LOGGER.debug("%s %s -> %s", device.name, characteristic.kind.value, value)

    for service in (device.switch_service, device.battery_service):
        for characteristic in service.characteristics.values():
            characteristic.subscribe(_on_change)
