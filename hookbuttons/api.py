"""Stable public API for embedding hookbuttons.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from hookbuttons.core.battery import LOW_BATTERY_THRESHOLD, BatteryState
from hookbuttons.core.classifier import VALID_EVENTS, classify
from hookbuttons.core.config_loader import LoadedConfig, build_config, load_config
from hookbuttons.core.device import ButtonDevice
from hookbuttons.core.errors import (
    AccessoryStoreError,
    ConfigLoadError,
    ConfigValidationError,
    HandlerMissingError,
    HookButtonsError,
    ListenerError,
    RequestValidationError,
    RouteCollisionError,
    UnknownRouteError,
)
from hookbuttons.core.identity import generate_uuid
from hookbuttons.core.model import (
    ButtonConfig,
    ChargingState,
    InboundRequest,
    PressEvent,
    ReconcileResult,
    Route,
    RouteResponse,
    StatusLowBattery,
)
from hookbuttons.core.registry import DeviceRegistry
from hookbuttons.core.routing import ButtonRouter, build_route_table, button_path
from hookbuttons.core.service import ButtonService
from hookbuttons.hosts.accessory import Characteristic, CharacteristicType, DeviceRecord, Service, ServiceType
from hookbuttons.hosts.base import AccessoryStore
from hookbuttons.hosts.json_store import JSONAccessoryStore
from hookbuttons.hosts.memory import MemoryAccessoryStore
from hookbuttons.transports.http_server import ButtonWebhookServer

__all__ = [
    "HookButtonsError",
    "AccessoryStoreError",
    "ConfigLoadError",
    "ConfigValidationError",
    "HandlerMissingError",
    "ListenerError",
    "RequestValidationError",
    "RouteCollisionError",
    "UnknownRouteError",
    "ButtonConfig",
    "ChargingState",
    "InboundRequest",
    "PressEvent",
    "ReconcileResult",
    "Route",
    "RouteResponse",
    "StatusLowBattery",
    "LOW_BATTERY_THRESHOLD",
    "VALID_EVENTS",
    "BatteryState",
    "classify",
    "generate_uuid",
    "ButtonDevice",
    "DeviceRegistry",
    "ButtonRouter",
    "build_route_table",
    "button_path",
    "LoadedConfig",
    "build_config",
    "load_config",
    "AccessoryStore",
    "Characteristic",
    "CharacteristicType",
    "DeviceRecord",
    "Service",
    "ServiceType",
    "JSONAccessoryStore",
    "MemoryAccessoryStore",
    "ButtonWebhookServer",
    "ButtonService",
]
