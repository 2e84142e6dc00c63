"""Core data models used across registry, router, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any


class PressEvent(IntEnum):
    SINGLE_PRESS = 0
    DOUBLE_PRESS = 1
    LONG_PRESS = 2


class StatusLowBattery(IntEnum):
    BATTERY_LEVEL_NORMAL = 0
    BATTERY_LEVEL_LOW = 1


class ChargingState(IntEnum):
    NOT_CHARGING = 0
    CHARGING = 1
    NOT_CHARGEABLE = 2


@dataclass(frozen=True)
class ButtonConfig:
    buttons: tuple[str, ...]
    port: int = 3001
    host: str = "0.0.0.0"
    cache_path: Path | None = None
    log_level: str = "INFO"


@dataclass(frozen=True)
class Route:
    path: str
    name: str
    uuid: str


@dataclass(frozen=True)
class ReconcileResult:
    added: tuple[str, ...]
    restored: tuple[str, ...]
    removed: tuple[str, ...]


@dataclass(frozen=True)
class Violation:
    msg: str
    path: str
    location: str
    value: Any = None
    type: str = "field"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type,
            "msg": self.msg,
            "path": self.path,
            "location": self.location,
        }
        if self.value is not None:
            payload["value"] = self.value
        return payload


@dataclass(frozen=True)
class ValidatedEvent:
    event: str
    source: str
    battery_level: int | None = None


@dataclass(frozen=True)
class RouteResponse:
    status: int
    body: bytes
    content_type: str = "text/plain; charset=utf-8"


@dataclass(frozen=True)
class InboundRequest:
    """Transport-neutral view of one HTTP request.

    `headers` keys are lower-cased. A query parameter given once maps to a
    string; one given several times maps to the list of its values.
    """

    method: str
    path: str
    query: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body_error: str | None = None
