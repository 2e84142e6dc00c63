"""Domain-specific errors for hookbuttons."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hookbuttons.core.model import Violation


class HookButtonsError(Exception):
    """Base error for hookbuttons."""


class ConfigLoadError(HookButtonsError):
    """Raised when the configuration file cannot be read."""


class ConfigValidationError(HookButtonsError):
    """Raised when configuration does not conform to schema or semantics."""


class RouteCollisionError(ConfigValidationError):
    """Raised when two configured button names normalize to the same path."""


class AccessoryStoreError(HookButtonsError):
    """Raised when the persisted accessory cache cannot be read or written."""


class RequestValidationError(HookButtonsError):
    """Raised when an inbound event request violates one or more constraints."""

    def __init__(self, violations: Sequence[Violation]) -> None:
        super().__init__(f"{len(violations)} validation error(s)")
        self.violations = tuple(violations)


class UnknownRouteError(HookButtonsError):
    """Raised when a request path does not belong to any configured button."""


class HandlerMissingError(HookButtonsError):
    """Raised when a route resolves to a record without an in-memory handler."""


class ListenerError(HookButtonsError):
    """Raised when the HTTP listener cannot bind or serve."""
