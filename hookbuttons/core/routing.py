"""Per-button routes and request dispatch."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from http import HTTPStatus
from types import MappingProxyType
from typing import Any

from hookbuttons.core.device import ButtonDevice
from hookbuttons.core.errors import (
    HandlerMissingError,
    RequestValidationError,
    RouteCollisionError,
    UnknownRouteError,
)
from hookbuttons.core.identity import generate_uuid
from hookbuttons.core.model import InboundRequest, Route, RouteResponse
from hookbuttons.core.registry import DeviceRegistry
from hookbuttons.core.validation import validate_event_request

ROUTE_PREFIX = "/button-"
_PATH_UNSAFE_RE = re.compile(r"[^a-z0-9]")
LOGGER = logging.getLogger(__name__)


def button_path(name: str) -> str:
    return ROUTE_PREFIX + _PATH_UNSAFE_RE.sub("-", name.lower())


def build_route_table(
    names: Sequence[str],
    *,
    uuid_fn: Callable[[str], str] = generate_uuid,
) -> Mapping[str, Route]:
    """Build the immutable path -> route mapping for the configured buttons.

    Repeated names share one route. Distinct names that normalize to the same
    path raise `RouteCollisionError`.
    """
    routes: dict[str, Route] = {}
    for name in names:
        path = button_path(name)
        existing = routes.get(path)
        if existing is not None:
            if existing.name == name:
                continue
            raise RouteCollisionError(
                f"Buttons '{existing.name}' and '{name}' both map to {path}. Rename one of them."
            )
        routes[path] = Route(path=path, name=name, uuid=uuid_fn(name))
    return MappingProxyType(routes)


def _normalize_request_path(path: str) -> str:
    normalized = path.lower()
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]
    return normalized


def _text(status: HTTPStatus, text: str) -> RouteResponse:
    return RouteResponse(status=int(status), body=text.encode("utf-8"))


def _json(status: HTTPStatus, payload: Any) -> RouteResponse:
    return RouteResponse(
        status=int(status),
        body=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
        content_type="application/json; charset=utf-8",
    )


class ButtonRouter:
    """Maps inbound requests onto registry devices.

    The route table is fixed at construction. Handling a new set of buttons
    means reconciling the registry again and building a new router.
    """

    def __init__(self, registry: DeviceRegistry, routes: Mapping[str, Route]) -> None:
        self._registry = registry
        self._routes = routes
        for route in routes.values():
            LOGGER.info("The Event URI for %s is: %s", route.name, route.path)

    @property
    def routes(self) -> Mapping[str, Route]:
        return self._routes

    def match(self, path: str) -> Route:
        route = self._routes.get(_normalize_request_path(path))
        if route is None:
            raise UnknownRouteError(f"No button is configured for path {path}")
        return route

    def device_for(self, route: Route) -> ButtonDevice:
        if self._registry.record(route.uuid) is None:
            raise UnknownRouteError(f"Accessory not found for button: {route.name}")
        device = self._registry.lookup(route.uuid)
        if device is None:
            raise HandlerMissingError(f"Button accessory handler not found for: {route.name}")
        return device

    def dispatch(self, request: InboundRequest) -> RouteResponse:
        try:
            return self._dispatch(request)
        except Exception:
            LOGGER.exception("Unhandled error while processing %s %s", request.method, request.path)
            return _text(HTTPStatus.INTERNAL_SERVER_ERROR, "Server error.")

    def _dispatch(self, request: InboundRequest) -> RouteResponse:
        try:
            route = self.match(request.path)
        except UnknownRouteError:
            LOGGER.warning("Received event for unconfigured Button path: %s", request.path)
            return _text(HTTPStatus.NOT_FOUND, "Button not found.")

        try:
            validated = validate_event_request(request)
        except RequestValidationError as exc:
            LOGGER.debug("Rejected event for %s: %s", route.name, exc)
            return _json(
                HTTPStatus.UNPROCESSABLE_ENTITY,
                {"errors": [violation.to_dict() for violation in exc.violations]},
            )

        try:
            device = self.device_for(route)
        except UnknownRouteError as exc:
            LOGGER.error("%s", exc)
            return _text(HTTPStatus.NOT_FOUND, "Button not found.")
        except HandlerMissingError as exc:
            LOGGER.error("%s", exc)
            return _text(HTTPStatus.INTERNAL_SERVER_ERROR, "Server error.")

        LOGGER.info("Triggering %s event for button: %s", validated.event, route.name)
        device.trigger(validated.event, validated.battery_level)
        return _text(HTTPStatus.OK, "OK")
