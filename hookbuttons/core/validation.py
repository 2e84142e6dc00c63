"""Validation of inbound button event requests."""

from __future__ import annotations

import re
from typing import Any

from hookbuttons.core.classifier import VALID_EVENTS
from hookbuttons.core.errors import RequestValidationError
from hookbuttons.core.model import InboundRequest, ValidatedEvent, Violation

EVENT_FIELD = "event"
BATTERY_HEADER = "button-battery-level"
# The first source carrying an event field is authoritative; sources are never merged.
EVENT_SOURCES: tuple[str, ...] = ("query", "body", "header")

_INT_RE = re.compile(r"^[+-]?\d+$")
_MIN_BATTERY = 0
_MAX_BATTERY = 100


def _source_params(request: InboundRequest, location: str) -> dict[str, Any]:
    if location == "query":
        return request.query
    if location == "body":
        return request.body
    if location == "header":
        return request.headers
    raise ValueError(f"Unknown parameter source '{location}'")


def resolve_event(request: InboundRequest) -> tuple[str, Any] | None:
    """Return `(location, raw value)` of the event field from the first source carrying it."""
    for location in EVENT_SOURCES:
        params = _source_params(request, location)
        if EVENT_FIELD in params:
            return location, params[EVENT_FIELD]
    return None


def parse_battery_level(value: str) -> int | None:
    text = value.strip()
    if not _INT_RE.match(text):
        return None
    level = int(text)
    if level < _MIN_BATTERY or level > _MAX_BATTERY:
        return None
    return level


def validate_event_request(request: InboundRequest) -> ValidatedEvent:
    """Check event and battery parameters, collecting every violation before failing."""
    violations: list[Violation] = []

    if request.body_error:
        violations.append(Violation(msg=request.body_error, path="", location="body"))

    event: str | None = None
    source = ""
    resolved = resolve_event(request)
    if resolved is None:
        violations.append(
            Violation(
                type="alternative",
                msg=f"Missing '{EVENT_FIELD}' in query string, body, or header",
                path=EVENT_FIELD,
                location=",".join(EVENT_SOURCES),
            )
        )
    else:
        source, value = resolved
        if isinstance(value, str) and value in VALID_EVENTS:
            event = value
        else:
            violations.append(
                Violation(
                    msg=f"Invalid value; expected one of: {', '.join(VALID_EVENTS)}",
                    path=EVENT_FIELD,
                    location=source,
                    value=value,
                )
            )

    battery_level: int | None = None
    raw_battery = request.headers.get(BATTERY_HEADER)
    if raw_battery is not None:
        battery_level = parse_battery_level(raw_battery)
        if battery_level is None:
            violations.append(
                Violation(
                    msg=f"Must be an integer between {_MIN_BATTERY} and {_MAX_BATTERY}",
                    path=BATTERY_HEADER,
                    location="header",
                    value=raw_battery,
                )
            )

    if violations or event is None:
        raise RequestValidationError(violations)
    return ValidatedEvent(event=event, source=source, battery_level=battery_level)
