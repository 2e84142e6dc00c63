"""Raw event token to press-event classification."""

from __future__ import annotations

from typing import Any

from hookbuttons.core.model import PressEvent

_TOKEN_EVENTS: dict[str, PressEvent] = {
    "click": PressEvent.SINGLE_PRESS,
    "double-click": PressEvent.DOUBLE_PRESS,
    "hold": PressEvent.LONG_PRESS,
    "single-press": PressEvent.SINGLE_PRESS,
    "double-press": PressEvent.DOUBLE_PRESS,
    "long-press": PressEvent.LONG_PRESS,
}

VALID_EVENTS: tuple[str, ...] = tuple(_TOKEN_EVENTS)


def classify(token: Any) -> PressEvent | None:
    if not isinstance(token, str):
        return None
    return _TOKEN_EVENTS.get(token)
