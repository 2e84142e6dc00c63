"""Battery level holder with clamping and low-battery derivation."""

from __future__ import annotations

import math

LOW_BATTERY_THRESHOLD = 15
_MIN_LEVEL = 0
_MAX_LEVEL = 100


class BatteryState:
    """Last reported battery level for one button.

    Not thread-safe on its own; the owning device serializes access.
    """

    def __init__(self, level: int = _MAX_LEVEL) -> None:
        self._level = level

    def update(self, raw_level: float) -> tuple[int, bool]:
        """Store `raw_level` truncated toward zero and clamped into [0, 100].

        Returns the stored level and whether it counts as low battery.
        """
        if not math.isfinite(raw_level):
            raise ValueError(f"Battery level must be a finite number, got {raw_level!r}")
        level = max(_MIN_LEVEL, min(_MAX_LEVEL, math.trunc(raw_level)))
        self._level = level
        return level, _is_low(level)

    def current_level(self) -> int:
        return self._level

    def current_is_low(self) -> bool:
        return _is_low(self._level)


def _is_low(level: int) -> bool:
    return level < LOW_BATTERY_THRESHOLD
