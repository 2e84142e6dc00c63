from __future__ import annotations

import math

import pytest

from hookbuttons.core.battery import LOW_BATTERY_THRESHOLD, BatteryState


def test_initial_state_is_full() -> None:
    state = BatteryState()
    assert state.current_level() == 100
    assert state.current_is_low() is False


@pytest.mark.parametrize(
    ("raw", "level", "is_low"),
    [
        (-5, 0, True),
        (0, 0, True),
        (15, 15, False),
        (14, 14, True),
        (100, 100, False),
        (150, 100, False),
    ],
)
def test_update_clamps_and_derives_low_battery(raw: int, level: int, is_low: bool) -> None:
    state = BatteryState()
    assert state.update(raw) == (level, is_low)
    assert state.current_level() == level
    assert state.current_is_low() is is_low


def test_update_truncates_toward_zero() -> None:
    state = BatteryState()
    assert state.update(14.9) == (14, True)
    assert state.update(-0.7) == (0, True)
    assert state.update(99.99) == (99, False)


def test_threshold_is_fifteen() -> None:
    assert LOW_BATTERY_THRESHOLD == 15


def test_non_finite_level_is_rejected_and_state_kept() -> None:
    state = BatteryState()
    state.update(40)
    with pytest.raises(ValueError):
        state.update(math.nan)
    with pytest.raises(ValueError):
        state.update(math.inf)
    assert state.current_level() == 40
