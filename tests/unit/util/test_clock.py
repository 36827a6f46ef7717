"""Unit tests for the clocks."""

from datetime import datetime, timezone

import pytest

from coachlink.util.clock import Clock, FrozenClock, SystemClock


def test_clock_is_abstract():
    with pytest.raises(TypeError):
        Clock()


def test_system_clock_is_utc():
    assert SystemClock().now().tzinfo == timezone.utc


def test_frozen_clock_moves_only_when_told():
    start = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)
    clock = FrozenClock(start)

    assert clock.now() == start
    assert clock.advance(days=1, hours=2) == datetime(2025, 3, 2, 10, 0, tzinfo=timezone.utc)
    clock.set(start)
    assert clock.now() == start
