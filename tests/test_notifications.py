"""Tests for the rate limited notifier."""

import asyncio

from diet_tracker.services.notifications import (
    DIET_PLAN_UPDATED,
    FOOD_LOG_CREATED,
    NUTRITION_GOALS_UPDATED,
    RateLimitedNotifier,
)
from tests.conftest import FakeClock, RecordingSink


def test_field_updates_are_throttled_per_user_and_field(notifier, clock, sink) -> None:
    payload = {"userId": "user-1"}

    clock.now = 0
    assert asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, payload)) is True
    clock.now = 10
    assert asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, payload)) is False
    clock.now = 31
    assert asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, payload)) is True

    assert sink.names() == [NUTRITION_GOALS_UPDATED, NUTRITION_GOALS_UPDATED]


def test_suppressed_emission_does_not_extend_window(notifier, clock, sink) -> None:
    payload = {"userId": "user-1"}

    clock.now = 0
    asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, payload))
    clock.now = 29
    asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, payload))
    clock.now = 30

    assert asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, payload)) is True
    assert len(sink.events) == 2


def test_throttle_keys_are_independent(notifier, clock, sink) -> None:
    clock.now = 0
    asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, {"userId": "user-1"}))
    asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, {"userId": "user-2"}))
    asyncio.run(notifier.emit(DIET_PLAN_UPDATED, {"userId": "user-1"}))

    assert [user for user, _, _ in sink.events] == ["user-1", "user-2", "user-1"]


def test_other_events_are_not_throttled(notifier, clock, sink) -> None:
    clock.now = 0
    for _ in range(3):
        assert asyncio.run(notifier.emit(FOOD_LOG_CREATED, {"userId": "user-1"}))

    assert sink.names() == [FOOD_LOG_CREATED] * 3


def test_expired_throttle_entries_are_dropped(notifier, clock, sink) -> None:
    clock.now = 0
    asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, {"userId": "user-1"}))
    asyncio.run(notifier.emit(DIET_PLAN_UPDATED, {"userId": "user-2"}))
    clock.now = 40
    asyncio.run(notifier.emit(NUTRITION_GOALS_UPDATED, {"userId": "user-3"}))

    assert set(notifier._last_emitted) == {("user-3", "daily_nutrition_goals")}
    clock.now = 45
    assert asyncio.run(notifier.emit(DIET_PLAN_UPDATED, {"userId": "user-2"})) is True


def test_sink_failures_are_swallowed() -> None:
    class BrokenSink(RecordingSink):
        async def publish(
            self, user_id: str, event: str, payload: dict[str, object]
        ) -> None:
            raise ConnectionResetError("socket closed")

    notifier = RateLimitedNotifier(sink=BrokenSink(), clock=FakeClock())

    delivered = asyncio.run(notifier.emit(FOOD_LOG_CREATED, {"userId": "user-1"}))

    assert delivered is True
