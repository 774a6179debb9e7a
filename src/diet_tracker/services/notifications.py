"""Event notifications for connected clients."""

import logging
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

_logger = logging.getLogger(__name__)

DIET_PLAN_CREATED = "diet-plan-created"
DIET_PLAN_UPDATED = "diet-plan-updated"
NUTRITION_GOALS_UPDATED = "nutrition-goals-updated"
FOOD_LOG_CREATED = "food-log-created"
NUTRITION_CALCULATING = "nutrition-calculating"
NUTRITION_CALCULATED = "nutrition-calculated"
NUTRITION_CALCULATION_FAILED = "nutrition-calculation-failed"

FIELD_UPDATE_EVENTS: dict[str, str] = {
    NUTRITION_GOALS_UPDATED: "daily_nutrition_goals",
    DIET_PLAN_UPDATED: "diet_plan",
}


class Notifier(Protocol):
    """Interface used by services to announce changes."""

    async def emit(self, event: str, payload: dict[str, object]) -> bool:
        """Emit an event; returns whether it was handed to the transport."""


class EventSink(Protocol):
    """Transport that delivers events to a user's listeners."""

    async def publish(
        self, user_id: str, event: str, payload: dict[str, object]
    ) -> None:
        """Deliver an event to listeners of a user."""


@dataclass
class RateLimitedNotifier:
    """Notifier that throttles repeated field updates per user and field."""

    sink: EventSink
    min_interval_seconds: float = 30.0
    clock: Callable[[], float] = time.monotonic
    field_events: Mapping[str, str] = field(
        default_factory=lambda: dict(FIELD_UPDATE_EVENTS)
    )
    _last_emitted: dict[tuple[str, str], float] = field(
        default_factory=dict, init=False, repr=False
    )
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    async def emit(self, event: str, payload: dict[str, object]) -> bool:
        """Deliver an event unless the same field was emitted too recently."""
        user_id = str(payload.get("userId", ""))
        field_name = self.field_events.get(event)
        if field_name is not None and not self._acquire_slot(user_id, field_name):
            _logger.info(
                "Suppressed %s for user=%s field=%s", event, user_id, field_name
            )
            return False
        try:
            await self.sink.publish(user_id, event, payload)
        except Exception:
            _logger.exception("Failed to deliver %s for user=%s", event, user_id)
        return True

    def _acquire_slot(self, user_id: str, field_name: str) -> bool:
        """Check and update the last emission time as one step."""
        key = (user_id, field_name)
        with self._lock:
            now = self.clock()
            last = self._last_emitted.get(key)
            if last is not None and now - last < self.min_interval_seconds:
                return False
            self._prune(now)
            self._last_emitted[key] = now
            return True

    def _prune(self, now: float) -> None:
        expired = [
            key
            for key, last in self._last_emitted.items()
            if now - last >= self.min_interval_seconds
        ]
        for key in expired:
            del self._last_emitted[key]
