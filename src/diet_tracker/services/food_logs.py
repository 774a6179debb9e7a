"""Food logging service and daily summaries."""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from diet_tracker.domain.errors import NotAuthorized, NotFound
from diet_tracker.domain.food_logs import (
    FoodLogDraft,
    FoodLogEntry,
    MealType,
    NutritionSource,
    NutritionSummary,
)
from diet_tracker.domain.nutrition import ZERO_MACROS, MacroAmounts
from diet_tracker.services.estimation import NutritionEstimator
from diet_tracker.services.notifications import (
    FOOD_LOG_CREATED,
    NUTRITION_CALCULATED,
    NUTRITION_CALCULATING,
    NUTRITION_CALCULATION_FAILED,
    Notifier,
)
from diet_tracker.services.users import UserRepository

_logger = logging.getLogger(__name__)

_NUTRIENT_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g")
_UPDATABLE_FIELDS = {
    "meal_type",
    "food_name",
    "quantity",
    "unit",
    "notes",
    "logged_at",
    *_NUTRIENT_FIELDS,
}


class FoodLogRepository(Protocol):
    """Persistence interface for food logs."""

    def create_log(
        self, user_id: UUID, draft: FoodLogDraft, source: NutritionSource
    ) -> FoodLogEntry:
        """Insert a completed food log and return it."""

    def get_log(self, log_id: UUID) -> FoodLogEntry | None:
        """Return a food log by id, if present."""

    def list_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        meal_type: MealType | None = None,
    ) -> list[FoodLogEntry]:
        """Return logs in [start, end), newest first."""

    def update_log(self, log_id: UUID, changes: dict[str, object]) -> FoodLogEntry:
        """Write the given fields and return the log."""

    def delete_log(self, log_id: UUID) -> None:
        """Remove a food log."""


@dataclass
class FoodLogService:
    """Records eaten food and summarizes it against the user's goals."""

    repository: FoodLogRepository
    users: UserRepository
    estimator: NutritionEstimator
    notifier: Notifier
    default_timezone: str = "UTC"

    async def log_food(self, user_id: UUID, draft: FoodLogDraft) -> FoodLogEntry:
        """Store a food log, estimating any nutrition values not given."""
        missing = draft.missing_nutrients()
        source = NutritionSource.USER
        estimated = False
        if missing:
            base_payload = {"userId": str(user_id), "foodName": draft.food_name}
            await self.notifier.emit(NUTRITION_CALCULATING, base_payload)
            estimate = await self.estimator.estimate(
                draft.food_name, draft.quantity, draft.unit
            )
            if estimate is None:
                filled = ZERO_MACROS
                source = NutritionSource.NONE
            else:
                filled = estimate.macros
                source = estimate.source
                estimated = True
            draft = dataclasses.replace(
                draft, **{name: getattr(filled, name) for name in missing}
            )

        if draft.logged_at is None:
            draft = dataclasses.replace(draft, logged_at=datetime.now(tz=UTC))
        entry = self.repository.create_log(user_id, draft, source)
        _logger.info(
            "Logged food %s for user %s (nutrition source=%s)",
            entry.id,
            user_id,
            source,
        )

        payload = {
            "userId": str(user_id),
            "foodLogId": str(entry.id),
            "foodName": entry.food_name,
        }
        if missing:
            event = NUTRITION_CALCULATED if estimated else NUTRITION_CALCULATION_FAILED
            await self.notifier.emit(event, payload)
        await self.notifier.emit(FOOD_LOG_CREATED, payload)
        return entry

    def list_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        meal_type: MealType | None = None,
    ) -> list[FoodLogEntry]:
        return self.repository.list_logs(user_id, start, end, meal_type)

    def get_log(self, user_id: UUID, log_id: UUID) -> FoodLogEntry:
        """Return a log owned by the user."""
        entry = self.repository.get_log(log_id)
        if entry is None:
            raise NotFound("Food log not found")
        if entry.user_id != user_id:
            raise NotAuthorized("Not authorized to access this food log")
        return entry

    def update_log(
        self, user_id: UUID, log_id: UUID, changes: dict[str, object]
    ) -> FoodLogEntry:
        """Write only the provided fields."""
        entry = self.get_log(user_id, log_id)
        updates = {
            name: value
            for name, value in changes.items()
            if name in _UPDATABLE_FIELDS and value is not None
        }
        if any(name in updates for name in _NUTRIENT_FIELDS):
            updates["nutrition_source"] = NutritionSource.USER
        if not updates:
            return entry
        return self.repository.update_log(log_id, updates)

    def delete_log(self, user_id: UUID, log_id: UUID) -> None:
        self.get_log(user_id, log_id)
        self.repository.delete_log(log_id)

    def today(
        self, user_id: UUID, timezone_name: str | None = None
    ) -> list[FoodLogEntry]:
        """Return the entries of the current day in the user's timezone."""
        tz = ZoneInfo(timezone_name or self.default_timezone)
        return self._logs_for_day(user_id, datetime.now(tz=tz).date(), tz)

    def nutrition_summary(
        self,
        user_id: UUID,
        day: date | None = None,
        timezone_name: str | None = None,
    ) -> NutritionSummary:
        """Aggregate a day's logs and compare them to the user's goals."""
        user = self.users.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        tz = ZoneInfo(timezone_name or self.default_timezone)
        target_day = day or datetime.now(tz=tz).date()
        logs = self._logs_for_day(user_id, target_day, tz)

        totals = ZERO_MACROS
        by_meal_type = {meal_type: ZERO_MACROS for meal_type in MealType}
        for log in logs:
            totals = totals + log.macros
            by_meal_type[log.meal_type] = by_meal_type[log.meal_type] + log.macros

        goals = user.profile.daily_nutrition_goals
        remaining = MacroAmounts(
            calories=round(goals.calories - totals.calories, 1),
            protein_g=round(goals.protein_g - totals.protein_g, 1),
            carbs_g=round(goals.carbs_g - totals.carbs_g, 1),
            fat_g=round(goals.fat_g - totals.fat_g, 1),
        )
        return NutritionSummary(
            day=target_day,
            entry_count=len(logs),
            totals=totals,
            goals=goals,
            remaining=remaining,
            by_meal_type=by_meal_type,
        )

    def _logs_for_day(
        self, user_id: UUID, day: date, tz: ZoneInfo
    ) -> list[FoodLogEntry]:
        start = datetime(day.year, day.month, day.day, tzinfo=tz)
        end = start + timedelta(days=1)
        logs = self.repository.list_logs(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return [log for log in logs if log.logged_at.astimezone(tz).date() == day]
