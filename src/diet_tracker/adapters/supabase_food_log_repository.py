"""Supabase repository for food logs."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from supabase import Client

from diet_tracker.domain.food_logs import (
    FoodLogDraft,
    FoodLogEntry,
    FoodUnit,
    MealType,
    NutritionSource,
)
from diet_tracker.services.food_logs import FoodLogRepository

_COLUMNS = (
    "id, user_id, logged_at, meal_type, food_name, quantity, unit, calories, "
    "protein_g, carbs_g, fat_g, notes, nutrition_source"
)


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation for food logs."""

    client: Client

    def create_log(
        self, user_id: UUID, draft: FoodLogDraft, source: NutritionSource
    ) -> FoodLogEntry:
        """Insert a food log row."""
        response = (
            self.client.table("food_logs")
            .insert(
                {
                    "user_id": str(user_id),
                    "logged_at": draft.logged_at.isoformat(),
                    "meal_type": draft.meal_type.value,
                    "food_name": draft.food_name,
                    "quantity": draft.quantity,
                    "unit": draft.unit.value,
                    "calories": draft.calories,
                    "protein_g": draft.protein_g,
                    "carbs_g": draft.carbs_g,
                    "fat_g": draft.fat_g,
                    "notes": draft.notes,
                    "nutrition_source": source.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log")
        return _parse_log(response.data[0])

    def get_log(self, log_id: UUID) -> FoodLogEntry | None:
        """Return a food log by id."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("id", str(log_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_log(response.data[0])

    def list_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        meal_type: MealType | None = None,
    ) -> list[FoodLogEntry]:
        """Return food logs in a time range, newest first."""
        query = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if start is not None:
            query = query.gte("logged_at", start.isoformat())
        if end is not None:
            query = query.lt("logged_at", end.isoformat())
        if meal_type is not None:
            query = query.eq("meal_type", meal_type.value)
        response = query.order("logged_at", desc=True).execute()
        return [_parse_log(row) for row in response.data or []]

    def update_log(self, log_id: UUID, changes: dict[str, object]) -> FoodLogEntry:
        """Update the given columns of a food log."""
        payload = {name: _column_value(value) for name, value in changes.items()}
        response = (
            self.client.table("food_logs")
            .update(payload)
            .eq("id", str(log_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update food log")
        return _parse_log(response.data[0])

    def delete_log(self, log_id: UUID) -> None:
        """Delete a food log row."""
        self.client.table("food_logs").delete().eq("id", str(log_id)).execute()


def _column_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _parse_log(row: dict[str, object]) -> FoodLogEntry:
    return FoodLogEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        logged_at=datetime.fromisoformat(row["logged_at"]),
        meal_type=MealType(row["meal_type"]),
        food_name=str(row.get("food_name", "")),
        quantity=float(row.get("quantity") or 0.0),
        unit=FoodUnit(row.get("unit") or FoodUnit.GRAMS),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        notes=row.get("notes"),
        nutrition_source=NutritionSource(row.get("nutrition_source") or "none"),
    )
