"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from supabase import Client

from diet_tracker.domain.profile import (
    ActivityLevel,
    Gender,
    NutritionGoals,
    UserProfile,
    UserRecord,
)
from diet_tracker.services.users import UserRepository

_GOAL_COLUMNS = {
    "calories": "daily_calories",
    "protein_g": "daily_protein_g",
    "carbs_g": "daily_carbs_g",
    "fat_g": "daily_fat_g",
}


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""
        response = (
            self.client.table("users")
            .select("*")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return a user by email, if present."""
        response = (
            self.client.table("users").select("*").eq("email", email).limit(1).execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert({"name": name, "email": email, "password_hash": password_hash})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def update_user(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Write account or profile fields and return the updated user."""
        payload = {name: _column_value(value) for name, value in changes.items()}
        response = (
            self.client.table("users").update(payload).eq("id", str(user_id)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user in Supabase")
        return _parse_user(response.data[0])

    def update_nutrition_goals(self, user_id: UUID, goals: NutritionGoals) -> None:
        """Write all four goal columns in one update."""
        self.client.table("users").update(
            {
                column: int(getattr(goals, name))
                for name, column in _GOAL_COLUMNS.items()
            }
        ).eq("id", str(user_id)).execute()


def _column_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple | list):
        return [_column_value(item) for item in value]
    return value


def _parse_user(row: dict[str, object]) -> UserRecord:
    goal_values = {
        name: row[column]
        for name, column in _GOAL_COLUMNS.items()
        if row.get(column) is not None
    }
    profile = UserProfile(
        age=row.get("age"),
        weight_kg=row.get("weight_kg"),
        height_cm=row.get("height_cm"),
        gender=Gender(row["gender"]) if row.get("gender") else None,
        activity_level=(
            ActivityLevel(row["activity_level"]) if row.get("activity_level") else None
        ),
        dietary_preference=row.get("dietary_preference"),
        diet_type=tuple(row.get("diet_type") or ()),
        regional_cuisines=tuple(row.get("regional_cuisines") or ()),
        allergies=tuple(row.get("allergies") or ()),
        goals=tuple(row.get("goals") or ()),
        daily_nutrition_goals=NutritionGoals.model_validate(goal_values),
    )
    created_at = row.get("created_at")
    return UserRecord(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        email=str(row["email"]),
        password_hash=str(row.get("password_hash", "")),
        profile=profile,
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )
