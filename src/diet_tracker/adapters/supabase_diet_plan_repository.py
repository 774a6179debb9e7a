"""Supabase repository for diet plans."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from diet_tracker.domain.diet_plans import DayPlan, DietPlanContent, DietPlanRecord
from diet_tracker.services.diet_plans import DietPlanRepository

_COLUMNS = "id, user_id, title, description, days, source, created_at, updated_at"


@dataclass
class SupabaseDietPlanRepository(DietPlanRepository):
    """Supabase implementation for diet plans."""

    client: Client

    def list_plans(self, user_id: UUID) -> list[DietPlanRecord]:
        """Return a user's plans, most recently updated first."""
        response = (
            self.client.table("diet_plans")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("updated_at", desc=True)
            .execute()
        )
        return [_parse_plan(row) for row in response.data or []]

    def get_plan(self, plan_id: UUID) -> DietPlanRecord | None:
        """Return a plan by id."""
        response = (
            self.client.table("diet_plans")
            .select(_COLUMNS)
            .eq("id", str(plan_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_plan(response.data[0])

    def create_plan(
        self, user_id: UUID, content: DietPlanContent, source: str
    ) -> DietPlanRecord:
        """Insert a plan row."""
        response = (
            self.client.table("diet_plans")
            .insert(
                {"user_id": str(user_id), "source": source, **_content_row(content)}
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create diet plan")
        return _parse_plan(response.data[0])

    def update_plan(
        self, plan_id: UUID, content: DietPlanContent, source: str
    ) -> DietPlanRecord:
        """Overwrite a plan row."""
        response = (
            self.client.table("diet_plans")
            .update(
                {
                    "source": source,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                    **_content_row(content),
                }
            )
            .eq("id", str(plan_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update diet plan")
        return _parse_plan(response.data[0])

    def delete_plan(self, plan_id: UUID) -> None:
        """Delete a plan row."""
        self.client.table("diet_plans").delete().eq("id", str(plan_id)).execute()


def _content_row(content: DietPlanContent) -> dict[str, object]:
    return {
        "title": content.title,
        "description": content.description,
        "days": [day.model_dump(mode="json") for day in content.days],
    }


def _parse_plan(row: dict[str, object]) -> DietPlanRecord:
    return DietPlanRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        days=[DayPlan.model_validate(day) for day in row.get("days") or []],
        source=str(row.get("source") or ""),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )
