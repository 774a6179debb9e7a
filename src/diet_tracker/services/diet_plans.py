"""Diet plan storage and ownership rules."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from diet_tracker.domain.diet_plans import (
    DEFAULT_PLAN_TITLE,
    DietPlanContent,
    DietPlanRecord,
)
from diet_tracker.domain.errors import NotAuthorized, NotFound

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"
SOURCE_USER = "user"


class DietPlanRepository(Protocol):
    """Persistence interface for diet plans."""

    def list_plans(self, user_id: UUID) -> list[DietPlanRecord]:
        """Return a user's plans, most recently updated first."""

    def get_plan(self, plan_id: UUID) -> DietPlanRecord | None:
        """Return a plan by id, if present."""

    def create_plan(
        self, user_id: UUID, content: DietPlanContent, source: str
    ) -> DietPlanRecord:
        """Insert a plan and return it."""

    def update_plan(
        self, plan_id: UUID, content: DietPlanContent, source: str
    ) -> DietPlanRecord:
        """Overwrite a plan's content and bump its update time."""

    def delete_plan(self, plan_id: UUID) -> None:
        """Remove a plan."""


@dataclass
class DietPlanService:
    """Application service for manually managed diet plans."""

    repository: DietPlanRepository

    def list_plans(self, user_id: UUID) -> list[DietPlanRecord]:
        return self.repository.list_plans(user_id)

    def get_plan(self, user_id: UUID, plan_id: UUID) -> DietPlanRecord:
        """Return a plan owned by the user."""
        plan = self.repository.get_plan(plan_id)
        if plan is None:
            raise NotFound("Diet plan not found")
        if plan.user_id != user_id:
            raise NotAuthorized("Not authorized to access this diet plan")
        return plan

    def create_plan(self, user_id: UUID, content: DietPlanContent) -> DietPlanRecord:
        if not content.title.strip():
            content = content.model_copy(update={"title": DEFAULT_PLAN_TITLE})
        return self.repository.create_plan(user_id, content, SOURCE_USER)

    def update_plan(
        self, user_id: UUID, plan_id: UUID, changes: dict[str, object]
    ) -> DietPlanRecord:
        """Replace only the provided title, description or days."""
        plan = self.get_plan(user_id, plan_id)
        current = plan.to_content().model_dump(by_alias=False)
        for name in ("title", "description", "days"):
            value = changes.get(name)
            if value is not None:
                current[name] = value
        content = DietPlanContent.model_validate(current)
        return self.repository.update_plan(plan_id, content, plan.source)

    def delete_plan(self, user_id: UUID, plan_id: UUID) -> None:
        self.get_plan(user_id, plan_id)
        self.repository.delete_plan(plan_id)
