"""Nutrition goal and diet plan generation with deterministic fallbacks."""

import logging
from dataclasses import dataclass
from uuid import UUID

from diet_tracker.domain.diet_plans import (
    DietPlanContent,
    DietPlanRecord,
    GeneratedDietPlan,
)
from diet_tracker.domain.errors import (
    ExternalServiceFailure,
    NotFound,
    ProfileIncomplete,
    ResponseParseFailure,
)
from diet_tracker.domain.profile import (
    GeneratedNutritionGoals,
    NutritionGoals,
    UserRecord,
)
from diet_tracker.services.ai import StructuredGenerator
from diet_tracker.services.diet_plans import (
    SOURCE_AI,
    SOURCE_FALLBACK,
    DietPlanRepository,
)
from diet_tracker.services.energy import fallback_nutrition_goals
from diet_tracker.services.meal_table import fallback_diet_plan
from diet_tracker.services.notifications import (
    DIET_PLAN_CREATED,
    DIET_PLAN_UPDATED,
    NUTRITION_GOALS_UPDATED,
    Notifier,
)
from diet_tracker.services.prompts import (
    build_diet_plan_prompt,
    build_nutrition_goals_prompt,
)
from diet_tracker.services.users import UserRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GoalsOutcome:
    """Saved goals and whether they came from the AI or the formula."""

    goals: NutritionGoals
    source: str


@dataclass
class PlanningService:
    """Orchestrates AI generation of goals and plans."""

    users: UserRepository
    diet_plans: DietPlanRepository
    generator: StructuredGenerator
    notifier: Notifier

    async def calculate_nutrition_goals(self, user_id: UUID) -> GoalsOutcome:
        """Compute, store and announce the user's daily goals."""
        user = self._load_user(user_id)
        missing = user.profile.missing_body_metrics()
        if missing:
            raise ProfileIncomplete(missing)

        prompt = build_nutrition_goals_prompt(user.profile)
        try:
            generated = await self.generator.generate(
                prompt, GeneratedNutritionGoals
            )
            goals = generated.to_goals()
            source = SOURCE_AI
        except (ExternalServiceFailure, ResponseParseFailure) as exc:
            _logger.warning(
                "Nutrition goal generation failed for user %s, using formula: %s",
                user_id,
                exc,
            )
            goals = fallback_nutrition_goals(user.profile)
            source = SOURCE_FALLBACK

        self.users.update_nutrition_goals(user_id, goals)
        await self.notifier.emit(
            NUTRITION_GOALS_UPDATED,
            {"userId": str(user_id), "dailyNutritionGoals": _goals_payload(goals)},
        )
        return GoalsOutcome(goals=goals, source=source)

    async def generate_diet_plan(
        self, user_id: UUID, *, refresh_goals: bool = False
    ) -> DietPlanRecord:
        """Generate a weekly plan and store it as the user's active plan."""
        user = self._load_user(user_id)
        missing = user.profile.missing_plan_fields()
        if missing:
            raise ProfileIncomplete(missing)

        goals = user.profile.daily_nutrition_goals
        if refresh_goals:
            goals = (await self.calculate_nutrition_goals(user_id)).goals

        prompt = build_diet_plan_prompt(user.profile, goals)
        content: DietPlanContent
        try:
            content = await self.generator.generate(prompt, GeneratedDietPlan)
            source = SOURCE_AI
        except (ExternalServiceFailure, ResponseParseFailure) as exc:
            _logger.warning(
                "Diet plan generation failed for user %s, using meal table: %s",
                user_id,
                exc,
            )
            content = fallback_diet_plan(user.profile)
            source = SOURCE_FALLBACK

        existing = self.diet_plans.list_plans(user_id)
        if existing:
            plan = self.diet_plans.update_plan(existing[0].id, content, source)
            event = DIET_PLAN_UPDATED
        else:
            plan = self.diet_plans.create_plan(user_id, content, source)
            event = DIET_PLAN_CREATED
        _logger.info("Stored %s diet plan %s for user %s", source, plan.id, user_id)
        await self.notifier.emit(
            event, {"userId": str(user_id), "dietPlanId": str(plan.id)}
        )
        return plan

    def _load_user(self, user_id: UUID) -> UserRecord:
        user = self.users.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        return user


def _goals_payload(goals: NutritionGoals) -> dict[str, int]:
    return {
        "calories": int(goals.calories),
        "protein": int(goals.protein_g),
        "carbs": int(goals.carbs_g),
        "fat": int(goals.fat_g),
    }
