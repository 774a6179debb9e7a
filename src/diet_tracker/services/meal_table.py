"""Deterministic fallback meal plans built from a static meal table."""

import json
from collections.abc import Sequence
from dataclasses import dataclass
from functools import cache
from pathlib import Path

from diet_tracker.domain.diet_plans import (
    WEEK_DAYS,
    DayMeals,
    DayPlan,
    DietPlanContent,
    Meal,
)
from diet_tracker.domain.profile import UserProfile

DEFAULT_DIET = "balanced"
MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")
FALLBACK_PLAN_TITLE = "7-Day Balanced Diet Plan"

_TABLE_PATH = Path(__file__).resolve().parents[1] / "data" / "meal_options.json"

MealCandidates = dict[str, list[Meal]]


@dataclass(frozen=True)
class MealTable:
    """Candidate meals keyed by diet type, plus regional overrides."""

    base: dict[str, MealCandidates]
    regional: dict[tuple[str, str], MealCandidates]

    def candidates(
        self, diet_key: str, regional_cuisines: Sequence[str] = ()
    ) -> MealCandidates:
        """Return the candidate meals for a diet, applying the primary region."""
        meals = dict(self.base.get(diet_key) or self.base[DEFAULT_DIET])
        if regional_cuisines:
            override = self.regional.get((regional_cuisines[0], diet_key))
            if override:
                meals.update(override)
        return meals


def _parse_candidates(raw: dict[str, list[dict[str, object]]]) -> MealCandidates:
    return {
        slot: [Meal.model_validate(item) for item in raw[slot]]
        for slot in MEAL_SLOTS
        if slot in raw
    }


@cache
def load_meal_table(path: Path = _TABLE_PATH) -> MealTable:
    """Load and validate the meal table once per process."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    base = {diet: _parse_candidates(slots) for diet, slots in payload["base"].items()}
    regional = {
        (region, diet): _parse_candidates(slots)
        for region, diets in payload.get("regional", {}).items()
        for diet, slots in diets.items()
    }
    return MealTable(base=base, regional=regional)


def resolve_diet_key(
    diet_type: Sequence[str] | str | None, dietary_preference: str | None = None
) -> str:
    """Pick the diet used for table lookups."""
    if isinstance(diet_type, str):
        diet_type = [diet_type]
    for value in diet_type or ():
        if value:
            return str(value)
    if dietary_preference:
        return str(dietary_preference)
    return DEFAULT_DIET


def fallback_week(
    diet_type: Sequence[str] | str | None,
    regional_cuisines: Sequence[str] | None = None,
    *,
    dietary_preference: str | None = None,
    table: MealTable | None = None,
) -> list[DayPlan]:
    """Build Monday..Sunday by alternating the two candidates of each meal."""
    resolved_table = table or load_meal_table()
    diet_key = resolve_diet_key(diet_type, dietary_preference)
    meals = resolved_table.candidates(diet_key, list(regional_cuisines or ()))
    days = []
    for index, day_name in enumerate(WEEK_DAYS):
        choice = index % 2
        days.append(
            DayPlan(
                day_name=day_name,
                meals=DayMeals(
                    breakfast=meals["breakfast"][choice],
                    lunch=meals["lunch"][choice],
                    dinner=meals["dinner"][choice],
                    snacks=[meals["snacks"][choice]],
                ),
            )
        )
    return days


def fallback_diet_plan(profile: UserProfile) -> DietPlanContent:
    """Return the deterministic plan used when generation fails."""
    preference = (
        ", ".join(profile.diet_type) or profile.dietary_preference or DEFAULT_DIET
    )
    return DietPlanContent(
        title=FALLBACK_PLAN_TITLE,
        description=f"Personalized diet plan for {preference} preference",
        days=fallback_week(
            profile.diet_type,
            profile.regional_cuisines,
            dietary_preference=profile.dietary_preference,
        ),
    )
