"""Diet plan models."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from diet_tracker.domain.nutrition import WholeAmount

WEEK_DAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

DEFAULT_PLAN_TITLE = "7-Day Diet Plan"


class Meal(BaseModel):
    """Single meal with its nutrition values."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    description: str = ""
    calories: WholeAmount = 0
    protein_g: WholeAmount = Field(
        default=0, validation_alias=AliasChoices("protein_g", "protein")
    )
    carbs_g: WholeAmount = Field(
        default=0, validation_alias=AliasChoices("carbs_g", "carbs")
    )
    fat_g: WholeAmount = Field(default=0, validation_alias=AliasChoices("fat_g", "fat"))


class DayMeals(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    breakfast: Meal
    lunch: Meal
    dinner: Meal
    snacks: list[Meal] = Field(default_factory=list)


class DayPlan(BaseModel):
    """Meals for one day of the week."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    day_name: str = Field(
        min_length=1, validation_alias=AliasChoices("day_name", "day")
    )
    meals: DayMeals


class DietPlanContent(BaseModel):
    """Title, description and days of a diet plan."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = DEFAULT_PLAN_TITLE
    description: str = ""
    days: list[DayPlan] = Field(default_factory=list)


class GeneratedDietPlan(DietPlanContent):
    """Diet plan as returned by the generative text service."""

    days: list[DayPlan] = Field(min_length=len(WEEK_DAYS), max_length=len(WEEK_DAYS))


@dataclass(frozen=True)
class DietPlanRecord:
    """Stored diet plan."""

    id: UUID
    user_id: UUID
    title: str
    description: str
    days: list[DayPlan]
    source: str
    created_at: datetime
    updated_at: datetime

    def to_content(self) -> DietPlanContent:
        return DietPlanContent(
            title=self.title, description=self.description, days=self.days
        )
