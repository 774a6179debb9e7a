"""User account and body profile models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from diet_tracker.domain.nutrition import WholeAmount


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(StrEnum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"

    @classmethod
    def _missing_(cls, value: object) -> "ActivityLevel | None":
        if isinstance(value, str):
            normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class DietaryPreference(StrEnum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    NON_VEGETARIAN = "non-vegetarian"
    PESCATARIAN = "pescatarian"
    OTHER = "other"


class DietType(StrEnum):
    VEGETARIAN = "vegetarian"
    NON_VEGETARIAN = "non-vegetarian"
    VEGAN = "vegan"
    EGGETARIAN = "eggetarian"
    PESCATARIAN = "pescatarian"


class RegionalCuisine(StrEnum):
    NORTH_INDIAN = "north-indian"
    SOUTH_INDIAN = "south-indian"
    EAST_INDIAN = "east-indian"
    WEST_INDIAN = "west-indian"
    PUNJABI = "punjabi"
    GUJARATI = "gujarati"
    BENGALI = "bengali"
    MAHARASHTRIAN = "maharashtrian"
    TAMIL = "tamil"
    KERALA = "kerala"
    ANDHRA = "andhra"
    HYDERABADI = "hyderabadi"
    KASHMIRI = "kashmiri"
    INTERNATIONAL = "international"


class NutritionGoals(BaseModel):
    """Daily calorie and macronutrient targets."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    calories: WholeAmount = 2000
    protein_g: WholeAmount = Field(
        default=150, validation_alias=AliasChoices("protein_g", "protein")
    )
    carbs_g: WholeAmount = Field(
        default=250, validation_alias=AliasChoices("carbs_g", "carbs")
    )
    fat_g: WholeAmount = Field(
        default=65, validation_alias=AliasChoices("fat_g", "fat")
    )


DEFAULT_NUTRITION_GOALS = NutritionGoals()


class GeneratedNutritionGoals(BaseModel):
    """Structured output for generated goals; every target must be present."""

    model_config = ConfigDict(extra="ignore")

    calories: WholeAmount
    protein_g: WholeAmount = Field(
        validation_alias=AliasChoices("protein_g", "protein")
    )
    carbs_g: WholeAmount = Field(validation_alias=AliasChoices("carbs_g", "carbs"))
    fat_g: WholeAmount = Field(validation_alias=AliasChoices("fat_g", "fat"))

    def to_goals(self) -> NutritionGoals:
        return NutritionGoals(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


@dataclass(frozen=True)
class UserProfile:
    """Body metrics and dietary preferences used for planning."""

    age: int | None = None
    weight_kg: float | None = None
    height_cm: float | None = None
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None
    dietary_preference: str | None = None
    diet_type: tuple[str, ...] = ()
    regional_cuisines: tuple[str, ...] = ()
    allergies: tuple[str, ...] = ()
    goals: tuple[str, ...] = ()
    daily_nutrition_goals: NutritionGoals = field(
        default_factory=lambda: DEFAULT_NUTRITION_GOALS
    )

    def missing_body_metrics(self) -> list[str]:
        """Return the names of metrics required for goal calculation."""
        required = {
            "age": self.age,
            "weight": self.weight_kg,
            "height": self.height_cm,
            "gender": self.gender,
            "activity_level": self.activity_level,
        }
        return [name for name, value in required.items() if not value]

    def missing_plan_fields(self) -> list[str]:
        """Return the names of fields required for diet plan generation."""
        missing = self.missing_body_metrics()
        if not self.dietary_preference and not self.diet_type:
            missing.append("diet_type")
        return missing


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    name: str
    email: str
    password_hash: str
    profile: UserProfile = field(default_factory=UserProfile)
    created_at: datetime | None = None


def normalize_diet_types(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Treat a scalar diet type as a one-element list and drop empty values."""
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    return [item.strip() for item in items if item and item.strip()]
