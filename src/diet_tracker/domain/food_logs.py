"""Food log domain models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

from diet_tracker.domain.nutrition import MacroAmounts
from diet_tracker.domain.profile import NutritionGoals


class MealType(StrEnum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class FoodUnit(StrEnum):
    GRAMS = "grams"
    KG = "kg"
    PIECES = "pieces"
    CUPS = "cups"
    TABLESPOONS = "tablespoons"
    ML = "ml"
    LITERS = "liters"
    OUNCES = "ounces"
    POUNDS = "pounds"


class NutritionSource(StrEnum):
    USER = "user"
    AI = "ai"
    USDA = "usda"
    NONE = "none"


@dataclass(frozen=True)
class FoodLogDraft:
    """Food log input before nutrition values are completed."""

    meal_type: MealType
    food_name: str
    quantity: float
    unit: FoodUnit = FoodUnit.GRAMS
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    notes: str | None = None
    logged_at: datetime | None = None

    def missing_nutrients(self) -> list[str]:
        values = {
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fat_g": self.fat_g,
        }
        return [name for name, value in values.items() if value is None]


@dataclass(frozen=True)
class FoodLogEntry:
    """Logged food with completed nutrition values."""

    id: UUID
    user_id: UUID
    logged_at: datetime
    meal_type: MealType
    food_name: str
    quantity: float
    unit: FoodUnit
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    notes: str | None
    nutrition_source: NutritionSource

    @property
    def macros(self) -> MacroAmounts:
        return MacroAmounts(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )


@dataclass(frozen=True)
class NutritionSummary:
    """Totals for one day compared to the user's goals."""

    day: date
    entry_count: int
    totals: MacroAmounts
    goals: NutritionGoals
    remaining: MacroAmounts
    by_meal_type: dict[MealType, MacroAmounts]
