"""Nutrition value types shared by goals, meals and food logs."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
)


def _require_number(value: object) -> object:
    """Reject strings, booleans and other non-numeric JSON values."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValueError("expected a JSON number")
    return value


def _round_whole(value: float) -> int:
    return round(value)


def _round_tenth(value: float) -> float:
    return round(value, 1)


WholeAmount = Annotated[
    float,
    BeforeValidator(_require_number),
    Field(ge=0, allow_inf_nan=False),
    AfterValidator(_round_whole),
]
"""Finite non-negative integer amount; floats are rounded, strings rejected."""

DecimalAmount = Annotated[
    float,
    BeforeValidator(_require_number),
    Field(ge=0, allow_inf_nan=False),
    AfterValidator(_round_tenth),
]
"""Finite non-negative amount rounded to one decimal."""


@dataclass(frozen=True)
class MacroAmounts:
    """Energy and macronutrients for a portion of food."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float

    def scaled(self, factor: float) -> "MacroAmounts":
        """Return the amounts multiplied by a factor and rounded."""
        return MacroAmounts(
            calories=round(self.calories * factor, 1),
            protein_g=round(self.protein_g * factor, 1),
            carbs_g=round(self.carbs_g * factor, 1),
            fat_g=round(self.fat_g * factor, 1),
        )

    def __add__(self, other: "MacroAmounts") -> "MacroAmounts":
        return MacroAmounts(
            calories=round(self.calories + other.calories, 1),
            protein_g=round(self.protein_g + other.protein_g, 1),
            carbs_g=round(self.carbs_g + other.carbs_g, 1),
            fat_g=round(self.fat_g + other.fat_g, 1),
        )


ZERO_MACROS = MacroAmounts(calories=0.0, protein_g=0.0, carbs_g=0.0, fat_g=0.0)


class FoodNutritionEstimate(BaseModel):
    """Structured output for a food nutrition estimate."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    calories: DecimalAmount
    protein_g: DecimalAmount = Field(
        validation_alias=AliasChoices("protein_g", "protein")
    )
    carbs_g: DecimalAmount = Field(validation_alias=AliasChoices("carbs_g", "carbs"))
    fat_g: DecimalAmount = Field(validation_alias=AliasChoices("fat_g", "fat"))

    def to_macros(self) -> MacroAmounts:
        """Convert the estimate into macro amounts."""
        return MacroAmounts(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
        )
