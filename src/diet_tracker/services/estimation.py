"""Nutrition estimation for free-text food entries."""

import logging
from dataclasses import dataclass

from diet_tracker.adapters.fdc_client import FdcClient
from diet_tracker.domain.errors import ExternalServiceFailure, ResponseParseFailure
from diet_tracker.domain.food_logs import FoodUnit, NutritionSource
from diet_tracker.domain.nutrition import FoodNutritionEstimate, MacroAmounts
from diet_tracker.services.ai import StructuredGenerator
from diet_tracker.services.prompts import build_food_estimate_prompt

_logger = logging.getLogger(__name__)

_NUTRIENT_IDS = {
    1008: "calories",
    1003: "protein_g",
    1004: "fat_g",
    1005: "carbs_g",
}

GRAMS_PER_UNIT: dict[FoodUnit, float] = {
    FoodUnit.GRAMS: 1.0,
    FoodUnit.KG: 1000.0,
    FoodUnit.ML: 1.0,
    FoodUnit.LITERS: 1000.0,
    FoodUnit.OUNCES: 28.3495,
    FoodUnit.POUNDS: 453.592,
    FoodUnit.CUPS: 240.0,
    FoodUnit.TABLESPOONS: 15.0,
}
DEFAULT_PIECE_GRAMS = 100.0
FDC_VALUES_PER_GRAMS = 100.0


@dataclass(frozen=True)
class NutritionEstimate:
    """Estimated nutrition for a whole logged portion."""

    macros: MacroAmounts
    source: NutritionSource


@dataclass
class NutritionEstimator:
    """Estimates nutrition with the AI first and USDA FDC second."""

    generator: StructuredGenerator
    fdc_client: FdcClient | None = None

    async def estimate(
        self, food_name: str, quantity: float, unit: FoodUnit
    ) -> NutritionEstimate | None:
        """Return the estimate for the portion, or None if nothing worked."""
        prompt = build_food_estimate_prompt(food_name, quantity, unit)
        try:
            result = await self.generator.generate(prompt, FoodNutritionEstimate)
            return NutritionEstimate(result.to_macros(), NutritionSource.AI)
        except (ExternalServiceFailure, ResponseParseFailure) as exc:
            _logger.warning("AI nutrition estimate failed for %r: %s", food_name, exc)

        if self.fdc_client is None:
            return None
        try:
            payload = await self.fdc_client.search_foods(food_name, page_size=1)
        except Exception as exc:
            _logger.warning("FDC lookup failed for %r: %s", food_name, exc)
            return None
        foods = payload.get("foods") or []
        if not foods:
            _logger.info("FDC returned no match for %r", food_name)
            return None
        food = foods[0]
        per_100g = extract_macros(food.get("foodNutrients") or [])
        grams = portion_grams(quantity, unit, food.get("servingSize"))
        return NutritionEstimate(
            per_100g.scaled(grams / FDC_VALUES_PER_GRAMS), NutritionSource.USDA
        )


def portion_grams(
    quantity: float, unit: FoodUnit, serving_size_g: float | None = None
) -> float:
    """Convert a quantity to grams; pieces use the serving size or 100 g."""
    if unit == FoodUnit.PIECES:
        return quantity * float(serving_size_g or DEFAULT_PIECE_GRAMS)
    return quantity * GRAMS_PER_UNIT[FoodUnit(unit)]


def extract_macros(food_nutrients: list[dict[str, object]]) -> MacroAmounts:
    """Extract calories, protein, fat and carbs from FDC nutrients."""
    values = {name: 0.0 for name in _NUTRIENT_IDS.values()}
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("value", nutrient.get("amount"))
        name = _NUTRIENT_IDS.get(nutrient_id)
        if name is not None and amount is not None:
            values[name] = float(amount)
    return MacroAmounts(**values)
