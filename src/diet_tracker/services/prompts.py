"""Prompt builders for the generative text service."""

from diet_tracker.domain.food_logs import FoodUnit
from diet_tracker.domain.profile import NutritionGoals, UserProfile
from diet_tracker.services.meal_table import resolve_diet_key

_MEAL_SCHEMA = (
    '{ "name": "", "description": "", "calories": 0, "protein": 0, '
    '"carbs": 0, "fat": 0 }'
)

_DIET_PLAN_SCHEMA = f"""{{
  "title": "7-Day Diet Plan",
  "description": "Personalized diet plan",
  "days": [
    {{
      "day": "Monday",
      "meals": {{
        "breakfast": {_MEAL_SCHEMA},
        "lunch": {_MEAL_SCHEMA},
        "dinner": {_MEAL_SCHEMA},
        "snacks": [{_MEAL_SCHEMA}]
      }}
    }}
  ]
}}"""

_GOALS_SCHEMA = '{ "calories": 0, "protein": 0, "carbs": 0, "fat": 0 }'


def _profile_lines(profile: UserProfile) -> list[str]:
    lines = [
        f"Age: {profile.age}, Gender: {profile.gender}, "
        f"Weight: {profile.weight_kg}kg, Height: {profile.height_cm}cm,",
        f"Activity Level: {profile.activity_level},",
    ]
    diet = ", ".join(profile.diet_type) or profile.dietary_preference
    if diet:
        lines.append(f"Diet Type: {diet},")
    if profile.regional_cuisines:
        lines.append(
            "Regional Cuisine Preferences: "
            f"{', '.join(profile.regional_cuisines)}."
        )
    if profile.allergies:
        lines.append(f"Allergies: {', '.join(profile.allergies)}.")
    if profile.goals:
        lines.append(f"Goals: {', '.join(profile.goals)}.")
    return lines


def _goals_line(goals: NutritionGoals) -> str:
    return (
        f"Daily Nutrition Goals: {goals.calories} kcal, {goals.protein_g}g protein, "
        f"{goals.carbs_g}g carbs, {goals.fat_g}g fat."
    )


def build_nutrition_goals_prompt(profile: UserProfile) -> str:
    """Ask for daily calorie and macro targets as strict JSON."""
    lines = [
        "Calculate personalized daily nutrition goals as a strict JSON object "
        "with no extra text.",
        "Use whole numbers: calories in kcal, protein, carbs and fat in grams.",
        f"Follow this schema: {_GOALS_SCHEMA}",
        "User info:",
        *_profile_lines(profile),
        "Previous " + _goals_line(profile.daily_nutrition_goals),
        "Return ONLY valid JSON.",
    ]
    return "\n".join(lines)


def build_diet_plan_prompt(profile: UserProfile, goals: NutritionGoals) -> str:
    """Ask for a 7-day plan that fits the goals and preferences."""
    lines = [
        "Generate a 7-day diet plan as a strict JSON object with no extra text.",
        "Follow this schema:",
        _DIET_PLAN_SCHEMA,
        "Include exactly 7 days, Monday to Sunday.",
        "User info:",
        *_profile_lines(profile),
        _goals_line(goals),
    ]
    if profile.regional_cuisines:
        lines.append(
            "Create a diet plan that incorporates the user's regional cuisine "
            "preferences."
        )
    else:
        lines.append(
            "Create a diet plan suited to a "
            f"{resolve_diet_key(profile.diet_type, profile.dietary_preference)} diet."
        )
    if profile.allergies:
        lines.append("Never include ingredients the user is allergic to.")
    lines.append("Return ONLY valid JSON.")
    return "\n".join(lines)


def build_food_estimate_prompt(food_name: str, quantity: float, unit: FoodUnit) -> str:
    """Ask for the nutrition of one logged food portion."""
    return "\n".join(
        [
            "Estimate the nutrition values of the following food portion.",
            f"Food: {food_name}",
            f"Quantity: {quantity:g} {unit}",
            "Give totals for the whole portion: calories in kcal, protein, carbs "
            "and fat in grams.",
            f"Follow this schema: {_GOALS_SCHEMA}",
            "Return ONLY valid JSON.",
        ]
    )
