"""Energy expenditure and macro target calculations.

BMR uses the revised Harris-Benedict equations; TDEE scales it by an activity
multiplier. The macro allocator derives gram targets from the TDEE and body
weight. These functions are pure and assume validated, positive inputs.
"""

from diet_tracker.domain.profile import NutritionGoals, UserProfile

ACTIVITY_MULTIPLIERS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very_active": 1.9,
}
DEFAULT_ACTIVITY_MULTIPLIER = 1.55

PROTEIN_G_PER_KG = 1.6
CARB_CALORIE_SHARE = 0.45
FAT_CALORIE_SHARE = 0.25
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


def calculate_bmr(weight_kg: float, height_cm: float, age: int, gender: str) -> float:
    """Return the basal metabolic rate in kcal/day."""
    if str(gender).lower() == "male":
        return 88.362 + 13.397 * weight_kg + 4.799 * height_cm - 5.677 * age
    return 447.593 + 9.247 * weight_kg + 3.098 * height_cm - 4.330 * age


def activity_multiplier(activity_level: str | None) -> float:
    """Return the TDEE multiplier, 1.55 for unknown levels."""
    if activity_level is None:
        return DEFAULT_ACTIVITY_MULTIPLIER
    key = str(activity_level).strip().lower().replace(" ", "_")
    return ACTIVITY_MULTIPLIERS.get(key, DEFAULT_ACTIVITY_MULTIPLIER)


def calculate_tdee(
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: str,
    activity_level: str | None,
) -> int:
    """Return total daily energy expenditure rounded to whole kcal."""
    bmr = calculate_bmr(weight_kg, height_cm, age, gender)
    return round(bmr * activity_multiplier(activity_level))


def allocate_macros(tdee: int, weight_kg: float) -> NutritionGoals:
    """Derive protein, carb and fat targets for a calorie target."""
    return NutritionGoals(
        calories=tdee,
        protein_g=round(weight_kg * PROTEIN_G_PER_KG),
        carbs_g=round(tdee * CARB_CALORIE_SHARE / KCAL_PER_G_CARBS),
        fat_g=round(tdee * FAT_CALORIE_SHARE / KCAL_PER_G_FAT),
    )


def fallback_nutrition_goals(profile: UserProfile) -> NutritionGoals:
    """Compute goals from body metrics; the profile must be complete."""
    tdee = calculate_tdee(
        weight_kg=float(profile.weight_kg),
        height_cm=float(profile.height_cm),
        age=int(profile.age),
        gender=str(profile.gender),
        activity_level=profile.activity_level,
    )
    return allocate_macros(tdee, float(profile.weight_kg))
