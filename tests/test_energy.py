"""Tests for BMR, TDEE and macro allocation."""

import pytest

from diet_tracker.domain.profile import ActivityLevel, Gender, NutritionGoals
from diet_tracker.services.energy import (
    activity_multiplier,
    allocate_macros,
    calculate_bmr,
    calculate_tdee,
    fallback_nutrition_goals,
)
from tests.conftest import complete_profile


def test_male_bmr_and_moderate_tdee() -> None:
    bmr = calculate_bmr(weight_kg=70, height_cm=175, age=30, gender="male")

    assert bmr == pytest.approx(1695.667)
    assert calculate_tdee(70, 175, 30, "male", "moderate") == 2628


def test_female_formula_used_for_non_male() -> None:
    female = calculate_bmr(weight_kg=60, height_cm=165, age=25, gender="female")
    other = calculate_bmr(weight_kg=60, height_cm=165, age=25, gender="other")

    assert female == pytest.approx(1405.333)
    assert other == female
    assert calculate_tdee(60, 165, 25, "female", "sedentary") == 1686


def test_gender_enum_selects_male_formula() -> None:
    assert calculate_bmr(70, 175, 30, Gender.MALE) == pytest.approx(1695.667)


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        ("sedentary", 1.2),
        ("light", 1.375),
        ("moderate", 1.55),
        ("active", 1.725),
        ("very_active", 1.9),
        ("very active", 1.9),
        (ActivityLevel.VERY_ACTIVE, 1.9),
        ("couch", 1.55),
        (None, 1.55),
    ],
)
def test_activity_multiplier(level, expected) -> None:  # type: ignore[no-untyped-def]
    assert activity_multiplier(level) == expected


def test_allocate_macros_uses_weight_and_calorie_shares() -> None:
    goals = allocate_macros(2628, 70)

    assert goals == NutritionGoals(calories=2628, protein_g=112, carbs_g=296, fat_g=73)


def test_fallback_goals_from_profile() -> None:
    goals = fallback_nutrition_goals(complete_profile())

    assert goals.calories == 2628
    assert goals.protein_g == 112
    assert goals.carbs_g == 296
    assert goals.fat_g == 73


def test_calculations_are_deterministic() -> None:
    profile = complete_profile(activity_level=ActivityLevel.ACTIVE)

    assert fallback_nutrition_goals(profile) == fallback_nutrition_goals(profile)
