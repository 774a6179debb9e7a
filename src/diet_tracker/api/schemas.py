"""Request and response models for the HTTP API."""

from datetime import date, datetime
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from diet_tracker.domain.diet_plans import DayPlan, DietPlanRecord, Meal
from diet_tracker.domain.food_logs import (
    FoodLogDraft,
    FoodLogEntry,
    FoodUnit,
    MealType,
    NutritionSummary,
)
from diet_tracker.domain.nutrition import MacroAmounts
from diet_tracker.domain.profile import (
    ActivityLevel,
    DietaryPreference,
    DietType,
    Gender,
    NutritionGoals,
    RegionalCuisine,
    UserRecord,
)
from diet_tracker.services.users import AuthResult


class ApiModel(BaseModel):
    """Accepts snake_case or camelCase keys and renders camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(ApiModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class LoginRequest(ApiModel):
    email: str
    password: str


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_list(value: object) -> object:
    """Wrap a scalar in a list and drop blank entries."""
    if isinstance(value, str):
        value = [value]
    if isinstance(value, list):
        return [
            item for item in value if not (isinstance(item, str) and not item.strip())
        ]
    return value


class PreferencesRequest(ApiModel):
    dietary_preference: Annotated[
        DietaryPreference | None, BeforeValidator(_blank_to_none)
    ] = None
    diet_type: Annotated[list[DietType] | None, BeforeValidator(_as_list)] = None
    regional_cuisines: Annotated[
        list[RegionalCuisine] | None, BeforeValidator(_as_list)
    ] = None
    allergies: list[str] | None = None
    goals: list[str] | None = None

    def changes(self) -> dict[str, object]:
        """Return only the fields the client sent."""
        return self.model_dump(exclude_unset=True)


class ProfileUpdateRequest(PreferencesRequest):
    name: str | None = None
    email: str | None = None
    password: str | None = Field(default=None, min_length=6)
    age: int | None = Field(default=None, gt=0)
    weight_kg: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("weight", "weight_kg", "weightKg"),
    )
    height_cm: float | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("height", "height_cm", "heightCm"),
    )
    gender: Gender | None = None
    activity_level: ActivityLevel | None = None


class DietPlanCreateRequest(ApiModel):
    title: str = ""
    description: str = ""
    days: list[DayPlan] = Field(default_factory=list)


class DietPlanUpdateRequest(ApiModel):
    title: str | None = None
    description: str | None = None
    days: list[DayPlan] | None = None


def _nutrient(name: str) -> object:
    return Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices(name, f"{name}_g", f"{name}G"),
    )


class FoodLogRequest(ApiModel):
    meal_type: MealType
    food_name: str = Field(min_length=1)
    quantity: float = Field(default=1.0, gt=0)
    unit: FoodUnit = FoodUnit.PIECES
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = _nutrient("protein")
    carbs_g: float | None = _nutrient("carbs")
    fat_g: float | None = _nutrient("fat")
    notes: str | None = None
    logged_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("logged_at", "loggedAt", "date")
    )

    def to_draft(self) -> FoodLogDraft:
        return FoodLogDraft(**self.model_dump())


class FoodLogUpdateRequest(ApiModel):
    meal_type: MealType | None = None
    food_name: str | None = Field(default=None, min_length=1)
    quantity: float | None = Field(default=None, gt=0)
    unit: FoodUnit | None = None
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = _nutrient("protein")
    carbs_g: float | None = _nutrient("carbs")
    fat_g: float | None = _nutrient("fat")
    notes: str | None = None
    logged_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("logged_at", "loggedAt", "date")
    )

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class GoalsResponse(ApiModel):
    calories: float
    protein: float
    carbs: float
    fat: float

    @classmethod
    def from_goals(cls, goals: NutritionGoals) -> "GoalsResponse":
        return cls(
            calories=goals.calories,
            protein=goals.protein_g,
            carbs=goals.carbs_g,
            fat=goals.fat_g,
        )

    @classmethod
    def from_macros(cls, macros: MacroAmounts) -> "GoalsResponse":
        return cls(
            calories=macros.calories,
            protein=macros.protein_g,
            carbs=macros.carbs_g,
            fat=macros.fat_g,
        )


class UserResponse(ApiModel):
    id: UUID
    name: str
    email: str
    age: int | None
    weight: float | None
    height: float | None
    gender: str | None
    activity_level: str | None
    dietary_preference: str | None
    diet_type: list[str]
    regional_cuisines: list[str]
    allergies: list[str]
    goals: list[str]
    daily_nutrition_goals: GoalsResponse

    @classmethod
    def from_record(cls, user: UserRecord, **extra: object) -> "UserResponse":
        profile = user.profile
        return cls(
            **extra,
            id=user.id,
            name=user.name,
            email=user.email,
            age=profile.age,
            weight=profile.weight_kg,
            height=profile.height_cm,
            gender=_enum_value(profile.gender),
            activity_level=_enum_value(profile.activity_level),
            dietary_preference=profile.dietary_preference,
            diet_type=list(profile.diet_type),
            regional_cuisines=list(profile.regional_cuisines),
            allergies=list(profile.allergies),
            goals=list(profile.goals),
            daily_nutrition_goals=GoalsResponse.from_goals(
                profile.daily_nutrition_goals
            ),
        )


def _enum_value(value: StrEnum | None) -> str | None:
    return value.value if value is not None else None


class AuthResponse(UserResponse):
    token: str

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls.from_record(result.user, token=result.token)


class MealResponse(ApiModel):
    name: str
    description: str
    calories: float
    protein: float
    carbs: float
    fat: float


class DayMealsResponse(ApiModel):
    breakfast: MealResponse
    lunch: MealResponse
    dinner: MealResponse
    snacks: list[MealResponse]


class DayResponse(ApiModel):
    day: str
    meals: DayMealsResponse


class DietPlanResponse(ApiModel):
    id: UUID
    user_id: UUID
    title: str
    description: str
    days: list[DayResponse]
    source: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, plan: DietPlanRecord) -> "DietPlanResponse":
        return cls(
            id=plan.id,
            user_id=plan.user_id,
            title=plan.title,
            description=plan.description,
            days=[
                DayResponse(
                    day=day.day_name,
                    meals=DayMealsResponse(
                        breakfast=_meal(day.meals.breakfast),
                        lunch=_meal(day.meals.lunch),
                        dinner=_meal(day.meals.dinner),
                        snacks=[_meal(snack) for snack in day.meals.snacks],
                    ),
                )
                for day in plan.days
            ],
            source=plan.source,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )


def _meal(meal: Meal) -> MealResponse:
    return MealResponse(
        name=meal.name,
        description=meal.description,
        calories=meal.calories,
        protein=meal.protein_g,
        carbs=meal.carbs_g,
        fat=meal.fat_g,
    )


class NutritionGoalsResponse(ApiModel):
    daily_nutrition_goals: GoalsResponse
    source: str


class FoodLogResponse(ApiModel):
    id: UUID
    user_id: UUID
    logged_at: datetime
    meal_type: MealType
    food_name: str
    quantity: float
    unit: FoodUnit
    calories: float
    protein: float
    carbs: float
    fat: float
    notes: str | None
    nutrition_source: str

    @classmethod
    def from_entry(cls, entry: FoodLogEntry) -> "FoodLogResponse":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            logged_at=entry.logged_at,
            meal_type=entry.meal_type,
            food_name=entry.food_name,
            quantity=entry.quantity,
            unit=entry.unit,
            calories=entry.calories,
            protein=entry.protein_g,
            carbs=entry.carbs_g,
            fat=entry.fat_g,
            notes=entry.notes,
            nutrition_source=str(entry.nutrition_source),
        )


class NutritionSummaryResponse(ApiModel):
    day: date
    entry_count: int
    totals: GoalsResponse
    goals: GoalsResponse
    remaining: GoalsResponse
    by_meal_type: dict[str, GoalsResponse]

    @classmethod
    def from_summary(cls, summary: NutritionSummary) -> "NutritionSummaryResponse":
        return cls(
            day=summary.day,
            entry_count=summary.entry_count,
            totals=GoalsResponse.from_macros(summary.totals),
            goals=GoalsResponse.from_goals(summary.goals),
            remaining=GoalsResponse.from_macros(summary.remaining),
            by_meal_type={
                str(meal_type): GoalsResponse.from_macros(macros)
                for meal_type, macros in summary.by_meal_type.items()
            },
        )
