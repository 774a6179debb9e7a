"""Diet plan endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from diet_tracker.api.auth import current_user_id
from diet_tracker.api.schemas import (
    DietPlanCreateRequest,
    DietPlanResponse,
    DietPlanUpdateRequest,
    GoalsResponse,
    NutritionGoalsResponse,
)
from diet_tracker.domain.diet_plans import DietPlanContent

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(prefix="/api/diet-plan", tags=["diet-plan"])


@router.post("/generate", status_code=status.HTTP_201_CREATED)
async def generate_diet_plan(
    request: Request,
    refresh_goals: bool = False,
    user_id: UUID = Depends(current_user_id),
) -> DietPlanResponse:
    """Generate a weekly plan with the AI, or from the meal table on failure."""
    container: AppContainer = request.app.state.container
    plan = await container.planning_service.generate_diet_plan(
        user_id, refresh_goals=refresh_goals
    )
    return DietPlanResponse.from_record(plan)


@router.post("/calculate-nutrition-goals")
async def calculate_nutrition_goals(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> NutritionGoalsResponse:
    """Recalculate and store the user's daily goals."""
    container: AppContainer = request.app.state.container
    outcome = await container.planning_service.calculate_nutrition_goals(user_id)
    return NutritionGoalsResponse(
        daily_nutrition_goals=GoalsResponse.from_goals(outcome.goals),
        source=outcome.source,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_diet_plan(
    payload: DietPlanCreateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> DietPlanResponse:
    container: AppContainer = request.app.state.container
    content = DietPlanContent(
        title=payload.title, description=payload.description, days=payload.days
    )
    plan = container.diet_plan_service.create_plan(user_id, content)
    return DietPlanResponse.from_record(plan)


@router.get("")
async def list_diet_plans(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> list[DietPlanResponse]:
    """Return the user's plans, most recently updated first."""
    container: AppContainer = request.app.state.container
    plans = container.diet_plan_service.list_plans(user_id)
    return [DietPlanResponse.from_record(plan) for plan in plans]


@router.get("/{plan_id}")
async def get_diet_plan(
    plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> DietPlanResponse:
    container: AppContainer = request.app.state.container
    plan = container.diet_plan_service.get_plan(user_id, plan_id)
    return DietPlanResponse.from_record(plan)


@router.put("/{plan_id}")
async def update_diet_plan(
    plan_id: UUID,
    payload: DietPlanUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> DietPlanResponse:
    container: AppContainer = request.app.state.container
    plan = container.diet_plan_service.update_plan(
        user_id, plan_id, payload.model_dump(exclude_unset=True)
    )
    return DietPlanResponse.from_record(plan)


@router.delete("/{plan_id}")
async def delete_diet_plan(
    plan_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.diet_plan_service.delete_plan(user_id, plan_id)
    return {"message": "Diet plan removed"}
