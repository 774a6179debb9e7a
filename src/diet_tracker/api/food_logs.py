"""Food log endpoints."""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from diet_tracker.api.auth import current_user_id
from diet_tracker.api.schemas import (
    FoodLogRequest,
    FoodLogResponse,
    FoodLogUpdateRequest,
    NutritionSummaryResponse,
)
from diet_tracker.domain.food_logs import MealType  # noqa: TC001

if TYPE_CHECKING:
    from diet_tracker.containers import AppContainer

router = APIRouter(prefix="/api/food-log", tags=["food-log"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_food(
    payload: FoodLogRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> FoodLogResponse:
    """Log a food; missing nutrition values are estimated."""
    container: AppContainer = request.app.state.container
    entry = await container.food_log_service.log_food(user_id, payload.to_draft())
    return FoodLogResponse.from_entry(entry)


@router.get("")
async def list_food_logs(  # noqa: PLR0913
    request: Request,
    start: datetime | None = None,
    end: datetime | None = None,
    meal_type: MealType | None = None,
    user_id: UUID = Depends(current_user_id),
) -> list[FoodLogResponse]:
    container: AppContainer = request.app.state.container
    entries = container.food_log_service.list_logs(user_id, start, end, meal_type)
    return [FoodLogResponse.from_entry(entry) for entry in entries]


@router.get("/today")
async def today_food_logs(
    request: Request,
    tz: str | None = None,
    user_id: UUID = Depends(current_user_id),
) -> list[FoodLogResponse]:
    container: AppContainer = request.app.state.container
    entries = container.food_log_service.today(user_id, tz)
    return [FoodLogResponse.from_entry(entry) for entry in entries]


@router.get("/nutrition-summary")
async def nutrition_summary(
    request: Request,
    day: date | None = None,
    tz: str | None = None,
    user_id: UUID = Depends(current_user_id),
) -> NutritionSummaryResponse:
    """Totals for a day compared with the user's goals."""
    container: AppContainer = request.app.state.container
    summary = container.food_log_service.nutrition_summary(user_id, day, tz)
    return NutritionSummaryResponse.from_summary(summary)


@router.get("/{log_id}")
async def get_food_log(
    log_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> FoodLogResponse:
    container: AppContainer = request.app.state.container
    return FoodLogResponse.from_entry(
        container.food_log_service.get_log(user_id, log_id)
    )


@router.put("/{log_id}")
async def update_food_log(
    log_id: UUID,
    payload: FoodLogUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> FoodLogResponse:
    container: AppContainer = request.app.state.container
    entry = container.food_log_service.update_log(user_id, log_id, payload.changes())
    return FoodLogResponse.from_entry(entry)


@router.delete("/{log_id}")
async def delete_food_log(
    log_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.food_log_service.delete_log(user_id, log_id)
    return {"message": "Food log removed"}
