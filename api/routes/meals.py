"""Meal ledger and diet metrics routes"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging
from uuid import UUID

from api.dependencies import get_db, get_current_user_id, get_settings
from app.config import Settings
from domain.schemas.meal_schemas import (
    MealCreate,
    MealUpdate,
    MealResponse,
    MealListResponse,
    MealDetailResponse,
    MealMetricsResponse,
)
from services.meal_service import MealService

router = APIRouter(prefix="/meals", tags=["Meals"])
logger = logging.getLogger("dailydiet.api.meals")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_meal(
    body: MealCreate,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Record a meal for the caller. ``date`` and ``hour`` are combined into ``date_time``."""
    MealService.create_meal(db, user_id, body, tz_name=settings.meal_timezone)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("", response_model=MealListResponse)
def list_meals(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """All meals of the caller, oldest first."""
    meals = MealService.list_meals(db, user_id)
    return MealListResponse(meals=[MealResponse.model_validate(m) for m in meals])


# Registered before /{meal_id} so "metrics" is not parsed as a meal id
@router.get("/metrics", response_model=MealMetricsResponse)
def get_metrics(
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Total, diet and non-diet meal counts plus the best diet streak."""
    metrics = MealService.get_metrics(db, user_id)
    return MealMetricsResponse(
        total_meals=metrics.total_meals,
        diet_meals=metrics.diet_meals,
        non_diet_meals=metrics.non_diet_meals,
        best_diet_streak=metrics.best_diet_streak,
    )


@router.get("/{meal_id}", response_model=MealDetailResponse)
def get_meal(
    meal_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    meal = MealService.get_meal(db, user_id, meal_id)
    return MealDetailResponse(meal=MealResponse.model_validate(meal))


@router.patch("/{meal_id}", status_code=status.HTTP_200_OK)
def update_meal(
    meal_id: UUID,
    body: MealUpdate,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Partially update a meal; ``date`` and ``hour`` must be sent together."""
    MealService.update_meal(db, user_id, meal_id, body, tz_name=settings.meal_timezone)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meal(
    meal_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    MealService.delete_meal(db, user_id, meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
