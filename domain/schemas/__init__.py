"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import RegisterRequest
from domain.schemas.meal_schemas import (
    MealCreate,
    MealUpdate,
    MealResponse,
    MealListResponse,
    MealDetailResponse,
    MealMetricsResponse,
)

__all__ = [
    "RegisterRequest",
    "MealCreate",
    "MealUpdate",
    "MealResponse",
    "MealListResponse",
    "MealDetailResponse",
    "MealMetricsResponse",
]
