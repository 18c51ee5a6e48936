from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
import re

DATE_FORMAT = "%Y-%m-%d"
HOUR_FORMAT = "%H:%M"

# strptime also accepts single-digit fields such as "7:5"
_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_HOUR_PATTERN = re.compile(r"\d{2}:\d{2}", re.ASCII)


def _check_date(v: str) -> str:
    message = "Date must be a valid YYYY-MM-DD value"
    if not _DATE_PATTERN.fullmatch(v):
        raise ValueError(message)
    try:
        datetime.strptime(v, DATE_FORMAT)
    except ValueError:
        raise ValueError(message)
    return v


def _check_hour(v: str) -> str:
    message = "Hour must be a valid HH:mm value"
    if not _HOUR_PATTERN.fullmatch(v):
        raise ValueError(message)
    try:
        datetime.strptime(v, HOUR_FORMAT)
    except ValueError:
        raise ValueError(message)
    return v


class MealCreate(BaseModel):
    """Body of POST /meals"""

    name: str = Field(..., min_length=1, description="Meal name")
    description: str = Field(..., min_length=1, description="What was eaten")
    date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    hour: str = Field(..., description="Time of day, HH:mm")
    is_diet: StrictBool = Field(..., alias="isDiet")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return _check_date(v)

    @field_validator("hour")
    @classmethod
    def validate_hour(cls, v):
        return _check_hour(v)


class MealUpdate(BaseModel):
    """Body of PATCH /meals/{meal_id}; omitted fields keep their stored value"""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[str] = None
    hour: Optional[str] = None
    is_diet: Optional[StrictBool] = Field(None, alias="isDiet")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return v if v is None else _check_date(v)

    @field_validator("hour")
    @classmethod
    def validate_hour(cls, v):
        return v if v is None else _check_hour(v)

    @model_validator(mode="after")
    def date_and_hour_together(self):
        # date_time is rebuilt from both parts, so one alone cannot be applied
        if (self.date is None) != (self.hour is None):
            raise ValueError("Date and hour must be updated together")
        return self


class MealResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    description: str
    date_time: datetime
    is_diet: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MealListResponse(BaseModel):
    meals: List[MealResponse]


class MealDetailResponse(BaseModel):
    meal: MealResponse


class MealMetricsResponse(BaseModel):
    """Aggregate counts and best diet streak for the caller"""

    total_meals: int = Field(..., alias="totalMeals")
    diet_meals: int = Field(..., alias="dietMeals")
    non_diet_meals: int = Field(..., alias="nonDietMeals")
    best_diet_streak: int = Field(..., alias="bestDietStreak")

    model_config = ConfigDict(populate_by_name=True)
