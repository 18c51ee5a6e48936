from datetime import datetime, timezone
from typing import List
from uuid import UUID
from zoneinfo import ZoneInfo
from sqlalchemy.orm import Session
import logging

from domain.models import Meal
from domain.schemas.meal_schemas import MealCreate, MealUpdate, DATE_FORMAT, HOUR_FORMAT
from repositories import MealRepository
from services.streak_service import MealMetrics, summarize_meals
from app.exceptions import NotFoundError

logger = logging.getLogger("dailydiet.meals")


def combine_date_and_hour(date: str, hour: str, tz_name: str = "UTC") -> datetime:
    """
    Build the absolute timestamp of a meal from its calendar date and time of day.

    Args:
        date: ``YYYY-MM-DD``
        hour: ``HH:mm``
        tz_name: IANA zone the wall-clock values are read in

    Returns:
        Timezone-aware datetime
    """
    naive = datetime.strptime(f"{date} {hour}", f"{DATE_FORMAT} {HOUR_FORMAT}")
    return naive.replace(tzinfo=ZoneInfo(tz_name))


class MealService:
    """
    Business logic for the meal ledger.

    Every operation takes the owner id resolved from the session; a meal of
    another user is reported exactly like a missing one.
    """

    @staticmethod
    def create_meal(
        db: Session, user_id: UUID, data: MealCreate, tz_name: str = "UTC"
    ) -> Meal:
        """Record a new meal for ``user_id``, reading date + hour in ``tz_name``"""
        meal = MealRepository(db).create_meal(
            user_id=user_id,
            name=data.name,
            description=data.description,
            date_time=combine_date_and_hour(data.date, data.hour, tz_name),
            is_diet=data.is_diet,
        )
        logger.info(
            f"meal_created user_id={user_id} meal_id={meal.id} is_diet={meal.is_diet}"
        )
        return meal

    @staticmethod
    def list_meals(db: Session, user_id: UUID) -> List[Meal]:
        """All meals of ``user_id``, oldest first"""
        return MealRepository(db).list_by_user(user_id)

    @staticmethod
    def get_meal(db: Session, user_id: UUID, meal_id: UUID) -> Meal:
        """
        Raises:
            NotFoundError: If the meal does not exist or is not owned by ``user_id``
        """
        meal = MealRepository(db).get_owned(user_id, meal_id)
        if meal is None:
            logger.warning(f"meal_not_found user_id={user_id} meal_id={meal_id}")
            raise NotFoundError(f"Meal {meal_id} not found")
        return meal

    @staticmethod
    def update_meal(
        db: Session, user_id: UUID, meal_id: UUID, data: MealUpdate, tz_name: str = "UTC"
    ) -> Meal:
        """
        Replace the provided fields of an owned meal.

        The ownership check and the write are separate statements; two racing
        updates of the same meal resolve as last write wins.
        """
        meal = MealService.get_meal(db, user_id, meal_id)

        provided = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        changes = {}
        for key in ("name", "description", "is_diet"):
            if key in provided:
                changes[key] = provided[key]
        if "date" in provided and "hour" in provided:
            changes["date_time"] = combine_date_and_hour(
                provided["date"], provided["hour"], tz_name
            )

        meal = MealRepository(db).update_meal(
            meal, changes, updated_at=datetime.now(timezone.utc)
        )
        logger.info(
            f"meal_updated user_id={user_id} meal_id={meal_id} fields={sorted(changes)}"
        )
        return meal

    @staticmethod
    def delete_meal(db: Session, user_id: UUID, meal_id: UUID) -> None:
        """Hard-delete an owned meal"""
        meal = MealService.get_meal(db, user_id, meal_id)
        MealRepository(db).delete(meal)
        logger.info(f"meal_deleted user_id={user_id} meal_id={meal_id}")

    @staticmethod
    def get_metrics(db: Session, user_id: UUID) -> MealMetrics:
        """Meal counts and best diet streak for ``user_id``"""
        metrics = summarize_meals(MealRepository(db).diet_flags_in_order(user_id))

        logger.info(
            f"metrics_computed user_id={user_id} total={metrics.total_meals} "
            f"best_streak={metrics.best_diet_streak}"
        )
        return metrics
