"""
Meal Repository - Data access for the meal ledger.

Every query takes the owner's id; there is no unscoped lookup by meal id.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Meal


class MealRepository(BaseRepository[Meal]):
    """Repository for meal data access"""

    def __init__(self, db: Session):
        super().__init__(db, Meal)

    def get_owned(self, user_id: UUID, meal_id: UUID) -> Optional[Meal]:
        """Get a meal only if it belongs to ``user_id``"""
        return (
            self.db.query(Meal)
            .filter(Meal.id == meal_id, Meal.user_id == user_id)
            .first()
        )

    def list_by_user(self, user_id: UUID) -> List[Meal]:
        """All meals of a user, oldest first"""
        return (
            self.db.query(Meal)
            .filter(Meal.user_id == user_id)
            .order_by(Meal.date_time.asc(), Meal.created_at.asc())
            .all()
        )

    def diet_flags_in_order(self, user_id: UUID) -> List[bool]:
        """``is_diet`` of each meal of a user, oldest first"""
        rows = (
            self.db.query(Meal.is_diet)
            .filter(Meal.user_id == user_id)
            .order_by(Meal.date_time.asc(), Meal.created_at.asc())
            .all()
        )
        return [bool(row.is_diet) for row in rows]

    def create_meal(
        self,
        user_id: UUID,
        name: str,
        description: str,
        date_time: datetime,
        is_diet: bool,
    ) -> Meal:
        """Create a meal owned by ``user_id``"""
        meal = Meal(
            user_id=user_id,
            name=name,
            description=description,
            date_time=date_time,
            is_diet=is_diet,
        )
        return self.create(meal)

    def update_meal(self, meal: Meal, changes: Dict[str, Any], updated_at: datetime) -> Meal:
        """Apply ``changes`` to a loaded meal and refresh ``updated_at``"""
        for key, value in changes.items():
            setattr(meal, key, value)
        meal.updated_at = updated_at
        return self.update(meal)
