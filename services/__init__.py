"""Services package - Business logic layer"""

from services.registration_service import RegistrationService
from services.session_service import SessionService
from services.meal_service import MealService

# Note: streak_service contains pure functions, not a class

__all__ = [
    "RegistrationService",
    "SessionService",
    "MealService",
]
