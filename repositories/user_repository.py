"""
User Repository - Data access layer for user-related operations
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import User
from app.exceptions import DuplicateUserError


class UserRepository(BaseRepository[User]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        return self.db.query(User).filter(User.email == email).first()

    def get_by_session_token(self, token: str) -> Optional[User]:
        """
        Get the user bound to a session token.

        A token reused by a later registration stays with its earliest owner.
        """
        return (
            self.db.query(User)
            .filter(User.session_id == token)
            .order_by(User.created_at.asc(), User.id.asc())
            .first()
        )

    def create_user(
        self, name: str, email: str, password_hash: str, session_id: str
    ) -> User:
        """Create a new user"""
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            session_id=session_id,
        )
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            # lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise DuplicateUserError()
