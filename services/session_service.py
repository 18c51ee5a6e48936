from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
import logging

from repositories import UserRepository
from app.exceptions import UnauthorizedError

logger = logging.getLogger("dailydiet.session")


class SessionService:
    """Resolves session tokens to user identities"""

    @staticmethod
    def resolve(db: Session, token: Optional[str]) -> UUID:
        """
        Return the id of the user bound to ``token``.

        Raises:
            UnauthorizedError: If no token was sent or no user owns it. A missing
                token is rejected without querying the database.
        """
        if not token:
            raise UnauthorizedError()

        user = UserRepository(db).get_by_session_token(token)
        if user is None:
            logger.info("session_rejected reason=unknown_token")
            raise UnauthorizedError()

        return user.id
