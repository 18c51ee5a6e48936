from typing import Optional, Tuple
from sqlalchemy.orm import Session
import logging

from domain.models import User
from domain.schemas.user_schemas import RegisterRequest
from repositories import UserRepository
from app.exceptions import DuplicateUserError
from app.security import DEFAULT_HASH_ROUNDS, hash_password, new_session_token

logger = logging.getLogger("dailydiet.registration")


class RegistrationService:
    """Business logic for account registration and session issuance"""

    @staticmethod
    def register(
        db: Session,
        data: RegisterRequest,
        existing_token: Optional[str] = None,
        hash_rounds: int = DEFAULT_HASH_ROUNDS,
    ) -> Tuple[User, bool]:
        """
        Register a new user and bind it to a session token.

        A token already presented by the caller is reused; otherwise a fresh one
        is minted. The caller must set the cookie when the second element of the
        result is True.

        Args:
            db: Database session
            data: Validated registration body
            existing_token: Session token from the inbound cookie, if any
            hash_rounds: bcrypt cost factor for the stored digest

        Returns:
            Tuple of (created user, token_was_minted)

        Raises:
            DuplicateUserError: If the email is already registered
        """
        user_repo = UserRepository(db)

        if user_repo.get_by_email(data.email) is not None:
            logger.warning("registration_rejected reason=duplicate_email")
            raise DuplicateUserError()

        password_hash = hash_password(data.password, rounds=hash_rounds)

        minted = not existing_token
        token = new_session_token() if minted else existing_token

        user = user_repo.create_user(
            name=data.name,
            email=data.email,
            password_hash=password_hash,
            session_id=token,
        )

        logger.info(f"user_registered user_id={user.id} token_minted={minted}")
        return user, minted
