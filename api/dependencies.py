"""
API dependencies for dependency injection
"""

from typing import Generator
from uuid import UUID
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.config import Settings
from services.session_service import SessionService


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Sessions come from the factory opened in the application lifespan.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    """Settings the running application was built with"""
    return request.app.state.settings


def get_session_token(request: Request):
    """Session token from the inbound cookie, or None"""
    return request.cookies.get(get_settings(request).session_cookie_name) or None


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> UUID:
    """
    Resolve the caller from the session cookie.

    The resolved id is stored on ``request.state.user_id``; handlers must take
    the owner of a resource from here and never from the request body.
    """
    user_id = SessionService.resolve(db, get_session_token(request))
    request.state.user_id = user_id
    return user_id
