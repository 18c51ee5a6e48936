"""User registration routes"""

from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_db, get_session_token, get_settings
from app.config import Settings
from domain.schemas.user_schemas import RegisterRequest
from services.registration_service import RegistrationService

router = APIRouter(tags=["Users"])
logger = logging.getLogger("dailydiet.api.users")


def _parse_registration(payload: Dict[str, Any], settings: Settings) -> RegisterRequest:
    # validated here because the password minimum comes from the app's settings
    try:
        return RegisterRequest.model_validate(
            payload, context={"password_min_length": settings.password_min_length}
        )
    except ValidationError as exc:
        errors = [
            {**err, "loc": ("body", *err["loc"])}
            for err in exc.errors(include_url=False)
        ]
        raise RequestValidationError(errors, body=payload)


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        path="/",
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": RegisterRequest.model_json_schema()}
            },
        }
    },
)
def register(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a user and issue the session cookie.

    A session cookie already present on the request is reused instead of
    minting a new token.
    """
    body = _parse_registration(payload, settings)
    user, minted = RegistrationService.register(
        db,
        body,
        get_session_token(request),
        hash_rounds=settings.password_hash_rounds,
    )

    response = Response(status_code=status.HTTP_201_CREATED)
    if minted:
        _set_session_cookie(response, user.session_id, settings)
    return response
