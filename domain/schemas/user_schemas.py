from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

DEFAULT_PASSWORD_MIN_LENGTH = 3


class RegisterRequest(BaseModel):
    """
    Body of POST /register.

    The password minimum is taken from the validation context key
    ``password_min_length`` when the caller provides one.
    """

    name: str = Field(..., min_length=2, description="Display name")
    email: EmailStr
    password: str = Field(..., description="Plain password, hashed before storage")

    @field_validator("password")
    @classmethod
    def check_password_length(cls, v: str, info: ValidationInfo) -> str:
        context = info.context or {}
        minimum = context.get("password_min_length", DEFAULT_PASSWORD_MIN_LENGTH)
        if len(v) < minimum:
            raise ValueError(f"Password must be at least {minimum} characters long.")
        return v
