from datetime import datetime

from pydantic import Field, field_validator

from backend.schemas.base import CamelModel
from backend.utils.validators import is_valid_email


def _check_email(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Email address is required.")
    if len(value) > 255:
        raise ValueError("Email address can be at most 255 characters.")
    if not is_valid_email(value):
        raise ValueError("Enter a valid email address.")
    return value


class RegisterUserRequest(CamelModel):
    email: str
    password: str = Field(min_length=6, max_length=100)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value):
        return _check_email(value)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, value):
        if not value.strip():
            raise ValueError("Name is required.")
        return value


class LoginUserRequest(CamelModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value):
        return _check_email(value)


class UserOut(CamelModel):
    id: int
    email: str
    first_name: str
    last_name: str


class AuthResponse(CamelModel):
    token: str
    expires_at: datetime
    user: UserOut
