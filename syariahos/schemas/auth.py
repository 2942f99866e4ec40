"""Pydantic schemas for registration, login and tokens."""

from pydantic import EmailStr, Field, ValidationInfo, field_validator

from syariahos.schemas.base import CamelModel
from syariahos.schemas.user import UserRead


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=255)
    password_confirmation: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("The password confirmation does not match.")
        return value


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(CamelModel):
    """Register/login response: bearer token plus the user."""
    message: str
    token: str
    data: UserRead
