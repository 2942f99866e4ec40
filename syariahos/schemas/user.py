"""Pydantic schemas for users and profiles."""

from datetime import datetime
from decimal import Decimal

from pydantic import AnyHttpUrl, EmailStr, Field, field_validator

from syariahos.db.enums import CalculationMethod, Role, Theme
from syariahos.schemas.base import CamelModel


class UserRead(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    theme: Theme
    profile_picture: str | None = None
    zakat_rate: float | None = None
    preferred_akad: str | None = None
    calculation_method: CalculationMethod | None = None
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    """Partial profile update; only supplied fields change."""
    name: str | None = Field(None, min_length=1, max_length=255)
    profile_picture: AnyHttpUrl | None = None
    theme: Theme | None = None
    zakat_rate: Decimal | None = Field(None, ge=0, le=100)
    preferred_akad: str | None = Field(None, max_length=100)
    calculation_method: CalculationMethod | None = None

    @field_validator("profile_picture")
    @classmethod
    def limit_url_length(cls, value: AnyHttpUrl | None) -> AnyHttpUrl | None:
        if value is not None and len(str(value)) > 500:
            raise ValueError("The profile picture URL may not be greater than 500 characters.")
        return value


class AdminUserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=255)
    role: Role = Role.USER

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class AdminUserUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=8, max_length=255)
    role: Role | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.strip().lower() if value else value
