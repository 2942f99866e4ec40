"""Pydantic schemas for the tool catalog."""

from datetime import datetime
from typing import Any

from pydantic import AnyHttpUrl, Field, field_validator

from syariahos.db.enums import SourceType
from syariahos.schemas.base import CamelModel


class ToolSource(CamelModel):
    """Structured citation. Quran uses surah/verse, hadith uses book/number."""
    type: SourceType
    surah: int | None = Field(None, ge=1, le=114)
    verse: int | None = Field(None, ge=1)
    book: str | None = Field(None, max_length=50)
    number: int | None = Field(None, ge=1)
    title: str | None = Field(None, max_length=255)
    url: str | None = Field(None, max_length=500)


class ToolBase(CamelModel):
    inputs: list[str] = []
    outputs: list[str] = []
    benefits: list[str] = []
    sharia_basis: str | None = None
    link: AnyHttpUrl | None = None
    related_directory_ids: list[int] = []
    related_dalil_text: str | None = None
    related_dalil_source: str | None = Field(None, max_length=500)
    sources: list[ToolSource] = []

    @field_validator("link")
    @classmethod
    def limit_link_length(cls, value: AnyHttpUrl | None) -> AnyHttpUrl | None:
        if value is not None and len(str(value)) > 500:
            raise ValueError("The link may not be greater than 500 characters.")
        return value


class ToolCreate(ToolBase):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class ToolUpdate(ToolBase):
    """Partial update (only fields present in the request are applied)."""
    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)


class ToolRead(CamelModel):
    id: int
    name: str
    category: str
    description: str
    inputs: list[str] | None
    outputs: list[str] | None
    benefits: list[str] | None
    sharia_basis: str | None
    link: str | None
    related_directory_ids: list[int] | None
    related_dalil_text: str | None
    related_dalil_source: str | None
    sources: list[dict[str, Any]] | None
    created_at: datetime
    updated_at: datetime


class ToolDetail(ToolRead):
    """Tool with its quran/hadith citations expanded (when requested)."""
    resolved_sources: list[dict[str, Any]] | None = None
