"""Pydantic schemas for the reference directory tree."""

from pydantic import Field

from syariahos.db.enums import DirectoryItemType
from syariahos.schemas.base import CamelModel


class DirectoryContent(CamelModel):
    """Payload of an item node: dalil text, its citation and an explanation."""
    dalil: str | None = None
    source: str | None = Field(None, max_length=255)
    explanation: str | None = None


class DirectoryItemCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: DirectoryItemType
    parent_id: int | None = None
    content: DirectoryContent | None = None


class DirectoryItemUpdate(CamelModel):
    """Partial update; send parentId null to move a node to the root."""
    title: str | None = Field(None, min_length=1, max_length=255)
    parent_id: int | None = None
    content: DirectoryContent | None = None


class DirectoryNode(CamelModel):
    id: int
    title: str
    type: DirectoryItemType
    parent_id: int | None
    content: DirectoryContent | None = None
    children: list["DirectoryNode"] = []
