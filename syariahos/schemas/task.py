"""Pydantic schemas for tasks and their progress history."""

from datetime import datetime

from pydantic import Field

from syariahos.db.enums import ResetCycle
from syariahos.schemas.base import CamelModel


class TaskCreate(CamelModel):
    """Request to create a task. targetValue and unit are required when hasLimit."""
    text: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    has_limit: bool = False
    target_value: int | None = Field(None, ge=0)
    unit: str | None = Field(None, max_length=50)
    reset_cycle: ResetCycle | None = None
    per_check_enabled: bool = False
    increment_value: int = Field(1, ge=1)


class TaskUpdate(CamelModel):
    """Request to update a task (partial)."""
    text: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = Field(None, min_length=1, max_length=100)
    has_limit: bool | None = None
    target_value: int | None = Field(None, ge=0)
    unit: str | None = Field(None, max_length=50)
    reset_cycle: ResetCycle | None = None
    per_check_enabled: bool | None = None
    increment_value: int | None = Field(None, ge=1)


class TaskHistoryRead(CamelModel):
    id: int
    value: int
    note: str | None
    timestamp: datetime


class TaskRead(CamelModel):
    """Full task response, history oldest first."""
    id: int
    text: str
    category: str
    completed: bool
    progress: int
    has_limit: bool
    current_value: int
    target_value: int | None
    unit: str | None
    reset_cycle: str | None
    per_check_enabled: bool
    increment_value: int
    last_reset_at: datetime | None
    created_at: datetime
    updated_at: datetime
    history: list[TaskHistoryRead] = []


class ProgressCreate(CamelModel):
    """Progress increment; value defaults to the task's incrementValue."""
    value: int | None = Field(None, ge=1)
    note: str | None = Field(None, max_length=500)


class HistoryUpdate(CamelModel):
    """Partial correction of a history entry."""
    value: int | None = Field(None, ge=0)
    note: str | None = Field(None, max_length=500)


class CategoryRead(CamelModel):
    id: int
    name: str
