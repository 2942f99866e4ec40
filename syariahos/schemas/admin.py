"""Pydantic schemas for admin logs and platform statistics."""

from datetime import datetime
from typing import Any

from pydantic import Field

from syariahos.schemas.base import CamelModel


class LogActor(CamelModel):
    id: int
    name: str
    email: str


class ActivityLogRead(CamelModel):
    id: int
    user_id: int | None
    user: LogActor | None = None
    action: str
    subject_type: str | None
    subject_id: int | None
    details: dict[str, Any] | None = Field(None, serialization_alias="metadata")
    created_at: datetime


class StatsRead(CamelModel):
    total_users: int
    total_tasks: int
    completed_tasks: int
    active_users: int
    recent_activity: list[ActivityLogRead]


class MonthlyGrowth(CamelModel):
    month: str
    month_full: str
    new_users: int
    total_users: int
    active_users: int
    growth_rate: float


class GrowthSummary(CamelModel):
    total_new_users: int
    avg_growth_rate: float
    active_users: int


class UserGrowthRead(CamelModel):
    monthly: list[MonthlyGrowth]
    summary: GrowthSummary
