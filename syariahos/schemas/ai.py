"""Pydantic schemas for the AI assistant endpoints."""

from typing import Annotated, Any

from pydantic import Field

from syariahos.schemas.base import CamelModel


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(CamelModel):
    response: str


class PlanRequest(CamelModel):
    goals: list[Annotated[str, Field(min_length=1, max_length=500)]] = Field(
        ..., min_length=1
    )
    context: str | None = Field(None, max_length=2000)


class PlanResponse(CamelModel):
    plan: str


class InsightRequest(CamelModel):
    kpi_data: dict[str, Any]
    goal_data: list[Any] | dict[str, Any] | None = None


class InsightResponse(CamelModel):
    insights: str
