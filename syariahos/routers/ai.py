"""AI assistant router - chat, plan generation and KPI insights."""

from fastapi import APIRouter, Depends

from syariahos.core.deps import get_current_user
from syariahos.schemas.ai import (
    ChatRequest,
    ChatResponse,
    InsightRequest,
    InsightResponse,
    PlanRequest,
    PlanResponse,
)
from syariahos.services import ai_proxy_service

router = APIRouter(prefix="/ai", tags=["AI"], dependencies=[Depends(get_current_user)])


@router.post("/chat", response_model=ChatResponse)
async def chat(data: ChatRequest):
    return {"response": await ai_proxy_service.chat(data.message)}


@router.post("/generate-plan", response_model=PlanResponse)
async def generate_plan(data: PlanRequest):
    """Plan text with any wrapping markdown code fence removed."""
    return {"plan": await ai_proxy_service.generate_plan(data.goals, data.context)}


@router.post("/insight", response_model=InsightResponse)
async def insight(data: InsightRequest):
    return {"insights": await ai_proxy_service.insight(data.kpi_data, data.goal_data)}
