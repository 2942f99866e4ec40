"""AI proxy service - wraps the Gemini generateContent endpoint.

The API key stays server side. Any failure (missing key, timeout,
connection error, non-2xx) surfaces as UpstreamServiceError (503).
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from syariahos.core.config import settings
from syariahos.core.errors import UpstreamServiceError
from syariahos.services import http_client

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "AI service is not configured"
UPSTREAM_ERROR = "AI service returned an error"
UNAVAILABLE = "AI service is temporarily unavailable"

_FENCE_RE = re.compile(r"^\s*```[\w-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a wrapping markdown code fence (``` or ```lang) if present."""
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def build_plan_prompt(goals: list[str], context: str | None = None) -> str:
    goals_json = json.dumps(goals, indent=4, ensure_ascii=False)
    prompt = (
        "You are an Islamic business strategy advisor. Generate a strategic plan "
        f"for the following goals:\n\n{goals_json}\n\n"
    )
    if context:
        prompt += f"Business context:\n{context}\n\n"
    return prompt + (
        "Provide a structured plan with actionable steps that align with Islamic "
        "business principles (shariah compliance, ethical practices, transparency)."
    )


def build_insight_prompt(kpi_data: dict[str, Any], goal_data: Any = None) -> str:
    payload: dict[str, Any] = {"kpi": kpi_data}
    if goal_data is not None:
        payload["goals"] = goal_data
    data_json = json.dumps(payload, indent=4, ensure_ascii=False)
    return (
        "You are an Islamic business analytics advisor. Analyze the following KPI "
        f"and performance data and provide insights:\n\n{data_json}\n\n"
        "Provide actionable insights for improving Islamic business compliance "
        "and performance."
    )


def _extract_text(data: dict[str, Any]) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


async def generate(prompt: str) -> str:
    """Send a single-turn prompt and return the first candidate's text."""
    if not settings.GEMINI_API_KEY:
        raise UpstreamServiceError(NOT_CONFIGURED)

    request_body = {"contents": [{"parts": [{"text": prompt}]}]}
    url = f"{settings.GEMINI_API_URL}/{settings.GEMINI_MODEL}:generateContent"

    try:
        async with http_client.create_client(settings.GEMINI_TIMEOUT) as client:
            response = await client.post(
                url,
                params={"key": settings.GEMINI_API_KEY},
                json=request_body,
            )
    except httpx.RequestError as exc:
        logger.error("Gemini API connection error: %s", type(exc).__name__)
        raise UpstreamServiceError(UNAVAILABLE) from exc

    if not response.is_success:
        logger.error("Gemini API error: status=%s", response.status_code)
        raise UpstreamServiceError(UPSTREAM_ERROR)

    try:
        data = response.json()
    except ValueError as exc:
        logger.error("Gemini API returned invalid JSON")
        raise UpstreamServiceError(UPSTREAM_ERROR) from exc
    return _extract_text(data)


async def chat(message: str) -> str:
    return await generate(message)


async def generate_plan(goals: list[str], context: str | None = None) -> str:
    raw = await generate(build_plan_prompt(goals, context))
    return strip_code_fences(raw)


async def insight(kpi_data: dict[str, Any], goal_data: Any = None) -> str:
    return await generate(build_insight_prompt(kpi_data, goal_data))
