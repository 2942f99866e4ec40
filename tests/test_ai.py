"""Tests for the AI proxy endpoints."""
import json

import httpx
import pytest
from httpx import AsyncClient

from syariahos.core.config import settings
from syariahos.services import ai_proxy_service


def gemini_reply(text: str):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
        )
    return handler


@pytest.fixture
def gemini_key(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("```json\n{\"a\": 1}\n```", "{\"a\": 1}"),
        ("```\nPlan A\n```", "Plan A"),
        ("  Plain text  ", "Plain text"),
        ("Use ``` inline", "Use ``` inline"),
    ],
)
def test_strip_code_fences(raw, expected):
    assert ai_proxy_service.strip_code_fences(raw) == expected


def test_plan_prompt_includes_goals_and_context():
    prompt = ai_proxy_service.build_plan_prompt(["Tambah omzet"], "Toko herbal")
    assert "Tambah omzet" in prompt
    assert "Business context:\nToko herbal" in prompt


@pytest.mark.asyncio
async def test_ai_requires_auth(client: AsyncClient, upstream):
    response = await client.post("/ai/chat", json={"message": "Halo"})
    assert response.status_code == 401
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_chat_not_configured(authed_client: AsyncClient, upstream, monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    response = await authed_client.post("/ai/chat", json={"message": "Halo"})
    assert response.status_code == 503
    assert response.json() == {"message": "AI service is not configured"}
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_chat_forwards_prompt(authed_client: AsyncClient, upstream, gemini_key):
    upstream.handler = gemini_reply("Wa'alaikumsalam")

    response = await authed_client.post("/ai/chat", json={"message": "Assalamualaikum"})
    assert response.status_code == 200
    assert response.json() == {"response": "Wa'alaikumsalam"}

    request = upstream.requests[0]
    assert request.method == "POST"
    assert request.url.path.endswith(f"/{settings.GEMINI_MODEL}:generateContent")
    assert request.url.params["key"] == "test-key"
    body = json.loads(request.content)
    assert body == {"contents": [{"parts": [{"text": "Assalamualaikum"}]}]}


@pytest.mark.asyncio
async def test_generate_plan_strips_fences(authed_client: AsyncClient, upstream, gemini_key):
    upstream.handler = gemini_reply("```markdown\n1. Audit akad\n2. Sertifikasi halal\n```")

    response = await authed_client.post(
        "/ai/generate-plan", json={"goals": ["Kepatuhan penuh"], "context": "UMKM"}
    )
    assert response.status_code == 200
    assert response.json() == {"plan": "1. Audit akad\n2. Sertifikasi halal"}
    prompt = json.loads(upstream.requests[0].content)["contents"][0]["parts"][0]["text"]
    assert "Kepatuhan penuh" in prompt


@pytest.mark.asyncio
async def test_insight(authed_client: AsyncClient, upstream, gemini_key):
    upstream.handler = gemini_reply("Tingkatkan kepatuhan")

    response = await authed_client.post(
        "/ai/insight", json={"kpiData": {"totalTasks": 4}, "goalData": [{"category": "SDM"}]}
    )
    assert response.status_code == 200
    assert response.json() == {"insights": "Tingkatkan kepatuhan"}


@pytest.mark.asyncio
async def test_upstream_error_is_503(authed_client: AsyncClient, upstream, gemini_key):
    upstream.handler = lambda request: httpx.Response(429, json={"error": "quota"})
    response = await authed_client.post("/ai/chat", json={"message": "Halo"})
    assert response.status_code == 503
    assert response.json() == {"message": "AI service returned an error"}


@pytest.mark.asyncio
async def test_upstream_timeout_is_503(authed_client: AsyncClient, upstream, gemini_key):
    def timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream.handler = timeout
    response = await authed_client.post("/ai/chat", json={"message": "Halo"})
    assert response.status_code == 503
    assert response.json() == {"message": "AI service is temporarily unavailable"}
    assert len(upstream.requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path,payload,field",
    [
        ("/ai/chat", {"message": "x" * 2001}, "message"),
        ("/ai/chat", {"message": ""}, "message"),
        ("/ai/generate-plan", {"goals": []}, "goals"),
        ("/ai/insight", {}, "kpiData"),
    ],
)
async def test_validation(authed_client: AsyncClient, upstream, gemini_key, path, payload, field):
    response = await authed_client.post(path, json=payload)
    assert response.status_code == 422
    assert field in response.json()["errors"]
    assert upstream.requests == []
