"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any


def build_log_context(
    *,
    user_id: int | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
    status_code: int | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict (ids only, never emails or bodies)."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    if status_code:
        context["status_code"] = status_code
    return context


def configure_logging(env: str) -> None:
    """Root logging setup: INFO in dev, WARNING elsewhere."""
    logging.basicConfig(
        level=logging.INFO if env == "dev" else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
