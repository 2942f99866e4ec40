"""Outbound HTTP client factory.

Every upstream call goes through create_client so tests can substitute an
httpx.MockTransport. Calls are made once: no retry, no backoff.
"""

import httpx


def create_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, headers={"Accept": "application/json"})
