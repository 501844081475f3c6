"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the FastAPI app starts and DB readiness check works in test mode.
"""

from __future__ import annotations

import httpx
import pytest

from origin_registry import __version__


@pytest.mark.asyncio
async def test_health_endpoints(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "version": __version__}

    r = await client.get("/readyz")
    assert r.status_code == 200
    assert r.json() == {"status": "ready", "exchange": "local"}


@pytest.mark.asyncio
async def test_request_id_is_propagated(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"

    r = await client.get("/healthz")
    assert r.headers["x-request-id"]


# --- Module Notes -----------------------------------------------------------
# Endpoint behavior is covered by the `test_*_api.py` modules.
