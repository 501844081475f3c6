"""
origin_registry.exchange.client

HTTP client boundary for the trading exchange.

Responsibilities:
- Fetch the caller's exchange deposit address, forwarding the caller's bearer token.
- Degrade to "no address" on transport or HTTP failures so permission
  evaluation can report the unmet requirement instead of failing the request.
"""

from __future__ import annotations

import httpx

from origin_registry.observability.logging import get_logger
from origin_registry.settings import Settings

log = get_logger(__name__)


class ExchangeClient:
    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http

    def _url(self, path: str) -> str:
        base = (self._settings.exchange_api_base_url or "").rstrip("/")
        return f"{base}{path}"

    async def deposit_address(self, *, access_token: str) -> str | None:
        try:
            r = await self._http.get(
                self._url("/account"),
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self._settings.exchange_timeout_seconds,
            )
            r.raise_for_status()
            body = r.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("exchange_account_lookup_failed", error=str(e))
            return None

        address = body.get("address") if isinstance(body, dict) else None
        return address if isinstance(address, str) and address else None


# --- Module Notes -----------------------------------------------------------
# The shared `httpx.AsyncClient` lives on app.state and is closed on shutdown.
