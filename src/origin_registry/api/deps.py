"""
origin_registry.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the exchange client.
- Encapsulate app.state access patterns (settings/engine/sessionmaker/http).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from origin_registry.exchange.client import ExchangeClient
from origin_registry.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Settings are attached by `origin_registry.api.app.create_app`.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created on app startup in `origin_registry.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def exchange_client(
    request: Request,
    settings: Settings = Depends(settings_dep),
) -> ExchangeClient | None:
    # No exchange configured: deposit addresses are read from organization records.
    if not settings.exchange_api_base_url:
        return None
    return ExchangeClient(settings=settings, http=request.app.state.http)  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# Tests override `exchange_client` through `app.dependency_overrides`.
