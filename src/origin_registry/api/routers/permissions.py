from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.api.deps import db_session, exchange_client, settings_dep
from origin_registry.auth.deps import bearer_token, get_optional_principal
from origin_registry.auth.models import Principal
from origin_registry.exchange.client import ExchangeClient
from origin_registry.services.permissions import PermissionService
from origin_registry.settings import Settings

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("/me")
async def my_permissions(
    principal: Principal | None = Depends(get_optional_principal),
    token: str | None = Depends(bearer_token),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    exchange: ExchangeClient | None = Depends(exchange_client),
) -> dict[str, Any]:
    # Advisory only: write endpoints re-check access on their own.
    svc = PermissionService(session=session, settings=settings, exchange=exchange)
    return await svc.summary(principal, access_token=token)
