"""
origin_registry.services.permissions

Builds permission contexts and evaluates capabilities for a caller.

Responsibilities:
- Fetch the organization and exchange deposit address for the caller.
- Hand an immutable snapshot to the pure rule engine and capability filter.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.auth.models import Principal
from origin_registry.db.repositories.organizations import OrganizationRepo
from origin_registry.exchange.client import ExchangeClient
from origin_registry.permissions.capabilities import (
    CERTIFICATES_MENU,
    default_certificates_item,
    visible_items,
)
from origin_registry.permissions.engine import (
    OrganizationSnapshot,
    PermissionContext,
    can_create_device,
)
from origin_registry.settings import Settings


class PermissionService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        exchange: ExchangeClient | None = None,
    ) -> None:
        self._organizations = OrganizationRepo(session)
        self._settings = settings
        self._exchange = exchange

    async def context_for(
        self, principal: Principal | None, *, access_token: str | None = None
    ) -> PermissionContext:
        if principal is None or principal.organization_id is None:
            return PermissionContext(principal=principal)

        org = await self._organizations.get(principal.organization_id)
        if org is None:
            return PermissionContext(principal=principal)

        if self._exchange is not None and access_token:
            address = await self._exchange.deposit_address(access_token=access_token)
        else:
            address = org.exchange_deposit_address

        return PermissionContext(
            principal=principal,
            organization=OrganizationSnapshot(id=org.id, status=org.status),
            exchange_deposit_address=address,
        )

    async def summary(
        self, principal: Principal | None, *, access_token: str | None = None
    ) -> dict[str, Any]:
        context = await self.context_for(principal, access_token=access_token)
        menu = visible_items(CERTIFICATES_MENU, context, self._settings.enabled_features)
        return {
            "canCreateDevice": can_create_device(context).as_dict(),
            "certificatesMenu": [item.key for item in menu],
            "defaultCertificatesItem": default_certificates_item(context),
        }
