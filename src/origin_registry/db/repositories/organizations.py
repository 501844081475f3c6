from __future__ import annotations

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.auth.models import OrganizationStatus
from origin_registry.db.models import Organization


class OrganizationRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, name: str) -> Organization:
        org = Organization(name=name, status=OrganizationStatus.pending)
        self._session.add(org)
        await self._session.flush()
        return org

    async def get(self, organization_id: str) -> Organization | None:
        return await self._session.get(Organization, organization_id)

    async def set_status(
        self, organization_id: str, status: OrganizationStatus
    ) -> Organization | None:
        org = await self._session.get(Organization, organization_id, with_for_update=True)
        if org is None:
            return None
        org.status = status
        org.updated_at = datetime.utcnow()
        await self._session.flush()
        return org

    async def set_exchange_deposit_address(
        self, organization_id: str, address: str | None
    ) -> Organization | None:
        org = await self._session.get(Organization, organization_id, with_for_update=True)
        if org is None:
            return None
        org.exchange_deposit_address = address
        org.updated_at = datetime.utcnow()
        await self._session.flush()
        return org
