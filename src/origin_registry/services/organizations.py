from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.auth.models import OrganizationStatus, Principal
from origin_registry.auth.policy import decide_organization_access
from origin_registry.db.models import Organization
from origin_registry.db.repositories.audit import AuditRepo
from origin_registry.db.repositories.organizations import OrganizationRepo
from origin_registry.db.repositories.users import UserRepo
from origin_registry.errors import AuthorizationError, ConflictError, NotFoundError
from origin_registry.observability.logging import get_logger

log = get_logger(__name__)


class OrganizationService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._organizations = OrganizationRepo(session)
        self._users = UserRepo(session)
        self._audit = AuditRepo(session)

    async def create(self, *, actor: Principal, name: str) -> Organization:
        if actor.organization_id is not None:
            raise ConflictError("User already belongs to an organization")

        org = await self._organizations.create(name=name)
        await self._users.update(actor.id, organization_id=org.id)
        await self._audit.add(
            subject_type="organization",
            subject_id=org.id,
            actor=actor.id,
            event_type="ORGANIZATION_SUBMITTED",
            details={"name": name},
        )
        await self._session.commit()
        log.info("organization_submitted", organization_id=org.id, user_id=actor.id)
        return org

    async def get_for(self, actor: Principal, organization_id: str) -> Organization:
        decision = decide_organization_access(actor, organization_id)
        if not decision.allowed:
            log.info("access_denied", organization_id=organization_id, reason=decision.reason)
            raise AuthorizationError()
        org = await self._organizations.get(organization_id)
        if org is None:
            raise NotFoundError()
        return org

    async def set_status(
        self, *, actor: Principal, organization_id: str, status: OrganizationStatus
    ) -> Organization:
        org = await self._organizations.set_status(organization_id, status)
        if org is None:
            raise NotFoundError()
        await self._audit.add(
            subject_type="organization",
            subject_id=org.id,
            actor=actor.id,
            event_type="ORGANIZATION_STATUS_CHANGED",
            details={"status": status.value},
        )
        await self._session.commit()
        return org

    async def set_exchange_deposit_address(
        self, *, actor: Principal, organization_id: str, address: str | None
    ) -> Organization:
        org = await self._organizations.set_exchange_deposit_address(organization_id, address)
        if org is None:
            raise NotFoundError()
        await self._audit.add(
            subject_type="organization",
            subject_id=org.id,
            actor=actor.id,
            event_type="EXCHANGE_DEPOSIT_ADDRESS_SET",
            details={"address": address},
        )
        await self._session.commit()
        return org
