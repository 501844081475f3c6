"""
origin_registry.services.devices

Device group submission (transaction + persistence owner).

Responsibilities:
- Re-check on the server that the caller may register devices for its organization.
- Validate the submission and convert it into a device-creation command.
- Persist the device and an audit event.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.auth.models import Principal
from origin_registry.auth.policy import (
    OrganizationTarget,
    decide_device_registration,
    decide_organization_access,
)
from origin_registry.db.models import Device
from origin_registry.db.repositories.audit import AuditRepo
from origin_registry.db.repositories.devices import DeviceRepo
from origin_registry.db.repositories.organizations import OrganizationRepo
from origin_registry.devices.commands import accept_submission
from origin_registry.devices.validation import DeviceGroupSubmission, DeviceGroupValidator
from origin_registry.errors import AuthorizationError, NotFoundError
from origin_registry.observability.logging import get_logger
from origin_registry.settings import Settings

log = get_logger(__name__)


class DeviceService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._validator = DeviceGroupValidator.from_settings(settings)
        self._devices = DeviceRepo(session)
        self._organizations = OrganizationRepo(session)
        self._audit = AuditRepo(session)

    async def submit_group(self, *, actor: Principal, submission: DeviceGroupSubmission) -> Device:
        org = (
            await self._organizations.get(actor.organization_id)
            if actor.organization_id
            else None
        )
        decision = decide_device_registration(
            actor, OrganizationTarget(id=org.id, status=org.status) if org else None
        )
        if not decision.allowed or org is None:
            log.info("device_registration_denied", user_id=actor.id, reason=decision.reason)
            raise AuthorizationError()

        command = accept_submission(
            self._validator,
            submission,
            external_id_types=[t.type for t in self._settings.external_device_id_types],
        )
        device = await self._devices.create(organization_id=org.id, command=command)
        await self._audit.add(
            subject_type="device",
            subject_id=device.id,
            actor=actor.id,
            event_type="DEVICE_GROUP_SUBMITTED",
            details={
                "organization_id": org.id,
                "capacity_in_w": command.capacity_in_w,
                "installations": len(submission.children),
            },
        )
        await self._session.commit()
        log.info(
            "device_group_submitted",
            device_id=device.id,
            organization_id=org.id,
            capacity_in_w=command.capacity_in_w,
        )
        return device

    async def get_for(self, actor: Principal, device_id: str) -> Device:
        device = await self._devices.get(device_id)
        if device is None:
            raise NotFoundError()
        decision = decide_organization_access(actor, device.organization_id)
        if not decision.allowed:
            log.info("access_denied", device_id=device_id, reason=decision.reason)
            raise AuthorizationError()
        return device
