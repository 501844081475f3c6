from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.db.models import Device
from origin_registry.devices.commands import DeviceCreationCommand


class DeviceRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, organization_id: str, command: DeviceCreationCommand) -> Device:
        device = Device(
            organization_id=organization_id,
            status=command.status,
            facility_name=command.facility_name,
            capacity_in_w=command.capacity_in_w,
            device_type=command.device_type,
            gps_latitude=command.gps_latitude,
            gps_longitude=command.gps_longitude,
            operational_since=command.operational_since,
            automatic_post_for_sale=command.automatic_post_for_sale,
            device_group=command.device_group,
            images=command.images,
            files=command.files,
            external_device_ids=list(command.external_device_ids),
            properties=dict(command.properties),
        )
        self._session.add(device)
        await self._session.flush()
        return device

    async def get(self, device_id: str) -> Device | None:
        return await self._session.get(Device, device_id)
