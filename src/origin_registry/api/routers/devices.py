"""
origin_registry.api.routers.devices

Device group registration endpoints.

Responsibilities:
- Accept raw device group form values and delegate validation and the
  server-side permission re-check to `DeviceService`.
- Serve access-checked device records.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from origin_registry.api.deps import db_session, settings_dep
from origin_registry.auth.deps import get_principal
from origin_registry.auth.models import Principal
from origin_registry.db.models import Device, DeviceStatus
from origin_registry.devices.validation import (
    DeviceGroupChild,
    DeviceGroupSubmission,
    FormValue,
)
from origin_registry.services.devices import DeviceService
from origin_registry.settings import Settings

router = APIRouter(tags=["devices"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeviceGroupChildForm(_CamelModel):
    # Loose types on purpose: value checks happen in DeviceGroupValidator so that
    # every invalid field is reported in one response.
    installation_name: FormValue = None
    address: FormValue = None
    city: FormValue = None
    latitude: FormValue = None
    longitude: FormValue = None
    capacity: FormValue = None
    meter_id: FormValue = None
    meter_type: FormValue = None


class DeviceGroupRequest(_CamelModel):
    facility_name: FormValue = None
    children: list[DeviceGroupChildForm] = Field(default_factory=list)
    external_device_ids: dict[str, str] = Field(default_factory=dict)

    def to_submission(self) -> DeviceGroupSubmission:
        return DeviceGroupSubmission(
            facility_name=self.facility_name,
            children=tuple(DeviceGroupChild(**c.model_dump()) for c in self.children),
            external_device_ids=dict(self.external_device_ids),
        )


class DeviceResponse(_CamelModel):
    id: str
    organization: str
    status: DeviceStatus
    facility_name: str
    capacity_in_w: int
    device_type: str
    gps_latitude: str
    gps_longitude: str
    operational_since: int
    automatic_post_for_sale: bool
    device_group: list[dict[str, Any]]
    images: list[str]
    external_device_ids: list[dict[str, str]]

    @classmethod
    def from_device(cls, device: Device) -> DeviceResponse:
        return cls(
            id=device.id,
            organization=device.organization_id,
            status=device.status,
            facility_name=device.facility_name,
            capacity_in_w=device.capacity_in_w,
            device_type=device.device_type,
            gps_latitude=device.gps_latitude,
            gps_longitude=device.gps_longitude,
            operational_since=device.operational_since,
            automatic_post_for_sale=device.automatic_post_for_sale,
            device_group=json.loads(device.device_group),
            images=json.loads(device.images),
            external_device_ids=device.external_device_ids,
        )


@router.post("/device-group", response_model=DeviceResponse, status_code=HTTP_201_CREATED)
async def submit_device_group(
    body: DeviceGroupRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DeviceResponse:
    device = await DeviceService(session=session, settings=settings).submit_group(
        actor=principal, submission=body.to_submission()
    )
    return DeviceResponse.from_device(device)


@router.get("/device/{device_id}", response_model=DeviceResponse)
async def get_device(
    device_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> DeviceResponse:
    device = await DeviceService(session=session, settings=settings).get_for(principal, device_id)
    return DeviceResponse.from_device(device)
