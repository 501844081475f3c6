from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from origin_registry.api.deps import db_session
from origin_registry.auth.deps import get_principal, require_roles
from origin_registry.auth.models import OrganizationStatus, Principal, Role
from origin_registry.db.models import Organization
from origin_registry.services.organizations import OrganizationService

router = APIRouter(prefix="/organization", tags=["organizations"])


class OrganizationCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)


class OrganizationStatusRequest(BaseModel):
    status: OrganizationStatus


class DepositAddressRequest(BaseModel):
    address: str | None = Field(default=None, max_length=128)


class OrganizationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    status: OrganizationStatus
    exchange_deposit_address: str | None

    @classmethod
    def from_org(cls, org: Organization) -> OrganizationResponse:
        return cls(
            id=org.id,
            name=org.name,
            status=org.status,
            exchange_deposit_address=org.exchange_deposit_address,
        )


@router.post("", response_model=OrganizationResponse, status_code=HTTP_201_CREATED)
async def create_organization(
    body: OrganizationCreateRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> OrganizationResponse:
    org = await OrganizationService(session=session).create(actor=principal, name=body.name)
    return OrganizationResponse.from_org(org)


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(
    organization_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> OrganizationResponse:
    org = await OrganizationService(session=session).get_for(principal, organization_id)
    return OrganizationResponse.from_org(org)


@router.put("/{organization_id}/status", response_model=OrganizationResponse)
async def set_organization_status(
    organization_id: str,
    body: OrganizationStatusRequest,
    principal: Principal = Depends(require_roles(Role.Admin, Role.SupportAgent)),
    session: AsyncSession = Depends(db_session),
) -> OrganizationResponse:
    org = await OrganizationService(session=session).set_status(
        actor=principal, organization_id=organization_id, status=body.status
    )
    return OrganizationResponse.from_org(org)


@router.put("/{organization_id}/exchange-deposit-address", response_model=OrganizationResponse)
async def set_exchange_deposit_address(
    organization_id: str,
    body: DepositAddressRequest,
    principal: Principal = Depends(require_roles(Role.Admin)),
    session: AsyncSession = Depends(db_session),
) -> OrganizationResponse:
    org = await OrganizationService(session=session).set_exchange_deposit_address(
        actor=principal, organization_id=organization_id, address=body.address
    )
    return OrganizationResponse.from_org(org)
