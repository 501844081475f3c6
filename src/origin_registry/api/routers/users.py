"""
origin_registry.api.routers.users

User registration and profile endpoints.

Responsibilities:
- Register users (201 / 409 duplicate email / 400 missing fields).
- Serve the caller's own profile and access-checked profiles of others.
- Admin/support updates of status, KYC status and rights.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from origin_registry.api.deps import db_session, settings_dep
from origin_registry.auth.deps import get_principal, require_roles
from origin_registry.auth.models import (
    KYCStatus,
    Principal,
    Role,
    UserStatus,
    rights_from_names,
    role_names,
)
from origin_registry.db.models import User
from origin_registry.services.users import UserRegistrationData, UserService
from origin_registry.settings import Settings

router = APIRouter(prefix="/user", tags=["users"])


class UserResponse(BaseModel):
    # Never carries the password or its hash.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str | None
    first_name: str
    last_name: str
    email: str
    telephone: str
    rights: int
    roles: list[str]
    status: UserStatus
    kyc_status: KYCStatus
    organization: str | None

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            title=user.title,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            telephone=user.telephone,
            rights=user.rights,
            roles=role_names(Role(user.rights)),
            status=user.status,
            kyc_status=user.kyc_status,
            organization=user.organization_id,
        )


class UserUpdateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: UserStatus | None = None
    kyc_status: KYCStatus | None = None
    roles: list[str] | None = None

    @field_validator("roles")
    @classmethod
    def _known_roles(cls, value: list[str] | None) -> list[str] | None:
        # Names are case-sensitive; an unknown name fails the whole request.
        if value is not None:
            rights_from_names(value)
        return value

    def rights(self) -> Role | None:
        return rights_from_names(self.roles) if self.roles is not None else None


@router.post("/register", response_model=UserResponse, status_code=HTTP_201_CREATED)
async def register(
    body: UserRegistrationData,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserResponse:
    user = await UserService(session=session, settings=settings).register(body)
    return UserResponse.from_user(user)


@router.get("/me", response_model=UserResponse)
async def me(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserResponse:
    user = await UserService(session=session, settings=settings).me(principal)
    return UserResponse.from_user(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserResponse:
    user = await UserService(session=session, settings=settings).get_for(principal, user_id)
    return UserResponse.from_user(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    principal: Principal = Depends(require_roles(Role.Admin, Role.SupportAgent)),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> UserResponse:
    user = await UserService(session=session, settings=settings).update(
        actor=principal,
        user_id=user_id,
        status=body.status,
        kyc_status=body.kyc_status,
        rights=body.rights(),
    )
    return UserResponse.from_user(user)
