"""
origin_registry.services.users

User registration, login and access-checked user lookups.

Responsibilities:
- Validate registration data wholesale before touching the database.
- Enforce unique emails (Conflict) and registration defaults.
- Issue access tokens on login.
- Apply `auth.policy` to user reads; denials stay opaque to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.auth.jwt import JwtConfig, issue_token
from origin_registry.auth.models import KYCStatus, Principal, Role, UserStatus, role_names
from origin_registry.auth.passwords import hash_password, verify_password
from origin_registry.auth.policy import (
    ReasonCode,
    UserTarget,
    decide_rights_change,
    decide_user_access,
)
from origin_registry.db.models import User
from origin_registry.db.repositories.audit import AuditRepo
from origin_registry.db.repositories.users import UserRepo
from origin_registry.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    FieldError,
    NotFoundError,
    ValidationError,
)
from origin_registry.observability.logging import get_logger
from origin_registry.settings import Settings

log = get_logger(__name__)

DEFAULT_RIGHTS = Role.OrganizationAdmin


class UserRegistrationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str | None = Field(default=None, max_length=32)
    first_name: str = Field(alias="firstName", min_length=1, max_length=128)
    last_name: str = Field(alias="lastName", min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)
    telephone: str = Field(min_length=1, max_length=64)


def field_errors_from_pydantic(exc: pydantic.ValidationError) -> list[FieldError]:
    return [
        FieldError(path=".".join(str(part) for part in err["loc"]) or "root", message=err["msg"])
        for err in exc.errors()
    ]


class UserService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)
        self._audit = AuditRepo(session)

    async def register(self, data: UserRegistrationData | Mapping[str, Any]) -> User:
        if not isinstance(data, UserRegistrationData):
            try:
                data = UserRegistrationData.model_validate(dict(data))
            except pydantic.ValidationError as e:
                raise ValidationError(field_errors_from_pydantic(e)) from e

        if await self._users.get_by_email(data.email) is not None:
            raise ConflictError("User with this email already exists")

        try:
            user = await self._users.create(
                email=data.email,
                password_hash=hash_password(data.password),
                title=data.title,
                first_name=data.first_name,
                last_name=data.last_name,
                telephone=data.telephone,
                rights=DEFAULT_RIGHTS,
            )
        except IntegrityError as e:
            # Concurrent registration with the same email won the unique index.
            await self._session.rollback()
            raise ConflictError("User with this email already exists") from e

        await self._audit.add(
            subject_type="user", subject_id=user.id, actor=user.id, event_type="USER_REGISTERED"
        )
        await self._session.commit()
        log.info("user_registered", user_id=user.id)
        return user

    async def login(self, *, email: str, password: str) -> str:
        user = await self._users.get_by_email(email)
        if (
            user is None
            or user.status == UserStatus.deleted
            or not verify_password(password, user.password_hash)
        ):
            log.info("login_failed")
            raise AuthenticationError()

        token = issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            subject=user.id,
            roles=role_names(Role(user.rights)),
            organization_id=user.organization_id,
            ttl=timedelta(minutes=self._settings.access_token_ttl_minutes),
        )
        log.info("login_succeeded", user_id=user.id)
        return token

    async def me(self, principal: Principal) -> User:
        user = await self._users.get(principal.id)
        if user is None:
            raise NotFoundError()
        return user

    async def get_for(self, actor: Principal, user_id: str) -> User:
        user = await self._users.get(user_id)
        if user is None:
            log.info("access_denied", target_user_id=user_id, reason=ReasonCode.not_found)
            raise NotFoundError()

        decision = decide_user_access(
            actor, UserTarget(id=user.id, organization_id=user.organization_id)
        )
        if not decision.allowed:
            log.info("access_denied", target_user_id=user_id, reason=decision.reason)
            raise AuthorizationError()
        return user

    async def update(
        self,
        *,
        actor: Principal,
        user_id: str,
        status: UserStatus | None = None,
        kyc_status: KYCStatus | None = None,
        rights: Role | None = None,
    ) -> User:
        if rights is not None:
            target = await self._users.get(user_id)
            if target is None:
                raise NotFoundError()
            decision = decide_rights_change(actor, Role(target.rights), rights)
            if not decision.allowed:
                log.info("rights_change_denied", target_user_id=user_id, reason=decision.reason)
                raise AuthorizationError()

        user = await self._users.update(
            user_id, status=status, kyc_status=kyc_status, rights=rights
        )
        if user is None:
            raise NotFoundError()
        await self._audit.add(
            subject_type="user",
            subject_id=user.id,
            actor=actor.id,
            event_type="USER_UPDATED",
            details={
                "status": status.value if status else None,
                "kyc_status": kyc_status.value if kyc_status else None,
                "rights": int(rights) if rights is not None else None,
            },
        )
        await self._session.commit()
        return user


# --- Module Notes -----------------------------------------------------------
# Registration never assigns an organization; `services.organizations` does.
