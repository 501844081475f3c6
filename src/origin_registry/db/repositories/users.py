"""
origin_registry.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Create users and look them up by id or (case-insensitive) email.
- Apply admin updates to status, KYC status, rights and membership.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.auth.models import KYCStatus, Role, UserStatus
from origin_registry.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        telephone: str,
        title: str | None = None,
        rights: Role = Role.OrganizationAdmin,
    ) -> User:
        user = User(
            email=email.lower(),
            password_hash=password_hash,
            title=title,
            first_name=first_name,
            last_name=last_name,
            telephone=telephone,
            rights=int(rights),
            status=UserStatus.pending,
            kyc_status=KYCStatus.pending,
            organization_id=None,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def update(
        self,
        user_id: str,
        *,
        status: UserStatus | None = None,
        kyc_status: KYCStatus | None = None,
        rights: Role | None = None,
        organization_id: str | None = None,
    ) -> User | None:
        user = await self._session.get(User, user_id, with_for_update=True)
        if user is None:
            return None
        if status is not None:
            user.status = status
        if kyc_status is not None:
            user.kyc_status = kyc_status
        if rights is not None:
            user.rights = int(rights)
        if organization_id is not None:
            user.organization_id = organization_id
        user.updated_at = datetime.utcnow()
        await self._session.flush()
        return user
