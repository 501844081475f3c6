"""
origin_registry.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Enforce role checks via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED

from origin_registry.api.deps import db_session, settings_dep
from origin_registry.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from origin_registry.auth.models import Principal, Role, UserStatus
from origin_registry.db.repositories.users import UserRepo
from origin_registry.settings import Settings

_bearer = HTTPBearer(auto_error=False)


async def _resolve(
    creds: HTTPAuthorizationCredentials | None,
    settings: Settings,
    session: AsyncSession,
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        # Authn: validate signature and registered claims (iss/aud/exp/sub...).
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    subject = str(payload.get("sub", ""))
    if not subject:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid token subject")

    # Rights, organization and status are read from the stored user so that
    # changes made after login take effect on the next request.
    user = await UserRepo(session).get(subject)
    if user is None or user.status == UserStatus.deleted:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    return Principal(
        id=user.id,
        rights=Role(user.rights),
        organization_id=user.organization_id,
        status=user.status,
    )


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    return await _resolve(creds, settings, session)


async def get_optional_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal | None:
    # Anonymous callers are a valid input for permission evaluation.
    if creds is None or not creds.credentials:
        return None
    try:
        return await _resolve(creds, settings, session)
    except HTTPException:
        return None


def bearer_token(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str | None:
    # Raw token, forwarded to the exchange on the caller's behalf.
    return creds.credentials if creds is not None and creds.credentials else None


def require_roles(*required: Role):
    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        # Any one of the listed roles is sufficient; admin always passes.
        if principal.is_admin or principal.has_role(*required):
            return principal
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    return _dep


# --- Module Notes -----------------------------------------------------------
# Forbidden callers receive 401, the same status as unauthenticated ones.
