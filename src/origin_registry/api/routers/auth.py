from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.api.deps import db_session, settings_dep
from origin_registry.services.users import UserService
from origin_registry.settings import Settings

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    # The login form sends the email under `username`.
    username: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=256)


class LoginResponse(BaseModel):
    accessToken: str  # noqa: N815


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> LoginResponse:
    token = await UserService(session=session, settings=settings).login(
        email=body.username, password=body.password
    )
    return LoginResponse(accessToken=token)
