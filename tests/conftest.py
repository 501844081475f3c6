"""
tests.conftest

Shared fixtures for API tests.

Responsibilities:
- Boot the FastAPI app against a throwaway SQLite database per test.
- Provide an httpx client over ASGITransport.
- Seed accounts and organizations with the roles/statuses a test needs.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from origin_registry.api.app import create_app
from origin_registry.auth.models import OrganizationStatus, Role, UserStatus, build_rights
from origin_registry.db.repositories.organizations import OrganizationRepo
from origin_registry.db.repositories.users import UserRepo
from origin_registry.settings import Settings

PASSWORD = "correct horse battery staple"


def registration_body(email: str, **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "title": "Dr",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": email,
        "password": PASSWORD,
        "telephone": "+44 20 7946 0000",
    }
    body.update(overrides)
    return body


@dataclass(frozen=True)
class Account:
    id: str
    email: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class Registry:
    """Seeds records directly through repositories, then logs in over HTTP."""

    def __init__(self, app: FastAPI, client: httpx.AsyncClient) -> None:
        self._app = app
        self._client = client
        self._seq = 0

    async def organization(
        self,
        *,
        status: OrganizationStatus = OrganizationStatus.active,
        address: str | None = None,
    ) -> str:
        async with self._app.state.sessionmaker() as session:
            repo = OrganizationRepo(session)
            org = await repo.create(name=f"Solar Co {self._seq}")
            self._seq += 1
            await repo.set_status(org.id, status)
            if address is not None:
                await repo.set_exchange_deposit_address(org.id, address)
            await session.commit()
            return org.id

    async def account(
        self,
        email: str,
        *,
        roles: Iterable[Role] = (Role.OrganizationAdmin,),
        status: UserStatus = UserStatus.active,
        organization_id: str | None = None,
    ) -> Account:
        r = await self._client.post("/user/register", json=registration_body(email))
        assert r.status_code == 201, r.text
        user_id = r.json()["id"]

        async with self._app.state.sessionmaker() as session:
            await UserRepo(session).update(
                user_id,
                status=status,
                rights=build_rights(roles),
                organization_id=organization_id,
            )
            await session.commit()

        r = await self._client.post("/auth/login", json={"username": email, "password": PASSWORD})
        assert r.status_code == 200, r.text
        return Account(id=user_id, email=email, token=r.json()["accessToken"])


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'origin.db'}",
        jwt_secret="test-secret",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def registry(app: FastAPI, client: httpx.AsyncClient) -> Registry:
    return Registry(app, client)
