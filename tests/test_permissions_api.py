"""
tests.test_permissions_api

`/permissions/me`: itemized device-creation rules and certificate menu
visibility for the caller, with deposit addresses read locally or from a
stubbed exchange.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI

from conftest import Registry
from origin_registry.api.deps import exchange_client
from origin_registry.auth.models import OrganizationStatus, Role, UserStatus

LABELS = [
    "You have to be a logged in user.",
    "You have to be an active user.",
    "You have to be a member of an approved organization.",
    "Your organization has to have an exchange deposit address.",
]


class StubExchange:
    def __init__(self, address: str | None) -> None:
        self.address = address
        self.tokens: list[str] = []

    async def deposit_address(self, *, access_token: str) -> str | None:
        self.tokens.append(access_token)
        return self.address


def passing(body: dict) -> list[bool]:
    rules = body["canCreateDevice"]["rules"]
    assert [r["label"] for r in rules] == LABELS
    return [r["passing"] for r in rules]


@pytest.mark.asyncio
async def test_anonymous_caller_fails_every_rule(client: httpx.AsyncClient) -> None:
    r = await client.get("/permissions/me")
    assert r.status_code == 200
    body = r.json()

    assert body["canCreateDevice"]["value"] is False
    assert passing(body) == [False, False, False, False]
    assert body["certificatesMenu"] == []
    assert body["defaultCertificatesItem"] is None


@pytest.mark.asyncio
async def test_invalid_token_is_treated_as_anonymous(client: httpx.AsyncClient) -> None:
    r = await client.get("/permissions/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 200
    assert passing(r.json()) == [False, False, False, False]


@pytest.mark.asyncio
async def test_member_of_active_organization_with_address(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    org = await registry.organization(address="0xdeadbeef")
    member = await registry.account("m@example.com", organization_id=org)

    body = (await client.get("/permissions/me", headers=member.headers)).json()
    assert body["canCreateDevice"]["value"] is True
    assert passing(body) == [True, True, True, True]
    assert body["certificatesMenu"] == ["inbox", "claims_report", "pending", "approved"]
    assert body["defaultCertificatesItem"] == "inbox"


@pytest.mark.asyncio
async def test_each_unmet_requirement_is_itemized(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    no_address_org = await registry.organization()
    pending_org = await registry.organization(
        status=OrganizationStatus.pending, address="0xdeadbeef"
    )

    no_address = await registry.account("a@example.com", organization_id=no_address_org)
    inactive = await registry.account(
        "b@example.com", status=UserStatus.suspended, organization_id=no_address_org
    )
    unapproved = await registry.account("c@example.com", organization_id=pending_org)

    body = (await client.get("/permissions/me", headers=no_address.headers)).json()
    assert passing(body) == [True, True, True, False]
    assert body["canCreateDevice"]["value"] is False

    body = (await client.get("/permissions/me", headers=inactive.headers)).json()
    assert passing(body) == [True, False, True, False]

    body = (await client.get("/permissions/me", headers=unapproved.headers)).json()
    assert passing(body) == [True, True, False, True]
    # Menu visibility only needs membership, not approval.
    assert body["certificatesMenu"] == ["inbox", "claims_report", "pending", "approved"]


@pytest.mark.asyncio
async def test_issuer_menu(registry: Registry, client: httpx.AsyncClient) -> None:
    issuer = await registry.account("issuer@example.com", roles=[Role.Issuer])

    body = (await client.get("/permissions/me", headers=issuer.headers)).json()
    assert body["certificatesMenu"] == ["claims_report", "pending", "approved"]
    assert body["defaultCertificatesItem"] == "pending"


@pytest.mark.asyncio
async def test_deposit_address_comes_from_exchange_when_configured(
    app: FastAPI, registry: Registry, client: httpx.AsyncClient
) -> None:
    org = await registry.organization()
    member = await registry.account("x@example.com", organization_id=org)

    stub = StubExchange("0xfromexchange")
    app.dependency_overrides[exchange_client] = lambda: stub
    try:
        body = (await client.get("/permissions/me", headers=member.headers)).json()
    finally:
        app.dependency_overrides.clear()

    assert body["canCreateDevice"]["value"] is True
    assert stub.tokens == [member.token]


@pytest.mark.asyncio
async def test_exchange_without_address_fails_last_rule(
    app: FastAPI, registry: Registry, client: httpx.AsyncClient
) -> None:
    # The organization record is ignored once an exchange is configured.
    org = await registry.organization(address="0xlocal")
    member = await registry.account("y@example.com", organization_id=org)

    app.dependency_overrides[exchange_client] = lambda: StubExchange(None)
    try:
        body = (await client.get("/permissions/me", headers=member.headers)).json()
    finally:
        app.dependency_overrides.clear()

    assert passing(body) == [True, True, True, False]
