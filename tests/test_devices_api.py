"""
tests.test_devices_api

Device group submission over HTTP: server-side permission re-check,
collected field errors and the persisted creation command.
"""

from __future__ import annotations

import httpx
import pytest

from conftest import Registry
from origin_registry.auth.models import OrganizationStatus, Role, UserStatus


def child(**overrides: object) -> dict[str, object]:
    values: dict[str, object] = {
        "installationName": "Roof A",
        "address": "1 Sun Street",
        "city": "Berlin",
        "latitude": 52.52,
        "longitude": 13.405,
        "capacity": 1000,
        "meterId": "M-001",
        "meterType": "interval",
    }
    values.update(overrides)
    return values


def group(*children: dict[str, object], **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {"facilityName": "Sunny Park", "children": list(children)}
    body.update(overrides)
    return body


async def device_manager(registry: Registry, email: str, org_id: str, **kwargs):
    return await registry.account(
        email, roles=[Role.OrganizationDeviceManager], organization_id=org_id, **kwargs
    )


@pytest.mark.asyncio
async def test_submit_device_group(registry: Registry, client: httpx.AsyncClient) -> None:
    org = await registry.organization()
    manager = await device_manager(registry, "dm@example.com", org)

    r = await client.post(
        "/device-group",
        json=group(
            child(),
            child(installationName="Roof B", capacity="2500", latitude="48.1"),
            externalDeviceIds={"Issuer ID": "ISS-42"},
        ),
        headers=manager.headers,
    )
    assert r.status_code == 201, r.text
    body = r.json()

    assert body["organization"] == org
    assert body["status"] == "Submitted"
    assert body["facilityName"] == "Sunny Park"
    assert body["capacityInW"] == 3_500_000
    assert body["deviceType"] == "Solar;Photovoltaic"
    assert body["gpsLatitude"] == "52.52"
    assert body["gpsLongitude"] == "13.405"
    assert body["automaticPostForSale"] is False
    assert body["images"] == []
    assert body["externalDeviceIds"] == [{"id": "ISS-42", "type": "Issuer ID"}]
    assert [c["installationName"] for c in body["deviceGroup"]] == ["Roof A", "Roof B"]
    assert body["deviceGroup"][1]["capacity"] == 2500

    r = await client.get(f"/device/{body['id']}", headers=manager.headers)
    assert r.status_code == 200
    assert r.json()["id"] == body["id"]


@pytest.mark.asyncio
async def test_total_capacity_error_lands_on_last_child(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    org = await registry.organization()
    manager = await device_manager(registry, "cap@example.com", org)

    r = await client.post(
        "/device-group",
        json=group(child(capacity=3000), child(capacity=2500)),
        headers=manager.headers,
    )
    assert r.status_code == 400
    assert r.json()["errors"] == [
        {"path": "children[1].capacity", "message": "Total capacity can be maximum: 5,000 kW"}
    ]


@pytest.mark.asyncio
async def test_all_invalid_fields_are_reported_together(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    org = await registry.organization()
    manager = await device_manager(registry, "rows@example.com", org)

    r = await client.post(
        "/device-group",
        json=group(
            child(latitude=95),
            child(capacity=10, meterType="cumulative"),
            facilityName="",
        ),
        headers=manager.headers,
    )
    assert r.status_code == 400
    errors = {e["path"]: e["message"] for e in r.json()["errors"]}
    assert errors == {
        "facilityName": "Facility name is a required field",
        "children[0].latitude": "Latitude must be less than or equal to 90",
        "children[1].capacity": "Capacity must be greater than or equal to 20",
        "children[1].meterType": "Meter type must be one of the following values: interval, scalar",
    }


@pytest.mark.asyncio
async def test_empty_group_is_rejected(registry: Registry, client: httpx.AsyncClient) -> None:
    org = await registry.organization()
    manager = await device_manager(registry, "empty@example.com", org)

    r = await client.post("/device-group", json=group(), headers=manager.headers)
    assert r.status_code == 400
    assert r.json()["errors"] == [
        {"path": "children", "message": "children field must have at least 1 items"}
    ]


@pytest.mark.asyncio
async def test_submission_is_denied_without_registration_rights(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    active_org = await registry.organization()
    pending_org = await registry.organization(status=OrganizationStatus.pending)

    callers = [
        await device_manager(registry, "pending-org@example.com", pending_org),
        await device_manager(
            registry, "inactive@example.com", active_org, status=UserStatus.pending
        ),
        await registry.account(
            "viewer@example.com", roles=[Role.OrganizationUser], organization_id=active_org
        ),
        await registry.account("no-org@example.com", roles=[Role.OrganizationDeviceManager]),
    ]
    for caller in callers:
        r = await client.post("/device-group", json=group(child()), headers=caller.headers)
        assert r.status_code == 401, caller.email
        assert r.json() == {"detail": "Unauthorized"}

    r = await client.post("/device-group", json=group(child()))
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_organization_admin_may_submit(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    org = await registry.organization()
    admin = await registry.account(
        "orgadmin@example.com", roles=[Role.OrganizationAdmin], organization_id=org
    )

    r = await client.post("/device-group", json=group(child()), headers=admin.headers)
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_devices_are_visible_to_own_organization_only(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    org_a = await registry.organization()
    org_b = await registry.organization()
    manager = await device_manager(registry, "owner@example.com", org_a)
    stranger = await device_manager(registry, "stranger@example.com", org_b)
    support = await registry.account("help@example.com", roles=[Role.SupportAgent])

    r = await client.post("/device-group", json=group(child()), headers=manager.headers)
    device_id = r.json()["id"]

    assert (await client.get(f"/device/{device_id}", headers=stranger.headers)).status_code == 401
    assert (await client.get(f"/device/{device_id}", headers=support.headers)).status_code == 200
    assert (await client.get("/device/missing", headers=manager.headers)).status_code == 401


@pytest.mark.asyncio
async def test_malformed_rows_use_indexed_paths(
    registry: Registry, client: httpx.AsyncClient
) -> None:
    org = await registry.organization()
    manager = await device_manager(registry, "shape@example.com", org)

    r = await client.post(
        "/device-group", json=group(child(), "nope"), headers=manager.headers
    )
    assert r.status_code == 400
    assert [e["path"] for e in r.json()["errors"]] == ["children[1]"]
