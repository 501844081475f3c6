"""
tests.test_persistence

Engine setup: foreign keys are enforced on SQLite, and the entrypoint
refuses unsafe prod settings.
"""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from sqlalchemy.exc import IntegrityError

from conftest import Registry
from origin_registry.api import __main__ as entrypoint
from origin_registry.db.repositories.devices import DeviceRepo
from origin_registry.db.repositories.users import UserRepo
from origin_registry.devices.commands import build_creation_command
from origin_registry.devices.validation import DeviceGroupChild, DeviceGroupSubmission
from origin_registry.settings import Settings


@pytest.mark.asyncio
async def test_user_cannot_join_missing_organization(app: FastAPI, registry: Registry) -> None:
    user = await registry.account("fk@example.com")

    async with app.state.sessionmaker() as session:
        with pytest.raises(IntegrityError):
            await UserRepo(session).update(user.id, organization_id="no-such-organization")


@pytest.mark.asyncio
async def test_device_needs_existing_organization(app: FastAPI) -> None:
    submission = DeviceGroupSubmission(
        facility_name="Orphan",
        children=(DeviceGroupChild("Roof", "1 St", "Town", 1, 2, 30, "M", "interval"),),
    )
    command = build_creation_command(submission, operational_since=0)

    async with app.state.sessionmaker() as session:
        with pytest.raises(IntegrityError):
            await DeviceRepo(session).create(organization_id="no-such-organization", command=command)


def test_prod_requires_jwt_secret() -> None:
    with pytest.raises(entrypoint.UnsafeSettingsError):
        entrypoint.check_runtime_settings(Settings(env="prod"))

    entrypoint.check_runtime_settings(Settings(env="prod", jwt_secret="rotated-secret"))
    entrypoint.check_runtime_settings(Settings(env="dev"))


def test_main_runs_uvicorn_with_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    settings = Settings(env="test", api_port=4040, log_level="WARNING")
    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(entrypoint.uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))

    entrypoint.main()

    assert calls[0]["port"] == 4040
    assert calls[0]["log_level"] == "warning"
    assert calls[0]["access_log"] is False
