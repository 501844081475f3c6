"""
tests.test_auth

Token issuing/validation, password hashing and role flag helpers.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from origin_registry.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate, issue_token
from origin_registry.auth.models import Role, build_rights, rights_from_names, role_names
from origin_registry.auth.passwords import hash_password, verify_password

CFG = JwtConfig(alg="HS256", issuer="origin-registry", audience="origin-api", secret="s3cret")


def test_issue_and_decode_roundtrip() -> None:
    token = issue_token(cfg=CFG, subject="u-1", roles=["Issuer"], organization_id="o-1")
    claims = decode_and_validate(cfg=CFG, token=token)

    assert claims["sub"] == "u-1"
    assert claims["roles"] == ["Issuer"]
    assert claims["org"] == "o-1"
    assert claims["iss"] == "origin-registry"
    assert claims["exp"] > claims["iat"]


@pytest.mark.parametrize(
    "cfg",
    [
        JwtConfig(alg="HS256", issuer="origin-registry", audience="other", secret="s3cret"),
        JwtConfig(alg="HS256", issuer="someone-else", audience="origin-api", secret="s3cret"),
        JwtConfig(alg="HS256", issuer="origin-registry", audience="origin-api", secret="wrong"),
    ],
)
def test_decode_rejects_mismatched_config(cfg: JwtConfig) -> None:
    token = issue_token(cfg=CFG, subject="u-1", roles=[])
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=cfg, token=token)


def test_decode_rejects_expired_token() -> None:
    token = issue_token(cfg=CFG, subject="u-1", roles=[], ttl=timedelta(minutes=-5))
    with pytest.raises(JwtValidationError):
        decode_and_validate(cfg=CFG, token=token)


def test_password_hashing() -> None:
    hashed = hash_password("hunter2")
    assert hashed != "hunter2"
    assert verify_password("hunter2", hashed)
    assert not verify_password("hunter3", hashed)


def test_role_flags() -> None:
    rights = build_rights([Role.OrganizationAdmin, Role.Issuer])
    assert int(rights) == 12
    assert role_names(rights) == ["OrganizationAdmin", "Issuer"]
    assert rights_from_names(["OrganizationAdmin", "Issuer"]) == rights
    assert role_names(Role(0)) == []


@pytest.mark.parametrize("names", [["Retired"], ["organizationadmin"], ["Issuer", "admin"]])
def test_rights_from_names_rejects_unknown_names(names: list[str]) -> None:
    with pytest.raises(ValueError, match="Unknown roles"):
        rights_from_names(names)
