"""
origin_registry.auth.models

Auth domain models.

Responsibilities:
- Define roles (bit flags), account/organization statuses and KYC states.
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass


class Role(enum.IntFlag):
    # Values are persisted as a combined "rights" integer; treat as stable contract.
    OrganizationUser = 1
    OrganizationDeviceManager = 2
    OrganizationAdmin = 4
    Issuer = 8
    Admin = 16
    SupportAgent = 32


class UserStatus(enum.StrEnum):
    pending = "Pending"
    active = "Active"
    suspended = "Suspended"
    deleted = "Deleted"


class KYCStatus(enum.StrEnum):
    pending = "Pending"
    passed = "Passed"
    rejected = "Rejected"


class OrganizationStatus(enum.StrEnum):
    pending = "Pending"
    denied = "Denied"
    active = "Active"


def build_rights(roles: Iterable[Role]) -> Role:
    rights = Role(0)
    for role in roles:
        rights |= role
    return rights


def role_names(rights: Role) -> list[str]:
    return [role.name for role in Role if role in rights]


def rights_from_names(names: Iterable[str]) -> Role:
    names = list(names)
    unknown = [name for name in names if name not in Role.__members__]
    if unknown:
        raise ValueError(f"Unknown roles: {', '.join(unknown)}")
    return build_rights(Role[name] for name in names)


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.
    """

    id: str
    rights: Role
    organization_id: str | None = None
    status: UserStatus = UserStatus.pending

    def has_role(self, *roles: Role) -> bool:
        return any(role in self.rights for role in roles)

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.Admin)

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.active


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API, services and the pure
# permission/policy functions.
