"""
origin_registry.auth.policy

Server-side authorization decisions.

Responsibilities:
- Decide whether a principal may read/mutate a user, organization or device.
- Return a reason code with each decision for logging; responses stay opaque.

All functions here are pure: callers load the target records first and pass
plain values in. Decision tables are evaluated top to bottom, first match wins.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from origin_registry.auth.models import OrganizationStatus, Principal, Role

PRIVILEGED_ROLES = (Role.Admin, Role.SupportAgent)
ADMIN_ONLY_RIGHTS = Role.Admin | Role.SupportAgent
DEVICE_MANAGER_ROLES = (Role.OrganizationDeviceManager, Role.OrganizationAdmin)


class ReasonCode(enum.StrEnum):
    privileged_role = "PRIVILEGED_ROLE"
    self_access = "SELF_ACCESS"
    organization_admin = "ORGANIZATION_ADMIN"
    organization_member = "ORGANIZATION_MEMBER"
    device_manager = "DEVICE_MANAGER"
    anonymous = "ANONYMOUS"
    inactive_user = "INACTIVE_USER"
    no_organization = "NO_ORGANIZATION"
    organization_not_active = "ORGANIZATION_NOT_ACTIVE"
    missing_role = "MISSING_ROLE"
    other_organization = "OTHER_ORGANIZATION"
    admin_only_role = "ADMIN_ONLY_ROLE"
    not_found = "NOT_FOUND"


@dataclass(frozen=True, slots=True)
class AuthorizationDecision:
    allowed: bool
    reason: ReasonCode

    def __bool__(self) -> bool:
        return self.allowed


def _allow(reason: ReasonCode) -> AuthorizationDecision:
    return AuthorizationDecision(allowed=True, reason=reason)


def _deny(reason: ReasonCode) -> AuthorizationDecision:
    return AuthorizationDecision(allowed=False, reason=reason)


@dataclass(frozen=True, slots=True)
class UserTarget:
    # Only the fields the decision table reads; routers build this from the stored record.
    id: str
    organization_id: str | None = None


@dataclass(frozen=True, slots=True)
class OrganizationTarget:
    id: str
    status: OrganizationStatus


def decide_user_access(actor: Principal, target: UserTarget) -> AuthorizationDecision:
    if actor.has_role(*PRIVILEGED_ROLES):
        return _allow(ReasonCode.privileged_role)
    if actor.id == target.id:
        return _allow(ReasonCode.self_access)
    if (
        actor.has_role(Role.OrganizationAdmin)
        and actor.organization_id is not None
        and actor.organization_id == target.organization_id
    ):
        return _allow(ReasonCode.organization_admin)
    return _deny(ReasonCode.other_organization)


def can_access_user(actor: Principal, target: UserTarget) -> bool:
    return decide_user_access(actor, target).allowed


def decide_organization_access(actor: Principal, organization_id: str) -> AuthorizationDecision:
    if actor.has_role(*PRIVILEGED_ROLES):
        return _allow(ReasonCode.privileged_role)
    if actor.organization_id is not None and actor.organization_id == organization_id:
        return _allow(ReasonCode.organization_member)
    return _deny(ReasonCode.other_organization)


def can_access_organization(actor: Principal, organization_id: str) -> bool:
    return decide_organization_access(actor, organization_id).allowed


def decide_device_registration(
    actor: Principal | None, organization: OrganizationTarget | None
) -> AuthorizationDecision:
    """
    Server-side counterpart of the device-creation permission rules.
    The exchange deposit address is a UI precondition only and is not re-checked here.
    """
    if actor is None:
        return _deny(ReasonCode.anonymous)
    if not actor.is_active:
        return _deny(ReasonCode.inactive_user)
    if actor.organization_id is None or organization is None:
        return _deny(ReasonCode.no_organization)
    if organization.id != actor.organization_id:
        return _deny(ReasonCode.other_organization)
    if organization.status != OrganizationStatus.active:
        return _deny(ReasonCode.organization_not_active)
    if not actor.has_role(*DEVICE_MANAGER_ROLES):
        return _deny(ReasonCode.missing_role)
    return _allow(ReasonCode.device_manager)


def can_register_device(actor: Principal | None, organization: OrganizationTarget | None) -> bool:
    return decide_device_registration(actor, organization).allowed


def decide_rights_change(actor: Principal, current: Role, requested: Role) -> AuthorizationDecision:
    """
    Support agents manage organization and issuer roles only. Granting or
    revoking Admin or SupportAgent, including on their own account, takes an Admin.
    """
    if actor.is_admin:
        return _allow(ReasonCode.privileged_role)
    if not actor.has_role(Role.SupportAgent):
        return _deny(ReasonCode.missing_role)
    if (current | requested) & ADMIN_ONLY_RIGHTS:
        return _deny(ReasonCode.admin_only_role)
    return _allow(ReasonCode.privileged_role)


def can_change_rights(actor: Principal, current: Role, requested: Role) -> bool:
    return decide_rights_change(actor, current, requested).allowed


# --- Module Notes -----------------------------------------------------------
# Denials are rendered as 401 by the API layer regardless of reason code.
