"""
origin_registry.permissions.engine

Ordered boolean rule lists aggregated into a permission result.

Responsibilities:
- Evaluate every rule of a capability (no short-circuiting) so callers can
  show the full checklist of unmet requirements.
- Define the device-creation capability on top of that shape.

Rule lists are rebuilt on every call from the context passed in; nothing is
cached between evaluations, and absent inputs simply make rules fail.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from origin_registry.auth.models import OrganizationStatus, Principal, UserStatus


@dataclass(frozen=True, slots=True)
class OrganizationSnapshot:
    id: str
    status: OrganizationStatus


@dataclass(frozen=True, slots=True)
class PermissionContext:
    """
    Immutable snapshot of everything a capability check may read.
    The async service layer fetches it; evaluation itself never does I/O.
    """

    principal: Principal | None = None
    organization: OrganizationSnapshot | None = None
    exchange_deposit_address: str | None = None


@dataclass(frozen=True, slots=True)
class PermissionRule:
    label: str
    passing: bool


@dataclass(frozen=True, slots=True)
class PermissionResult:
    value: bool
    rules: tuple[PermissionRule, ...]

    @property
    def failing(self) -> tuple[PermissionRule, ...]:
        return tuple(rule for rule in self.rules if not rule.passing)

    def as_dict(self) -> dict[str, object]:
        return {
            "value": self.value,
            "rules": [{"label": r.label, "passing": r.passing} for r in self.rules],
        }


RuleCheck = Callable[[PermissionContext], object]


def evaluate(
    rules: Sequence[tuple[str, RuleCheck]], context: PermissionContext
) -> PermissionResult:
    evaluated = tuple(
        PermissionRule(label=label, passing=bool(check(context))) for label, check in rules
    )
    return PermissionResult(value=all(rule.passing for rule in evaluated), rules=evaluated)


def is_logged_in(context: PermissionContext) -> bool:
    return context.principal is not None


def is_active_user(context: PermissionContext) -> bool:
    return context.principal is not None and context.principal.status == UserStatus.active


def is_in_active_organization(context: PermissionContext) -> bool:
    principal, organization = context.principal, context.organization
    return (
        principal is not None
        and bool(principal.organization_id)
        and organization is not None
        and organization.id == principal.organization_id
        and organization.status == OrganizationStatus.active
    )


def has_exchange_deposit_address(context: PermissionContext) -> bool:
    address = context.exchange_deposit_address
    return isinstance(address, str) and bool(address.strip())


def device_creation_rules() -> list[tuple[str, RuleCheck]]:
    return [
        ("You have to be a logged in user.", is_logged_in),
        ("You have to be an active user.", is_active_user),
        ("You have to be a member of an approved organization.", is_in_active_organization),
        (
            "Your organization has to have an exchange deposit address.",
            has_exchange_deposit_address,
        ),
    ]


def can_create_device(context: PermissionContext) -> PermissionResult:
    return evaluate(device_creation_rules(), context)


# --- Module Notes -----------------------------------------------------------
# New capabilities add another `*_rules()` factory and reuse `evaluate`.
