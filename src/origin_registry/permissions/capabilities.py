"""
origin_registry.permissions.capabilities

Capability filter for navigation menus.

Each menu item declares the features it needs and a visibility predicate over
the permission context; an item is offered when both hold.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from origin_registry.auth.models import Role
from origin_registry.permissions.engine import PermissionContext, is_active_user

ORGANIZATION_ROLES = (Role.OrganizationUser, Role.OrganizationDeviceManager, Role.OrganizationAdmin)


class Feature(enum.StrEnum):
    devices = "devices"
    certificates = "certificates"
    buyer = "buyer"
    certification_requests = "certification_requests"
    exchange = "exchange"


@dataclass(frozen=True, slots=True)
class MenuItem:
    key: str
    label: str
    required_features: frozenset[Feature]
    visible: Callable[[PermissionContext], bool]


def is_issuer(context: PermissionContext) -> bool:
    return context.principal is not None and context.principal.has_role(Role.Issuer)


def is_active_organization_member(context: PermissionContext) -> bool:
    # Membership alone counts here; the organization need not be approved yet.
    principal = context.principal
    return (
        is_active_user(context)
        and principal is not None
        and bool(principal.organization_id)
        and principal.has_role(*ORGANIZATION_ROLES)
    )


def _active_issuer_or_member(context: PermissionContext) -> bool:
    return (is_active_user(context) and is_issuer(context)) or is_active_organization_member(
        context
    )


def _never(_: PermissionContext) -> bool:
    return False


CERTIFICATES_MENU: tuple[MenuItem, ...] = (
    MenuItem(
        key="inbox",
        label="navigation.certificates.inbox",
        required_features=frozenset({Feature.certificates, Feature.buyer}),
        visible=is_active_organization_member,
    ),
    MenuItem(
        key="claims_report",
        label="navigation.certificates.claimsReport",
        required_features=frozenset({Feature.certificates, Feature.buyer}),
        visible=lambda ctx: is_issuer(ctx) or is_active_organization_member(ctx),
    ),
    # Reached through certificate links only, never listed in the menu.
    MenuItem(
        key="detail_view",
        label="navigation.certificates.detailView",
        required_features=frozenset({Feature.certificates}),
        visible=_never,
    ),
    MenuItem(
        key="pending",
        label="navigation.certificates.pending",
        required_features=frozenset({Feature.certificates, Feature.certification_requests}),
        visible=_active_issuer_or_member,
    ),
    MenuItem(
        key="approved",
        label="navigation.certificates.approved",
        required_features=frozenset({Feature.certificates, Feature.certification_requests}),
        visible=_active_issuer_or_member,
    ),
)


def visible_items(
    items: Sequence[MenuItem],
    context: PermissionContext,
    enabled_features: Iterable[str],
) -> list[MenuItem]:
    enabled = frozenset(enabled_features)
    return [
        item
        for item in items
        if item.visible(context) and all(f.value in enabled for f in item.required_features)
    ]


def default_certificates_item(context: PermissionContext) -> str | None:
    # Issuers land on pending requests, everyone else logged in on their inbox.
    if context.principal is None:
        return None
    if is_issuer(context):
        return "pending"
    return "inbox"
