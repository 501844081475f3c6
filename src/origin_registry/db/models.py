"""
origin_registry.db.models

Persistence schema for the registry.

Responsibilities:
- Define ORM models referenced by the authorization rules:
  - User: credentials, rights, account/KYC status, organization membership
  - Organization: approval status and exchange deposit address
  - Device: a submitted device group (creation command snapshot)
  - AuditEvent: append-only audit trail
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from origin_registry.auth.models import KYCStatus, OrganizationStatus, UserStatus
from origin_registry.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


def _new_id() -> str:
    return str(uuid.uuid4())


class DeviceStatus(enum.StrEnum):
    # Enum values are stored in DB; treat as stable API contract.
    submitted = "Submitted"
    denied = "Denied"
    active = "Active"


class Organization(Base):
    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    status: Mapped[OrganizationStatus] = mapped_column(
        Enum(OrganizationStatus), nullable=False, default=OrganizationStatus.pending, index=True
    )
    exchange_deposit_address: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    users: Mapped[list[User]] = relationship(back_populates="organization")
    devices: Mapped[list[Device]] = relationship(back_populates="organization")


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)

    title: Mapped[str | None] = mapped_column(String(32), nullable=True)
    first_name: Mapped[str] = mapped_column(String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(String(128), nullable=False)
    telephone: Mapped[str] = mapped_column(String(64), nullable=False)

    # Combined `Role` flags.
    rights: Mapped[int] = mapped_column(nullable=False, default=0)
    status: Mapped[UserStatus] = mapped_column(
        Enum(UserStatus), nullable=False, default=UserStatus.pending, index=True
    )
    kyc_status: Mapped[KYCStatus] = mapped_column(
        Enum(KYCStatus), nullable=False, default=KYCStatus.pending
    )

    organization_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    organization: Mapped[Organization | None] = relationship(back_populates="users")


class Device(Base):
    __tablename__ = "devices"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    organization_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("organizations.id"), nullable=False, index=True
    )

    status: Mapped[DeviceStatus] = mapped_column(Enum(DeviceStatus), nullable=False, index=True)
    facility_name: Mapped[str] = mapped_column(String(256), nullable=False)
    capacity_in_w: Mapped[int] = mapped_column(nullable=False)
    device_type: Mapped[str] = mapped_column(String(128), nullable=False)
    gps_latitude: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    gps_longitude: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    operational_since: Mapped[int] = mapped_column(nullable=False)
    automatic_post_for_sale: Mapped[bool] = mapped_column(nullable=False, default=False)

    # JSON-encoded strings, kept as the creation command carries them.
    device_group: Mapped[str] = mapped_column(Text, nullable=False)
    images: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    files: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    external_device_ids: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    # Remaining free-form properties (address, region, grid operator, ...).
    properties: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    organization: Mapped[Organization] = relationship(back_populates="devices")


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    subject_type: Mapped[str] = mapped_column(String(32), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    actor: Mapped[str] = mapped_column(String(256), nullable=False)  # user id / system
    event_type: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)

    __table_args__ = (Index("ix_audit_subject_created", "subject_id", "created_at"),)


# --- Module Notes -----------------------------------------------------------
# Only the columns the authorization and device rules read are modelled here.
