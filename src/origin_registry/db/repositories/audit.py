"""
origin_registry.db.repositories.audit

Repository for `AuditEvent` entities.

Responsibilities:
- Append audit events (registrations, organization and device submissions).
- Query the audit trail for a subject (user, organization or device).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from origin_registry.db.models import AuditEvent


class AuditRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        subject_type: str,
        subject_id: str,
        actor: str,
        event_type: str,
        details: dict[str, Any] | None = None,
    ) -> AuditEvent:
        # Audit events are append-only (no update/delete) in normal operation.
        ev = AuditEvent(
            subject_type=subject_type,
            subject_id=subject_id,
            actor=actor,
            event_type=event_type,
            details=details or {},
        )
        self._session.add(ev)
        await self._session.flush()
        return ev

    async def list_for_subject(self, subject_id: str, *, limit: int = 200) -> list[AuditEvent]:
        # Order newest-first for UI consumption; reverse client-side if needed.
        stmt = (
            select(AuditEvent)
            .where(AuditEvent.subject_id == subject_id)
            .order_by(desc(AuditEvent.created_at))
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Denied access attempts are logged, not audited, to keep this table bounded.
