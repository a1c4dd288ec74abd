"""ComplaintAuditLog is the append-only log of complaint lifecycle events.

Static methods, like a repository, so the lifecycle service can call
ComplaintAuditLog.append() without DI wiring. Entries are never updated;
they are only removed together with their complaint.
"""

import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.models.complaint import ComplaintLog, LogAction


class ComplaintAuditLog:
    """Append and query complaint log entries."""

    @staticmethod
    async def append(
        db: AsyncSession,
        *,
        complaint_id: uuid.UUID,
        user_id: int,
        action: LogAction,
        old_status: str | None = None,
        new_status: str | None = None,
        comment: str | None = None,
    ) -> ComplaintLog:
        """Append one entry and commit it."""
        entry = ComplaintLog(
            id=uuid.uuid4(),
            complaint_id=complaint_id,
            user_id=user_id,
            action=action.value,
            old_status=old_status,
            new_status=new_status,
            comment=comment,
        )
        db.add(entry)
        await db.commit()
        return entry

    @staticmethod
    async def list_for_complaint(db: AsyncSession, complaint_id: uuid.UUID) -> list[ComplaintLog]:
        """Entries for one complaint, newest first."""
        result = await db.execute(
            select(ComplaintLog)
            .where(ComplaintLog.complaint_id == complaint_id)
            .order_by(ComplaintLog.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def count(
        db: AsyncSession, complaint_id: uuid.UUID, action: LogAction | None = None
    ) -> int:
        query = select(func.count(ComplaintLog.id)).where(ComplaintLog.complaint_id == complaint_id)
        if action is not None:
            query = query.where(ComplaintLog.action == action.value)
        return (await db.execute(query)).scalar_one()

    @staticmethod
    async def delete_for_complaint(db: AsyncSession, complaint_id: uuid.UUID) -> int:
        """Only called while the owning complaint is being deleted."""
        result = await db.execute(
            delete(ComplaintLog).where(ComplaintLog.complaint_id == complaint_id)
        )
        return result.rowcount or 0
