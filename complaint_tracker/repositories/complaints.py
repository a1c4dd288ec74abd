"""Complaint store access: complaints and attachment rows."""

import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.models.complaint import Attachment, Complaint, ComplaintStatus


class ComplaintRepository:
    @staticmethod
    async def add(db: AsyncSession, complaint: Complaint) -> Complaint:
        db.add(complaint)
        await db.flush()
        return complaint

    @staticmethod
    async def get(db: AsyncSession, complaint_id: uuid.UUID) -> Complaint | None:
        result = await db.execute(select(Complaint).where(Complaint.id == complaint_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def query(
        db: AsyncSession,
        *,
        owner_id: int | None = None,
        status: ComplaintStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[Complaint], int]:
        """Filtered page of complaints, newest first, plus the filtered total."""
        query = select(Complaint)
        count_query = select(func.count(Complaint.id))

        if owner_id is not None:
            query = query.where(Complaint.user_id == owner_id)
            count_query = count_query.where(Complaint.user_id == owner_id)
        if status is not None:
            query = query.where(Complaint.status == status)
            count_query = count_query.where(Complaint.status == status)

        total = (await db.execute(count_query)).scalar_one()

        query = query.order_by(Complaint.created_at.desc()).offset(offset).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    @staticmethod
    async def count_by_status(db: AsyncSession) -> dict[ComplaintStatus, int]:
        # One grouped statement so every count comes from the same snapshot
        rows = (await db.execute(
            select(Complaint.status, func.count(Complaint.id)).group_by(Complaint.status)
        )).all()
        counts = {status: 0 for status in ComplaintStatus}
        for status, count in rows:
            counts[ComplaintStatus(status)] = count
        return counts

    @staticmethod
    async def delete(db: AsyncSession, complaint_id: uuid.UUID) -> None:
        await db.execute(delete(Complaint).where(Complaint.id == complaint_id))


class AttachmentRepository:
    @staticmethod
    async def add(db: AsyncSession, attachment: Attachment) -> Attachment:
        db.add(attachment)
        await db.flush()
        return attachment

    @staticmethod
    async def list_for_complaint(db: AsyncSession, complaint_id: uuid.UUID) -> list[Attachment]:
        result = await db.execute(
            select(Attachment).where(Attachment.complaint_id == complaint_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete_for_complaint(db: AsyncSession, complaint_id: uuid.UUID) -> int:
        result = await db.execute(
            delete(Attachment).where(Attachment.complaint_id == complaint_id)
        )
        return result.rowcount or 0
