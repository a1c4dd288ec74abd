"""ComplaintLifecycleService handles creation, triage, deletion and read access.

Every creation and status change is followed by exactly one ComplaintLog
entry. The mutation is committed first; if the log write then fails the
mutation stands and the failure is reported on the audit logger.

Ownership rules: administrators see and delete every complaint; other users
only their own. Only administrators change status or read stats. Concurrent
status changes on one complaint are last-writer-wins.
"""

import logging
import math
import uuid
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.attachments.store import AttachmentStore, IncomingFile
from complaint_tracker.audit_log.service import ComplaintAuditLog
from complaint_tracker.auth.context import Identity
from complaint_tracker.complaint_lifecycle.policy import TransitionPolicy
from complaint_tracker.config import Settings
from complaint_tracker.errors import Forbidden, NotFound, ValidationError
from complaint_tracker.models.base import utcnow
from complaint_tracker.models.complaint import (
    Attachment,
    Complaint,
    ComplaintLog,
    ComplaintPriority,
    ComplaintStatus,
    LogAction,
)
from complaint_tracker.repositories.complaints import ComplaintRepository

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("complaint_tracker.audit")


@dataclass
class ComplaintPage:
    items: list[Complaint]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


@dataclass
class ComplaintDetail:
    complaint: Complaint
    logs: list[ComplaintLog]
    attachments: list[Attachment]


def parse_status(value: str | None) -> ComplaintStatus:
    try:
        return ComplaintStatus(value)
    except ValueError:
        raise ValidationError("Invalid status")


class ComplaintLifecycleService:
    """Complaint state machine and authorization rules."""

    def __init__(
        self,
        settings: Settings,
        attachment_store: AttachmentStore | None = None,
        policy: TransitionPolicy | None = None,
    ):
        self.default_page_size = settings.default_page_size
        self.max_page_size = settings.max_page_size
        self.attachments = attachment_store or AttachmentStore(settings)
        self.policy = policy or TransitionPolicy.from_forbidden(settings.forbidden_transitions)

    # ── Authorization ──

    @staticmethod
    def _ensure_can_access(requester: Identity, complaint: Complaint) -> None:
        if not requester.is_admin and complaint.user_id != requester.id:
            raise Forbidden("Access denied")

    @staticmethod
    def _ensure_admin(requester: Identity) -> None:
        if not requester.is_admin:
            raise Forbidden("Admin access required")

    async def _get_or_404(self, db: AsyncSession, complaint_id: uuid.UUID) -> Complaint:
        complaint = await ComplaintRepository.get(db, complaint_id)
        if complaint is None:
            raise NotFound("Complaint not found")
        return complaint

    # ── Audit ──

    async def _record(
        self,
        db: AsyncSession,
        complaint: Complaint,
        *,
        user_id: int,
        action: LogAction,
        old_status: ComplaintStatus | None = None,
        comment: str | None = None,
    ) -> ComplaintLog | None:
        try:
            return await ComplaintAuditLog.append(
                db,
                complaint_id=complaint.id,
                user_id=user_id,
                action=action,
                old_status=old_status.value if old_status else None,
                new_status=complaint.status.value,
                comment=comment,
            )
        except SQLAlchemyError:
            await db.rollback()
            audit_logger.exception(
                "Failed to write '%s' log for complaint %s (status %s); mutation kept",
                action.value, complaint.id, complaint.status.value,
            )
            # rollback expired the already-committed complaint
            await db.refresh(complaint)
            return None

    # ── Operations ──

    async def create(
        self,
        db: AsyncSession,
        owner: Identity,
        *,
        title: str | None,
        description: str | None,
        category: str | None,
        location: str | None = None,
        priority: str | None = None,
        files: list[IncomingFile] | None = None,
    ) -> Complaint:
        title = (title or "").strip()
        description = (description or "").strip()
        category = (category or "").strip()
        if not title or not description or not category:
            raise ValidationError("Title, description, and category are required")

        try:
            priority_value = ComplaintPriority(priority or ComplaintPriority.MEDIUM.value)
        except ValueError:
            raise ValidationError("Invalid priority")

        files = files or []
        # Reject the whole request before anything is persisted
        self.attachments.validate(files)

        complaint = Complaint(
            id=uuid.uuid4(),
            user_id=owner.id,
            title=title,
            description=description,
            category=category,
            location=(location or "").strip() or None,
            status=ComplaintStatus.PENDING,
            priority=priority_value,
        )
        await ComplaintRepository.add(db, complaint)
        await db.commit()
        logger.info("Complaint %s created by user %s", complaint.id, owner.id)

        await self._record(db, complaint, user_id=owner.id, action=LogAction.CREATED)

        if files:
            await self._store_attachments(db, complaint, owner, files)

        return complaint

    async def _store_attachments(
        self, db: AsyncSession, complaint: Complaint, owner: Identity, files: list[IncomingFile]
    ) -> None:
        stored: list[Attachment] = []
        try:
            for file in files:
                stored.append(await self.attachments.store(
                    db, complaint_id=complaint.id, uploaded_by=owner.id, file=file,
                ))
            await db.commit()
        except Exception:
            written = [a.path for a in stored]
            await db.rollback()
            await self.attachments.remove_files(written)
            raise
        logger.info("Stored %d attachment(s) for complaint %s", len(stored), complaint.id)

    async def list_complaints(
        self,
        db: AsyncSession,
        requester: Identity,
        *,
        page: int | None = 1,
        page_size: int | None = None,
        status: str | None = None,
    ) -> ComplaintPage:
        """Visible complaints, newest first.

        Administrators see everything; other users only their own. The status
        filter applies to both.
        """
        page = max(page or 1, 1)
        limit = page_size if page_size is not None else self.default_page_size
        limit = min(max(limit, 1), self.max_page_size)

        status_filter = parse_status(status) if status else None
        owner_id = None if requester.is_admin else requester.id

        items, total = await ComplaintRepository.query(
            db,
            owner_id=owner_id,
            status=status_filter,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return ComplaintPage(items=items, total=total, page=page, limit=limit)

    async def get_detail(
        self, db: AsyncSession, requester: Identity, complaint_id: uuid.UUID
    ) -> ComplaintDetail:
        complaint = await self._get_or_404(db, complaint_id)
        self._ensure_can_access(requester, complaint)

        logs = await ComplaintAuditLog.list_for_complaint(db, complaint.id)
        attachments = await self.attachments.list_for_complaint(db, complaint.id)
        return ComplaintDetail(complaint=complaint, logs=logs, attachments=attachments)

    async def change_status(
        self,
        db: AsyncSession,
        requester: Identity,
        complaint_id: uuid.UUID,
        new_status: str | None,
        comment: str | None = None,
    ) -> Complaint:
        self._ensure_admin(requester)
        target = parse_status(new_status)
        complaint = await self._get_or_404(db, complaint_id)

        old_status = complaint.status
        self.policy.check(old_status, target)

        complaint.status = target
        complaint.updated_at = utcnow()
        await db.commit()
        logger.info(
            "Complaint %s status %s -> %s by user %s",
            complaint.id, old_status.value, target.value, requester.id,
        )

        await self._record(
            db,
            complaint,
            user_id=requester.id,
            action=LogAction.STATUS_CHANGED,
            old_status=old_status,
            comment=comment,
        )
        return complaint

    async def delete(
        self, db: AsyncSession, requester: Identity, complaint_id: uuid.UUID
    ) -> None:
        complaint = await self._get_or_404(db, complaint_id)
        self._ensure_can_access(requester, complaint)

        # Satellites first, complaint last, all in one transaction
        try:
            await ComplaintAuditLog.delete_for_complaint(db, complaint.id)
            paths = await self.attachments.delete_for_complaint(db, complaint.id)
            await ComplaintRepository.delete(db, complaint.id)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise

        logger.info("Complaint %s deleted by user %s", complaint_id, requester.id)
        await self.attachments.remove_files(paths)

    async def stats(self, db: AsyncSession, requester: Identity) -> dict[str, int]:
        self._ensure_admin(requester)
        counts = await ComplaintRepository.count_by_status(db)
        return {
            "total": sum(counts.values()),
            **{status.value: count for status, count in counts.items()},
        }
