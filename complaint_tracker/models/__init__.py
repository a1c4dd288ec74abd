from complaint_tracker.models.base import ComplaintBase, IdentityBase, TimestampMixin
from complaint_tracker.models.complaint import (
    Attachment,
    Complaint,
    ComplaintLog,
    ComplaintPriority,
    ComplaintStatus,
    LogAction,
)
from complaint_tracker.models.identity import LoginSession, User, UserRole

__all__ = [
    "IdentityBase",
    "ComplaintBase",
    "TimestampMixin",
    "User",
    "UserRole",
    "LoginSession",
    "Complaint",
    "ComplaintStatus",
    "ComplaintPriority",
    "ComplaintLog",
    "LogAction",
    "Attachment",
]
