from complaint_tracker.attachments.store import AttachmentStore
from complaint_tracker.auth.service import IdentityService
from complaint_tracker.complaint_lifecycle.service import ComplaintLifecycleService
from complaint_tracker.config import settings
from complaint_tracker.database import get_complaint_db, get_identity_db

# Re-export session providers for use in Depends()
get_identity_db = get_identity_db
get_complaint_db = get_complaint_db


def get_identity_service() -> IdentityService:
    return IdentityService(settings)


def get_attachment_store() -> AttachmentStore:
    return AttachmentStore(settings)


def get_lifecycle_service() -> ComplaintLifecycleService:
    return ComplaintLifecycleService(settings, attachment_store=get_attachment_store())
