from complaint_tracker.attachments.store import AttachmentStore, IncomingFile

__all__ = ["AttachmentStore", "IncomingFile"]
