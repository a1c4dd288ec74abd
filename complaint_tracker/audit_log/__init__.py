from complaint_tracker.audit_log.service import ComplaintAuditLog

__all__ = ["ComplaintAuditLog"]
