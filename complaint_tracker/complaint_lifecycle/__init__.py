from complaint_tracker.complaint_lifecycle.policy import TransitionPolicy
from complaint_tracker.complaint_lifecycle.service import (
    ComplaintDetail,
    ComplaintLifecycleService,
    ComplaintPage,
)

__all__ = ["ComplaintLifecycleService", "ComplaintPage", "ComplaintDetail", "TransitionPolicy"]
