from complaint_tracker.auth.context import Identity
from complaint_tracker.auth.service import IdentityService, LoginResult

__all__ = ["Identity", "IdentityService", "LoginResult"]
