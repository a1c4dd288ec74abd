from complaint_tracker.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from complaint_tracker.schemas.complaint import (
    ComplaintDetailResponse,
    ComplaintListResponse,
    ComplaintResponse,
    ComplaintStats,
)
from complaint_tracker.schemas.health import HealthResponse

__all__ = [
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "ComplaintResponse",
    "ComplaintListResponse",
    "ComplaintDetailResponse",
    "ComplaintStats",
    "HealthResponse",
]
