from datetime import datetime, timezone

from fastapi import APIRouter

from complaint_tracker.lifecycle import lifecycle
from complaint_tracker.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness plus per-store readiness. Not gated by readiness itself."""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        databases=lifecycle.store_status(),
        uptime=lifecycle.uptime(),
    )
