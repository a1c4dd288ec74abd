from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.auth.context import Identity
from complaint_tracker.auth.gateway import require_admin
from complaint_tracker.complaint_lifecycle.service import ComplaintLifecycleService
from complaint_tracker.dependencies import get_complaint_db, get_lifecycle_service
from complaint_tracker.schemas.complaint import ComplaintStats

router = APIRouter()


@router.get("/stats", response_model=ComplaintStats)
async def get_stats(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_complaint_db),
    lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service),
) -> ComplaintStats:
    """Complaint counts by status (admin only)."""
    stats = await lifecycle.stats(db, identity)
    return ComplaintStats(**stats)
