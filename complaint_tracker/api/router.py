from fastapi import APIRouter

from complaint_tracker.api.routes import auth, complaints, health, stats

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(complaints.router, prefix="/complaints", tags=["complaints"])
api_router.include_router(stats.router, tags=["stats"])

health_router = health.router
