"""Authentication endpoints."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.auth.context import Identity
from complaint_tracker.auth.gateway import get_bearer_token, get_current_identity
from complaint_tracker.auth.service import IdentityService
from complaint_tracker.dependencies import get_identity_db, get_identity_service
from complaint_tracker.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserProfile,
)
from complaint_tracker.schemas.complaint import MessageResponse

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_identity_db),
    identity_service: IdentityService = Depends(get_identity_service),
) -> RegisterResponse:
    user_id = await identity_service.register(
        db,
        username=data.username,
        email=data.email,
        password=data.password,
        full_name=data.full_name,
    )
    return RegisterResponse(message="User registered successfully", userId=user_id)


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_identity_db),
    identity_service: IdentityService = Depends(get_identity_service),
) -> LoginResponse:
    result = await identity_service.login(
        db,
        username=data.username,
        password=data.password,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return LoginResponse(token=result.token, user=UserProfile.model_validate(result.user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    _: Identity = Depends(get_current_identity),
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_identity_db),
    identity_service: IdentityService = Depends(get_identity_service),
) -> MessageResponse:
    await identity_service.logout(db, token)
    return MessageResponse(message="Logged out successfully")
