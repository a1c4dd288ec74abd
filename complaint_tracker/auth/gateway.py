"""Access gateway: bearer-token authentication dependencies."""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.auth.context import Identity
from complaint_tracker.auth.service import IdentityService
from complaint_tracker.dependencies import get_identity_db, get_identity_service
from complaint_tracker.errors import Forbidden, Unauthenticated

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if not credentials or not credentials.credentials:
        raise Unauthenticated("Access token required")
    return credentials.credentials


async def get_current_identity(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_identity_db),
    identity_service: IdentityService = Depends(get_identity_service),
) -> Identity:
    return await identity_service.authenticate(db, token)


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        logger.warning("User %s denied admin access", identity.username)
        raise Forbidden("Admin access required")
    return identity
