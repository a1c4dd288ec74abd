"""Complaint endpoints."""

import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.attachments.store import IncomingFile
from complaint_tracker.auth.context import Identity
from complaint_tracker.auth.gateway import get_current_identity, require_admin
from complaint_tracker.complaint_lifecycle.service import ComplaintLifecycleService
from complaint_tracker.dependencies import get_complaint_db, get_lifecycle_service
from complaint_tracker.errors import NotFound
from complaint_tracker.schemas.complaint import (
    AttachmentResponse,
    ComplaintCreatedResponse,
    ComplaintDetailResponse,
    ComplaintListResponse,
    ComplaintLogResponse,
    ComplaintResponse,
    MessageResponse,
    Pagination,
    StatusUpdateRequest,
    StatusUpdateResponse,
)

router = APIRouter()


def _parse_id(complaint_id: str) -> uuid.UUID:
    # A malformed id cannot name an existing complaint
    try:
        return uuid.UUID(complaint_id)
    except ValueError:
        raise NotFound("Complaint not found")


@router.post("", response_model=ComplaintCreatedResponse, status_code=201)
async def create_complaint(
    title: str | None = Form(None),
    description: str | None = Form(None),
    category: str | None = Form(None),
    location: str | None = Form(None),
    priority: str | None = Form(None),
    attachments: list[UploadFile] | None = File(None),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_complaint_db),
    lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service),
) -> ComplaintCreatedResponse:
    files = [
        await IncomingFile.from_upload(upload, lifecycle.attachments.max_bytes)
        for upload in attachments or []
    ]
    complaint = await lifecycle.create(
        db,
        identity,
        title=title,
        description=description,
        category=category,
        location=location,
        priority=priority,
        files=files,
    )
    return ComplaintCreatedResponse(
        message="Complaint created successfully",
        complaint=ComplaintResponse.model_validate(complaint),
    )


@router.get("", response_model=ComplaintListResponse)
async def list_complaints(
    page: int = 1,
    limit: int | None = None,
    status: str | None = None,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_complaint_db),
    lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service),
) -> ComplaintListResponse:
    result = await lifecycle.list_complaints(
        db, identity, page=page, page_size=limit, status=status,
    )
    return ComplaintListResponse(
        complaints=[ComplaintResponse.model_validate(c) for c in result.items],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get("/{complaint_id}", response_model=ComplaintDetailResponse)
async def get_complaint(
    complaint_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_complaint_db),
    lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service),
) -> ComplaintDetailResponse:
    detail = await lifecycle.get_detail(db, identity, _parse_id(complaint_id))
    return ComplaintDetailResponse(
        complaint=ComplaintResponse.model_validate(detail.complaint),
        logs=[ComplaintLogResponse.model_validate(log) for log in detail.logs],
        attachments=[AttachmentResponse.model_validate(a) for a in detail.attachments],
    )


@router.put("/{complaint_id}/status", response_model=StatusUpdateResponse)
async def update_status(
    complaint_id: str,
    data: StatusUpdateRequest,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_complaint_db),
    lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service),
) -> StatusUpdateResponse:
    complaint = await lifecycle.change_status(
        db, identity, _parse_id(complaint_id), data.status, comment=data.comment,
    )
    return StatusUpdateResponse(
        message="Status updated",
        complaint=ComplaintResponse.model_validate(complaint),
    )


@router.delete("/{complaint_id}", response_model=MessageResponse)
async def delete_complaint(
    complaint_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_complaint_db),
    lifecycle: ComplaintLifecycleService = Depends(get_lifecycle_service),
) -> MessageResponse:
    await lifecycle.delete(db, identity, _parse_id(complaint_id))
    return MessageResponse(message="Complaint deleted successfully")
