"""Pydantic schemas for complaints, complaint logs and attachments."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from complaint_tracker.models.complaint import ComplaintPriority, ComplaintStatus


class ComplaintResponse(BaseModel):
    id: uuid.UUID
    user_id: int
    title: str
    description: str
    category: str
    location: str | None = None
    status: ComplaintStatus
    priority: ComplaintPriority
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ComplaintLogResponse(BaseModel):
    id: uuid.UUID
    complaint_id: uuid.UUID
    user_id: int
    action: str
    old_status: str | None = None
    new_status: str | None = None
    comment: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AttachmentResponse(BaseModel):
    id: uuid.UUID
    complaint_id: uuid.UUID
    filename: str
    original_name: str
    mimetype: str
    size: int
    path: str
    uploaded_by: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ComplaintCreatedResponse(BaseModel):
    message: str
    complaint: ComplaintResponse


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class ComplaintListResponse(BaseModel):
    complaints: list[ComplaintResponse]
    pagination: Pagination


class ComplaintDetailResponse(BaseModel):
    complaint: ComplaintResponse
    logs: list[ComplaintLogResponse] = Field(default_factory=list)
    attachments: list[AttachmentResponse] = Field(default_factory=list)


class StatusUpdateRequest(BaseModel):
    status: str | None = None
    comment: str | None = None


class StatusUpdateResponse(BaseModel):
    message: str
    complaint: ComplaintResponse


class MessageResponse(BaseModel):
    message: str


class ComplaintStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    resolved: int = 0
    rejected: int = 0
