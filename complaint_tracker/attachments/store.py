"""Attachment storage: upload filtering, files on disk, Attachment rows."""

import logging
import os
import uuid
from dataclasses import dataclass

import aiofiles
import aiofiles.os
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from complaint_tracker.config import Settings
from complaint_tracker.errors import UploadRejected
from complaint_tracker.models.complaint import Attachment
from complaint_tracker.repositories.complaints import AttachmentRepository

logger = logging.getLogger(__name__)

# Word's legacy mime type carries none of the allowed extension tokens
_EXTRA_MIME_TYPES = {"application/msword"}


@dataclass
class IncomingFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    async def from_upload(cls, upload: UploadFile, max_bytes: int) -> "IncomingFile":
        # Read one byte past the limit so oversized files are detectable without
        # buffering all of them.
        content = await upload.read(max_bytes + 1)
        return cls(
            filename=upload.filename or "",
            content_type=upload.content_type or "application/octet-stream",
            content=content,
        )


def get_file_extension(filename: str) -> str:
    """Extract the file extension without the dot, lowercased."""
    _, ext = os.path.splitext(filename)
    return ext.lstrip(".").lower()


class AttachmentStore:
    def __init__(self, settings: Settings):
        self.upload_dir = settings.upload_dir
        self.max_bytes = settings.max_upload_size_mb * 1024 * 1024
        self.max_size_mb = settings.max_upload_size_mb
        self.max_files = settings.max_attachments
        self.allowed_types = settings.allowed_file_types

    def is_allowed(self, file: IncomingFile) -> bool:
        if get_file_extension(file.filename) not in self.allowed_types:
            return False
        mimetype = file.content_type.lower()
        return mimetype in _EXTRA_MIME_TYPES or any(t in mimetype for t in self.allowed_types)

    def validate(self, files: list[IncomingFile]) -> None:
        """Reject the whole batch if any file fails the filter."""
        if len(files) > self.max_files:
            raise UploadRejected(f"Too many files. Maximum: {self.max_files}")
        for file in files:
            if not file.filename:
                raise UploadRejected("No filename provided")
            if not self.is_allowed(file):
                raise UploadRejected(
                    f"File type not allowed: {file.filename}. "
                    f"Allowed: {', '.join(sorted(self.allowed_types))}"
                )
            if file.size > self.max_bytes:
                raise UploadRejected(
                    f"File too large: {file.filename}. Maximum size: {self.max_size_mb}MB"
                )

    async def write(self, file: IncomingFile) -> tuple[str, str]:
        """Save file content to disk.

        Returns (stored_filename, full_file_path).
        """
        ext = os.path.splitext(file.filename)[1].lower()
        stored_filename = f"{uuid.uuid4()}{ext}"
        file_path = os.path.join(self.upload_dir, stored_filename)

        os.makedirs(self.upload_dir, exist_ok=True)

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(file.content)

        return stored_filename, file_path

    async def store(
        self,
        db: AsyncSession,
        *,
        complaint_id: uuid.UUID,
        uploaded_by: int,
        file: IncomingFile,
    ) -> Attachment:
        """Write the file and add its Attachment row (flushed, not committed)."""
        stored_filename, file_path = await self.write(file)
        attachment = Attachment(
            id=uuid.uuid4(),
            complaint_id=complaint_id,
            filename=stored_filename,
            original_name=file.filename,
            mimetype=file.content_type,
            size=file.size,
            path=file_path,
            uploaded_by=uploaded_by,
        )
        return await AttachmentRepository.add(db, attachment)

    async def list_for_complaint(self, db: AsyncSession, complaint_id: uuid.UUID) -> list[Attachment]:
        return await AttachmentRepository.list_for_complaint(db, complaint_id)

    async def delete_for_complaint(self, db: AsyncSession, complaint_id: uuid.UUID) -> list[str]:
        """Delete Attachment rows for a complaint. Returns the file paths to remove."""
        attachments = await AttachmentRepository.list_for_complaint(db, complaint_id)
        await AttachmentRepository.delete_for_complaint(db, complaint_id)
        return [a.path for a in attachments]

    async def remove_files(self, paths: list[str]) -> None:
        for path in paths:
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                continue
            except OSError:
                logger.exception("Failed to remove stored attachment %s", path)
