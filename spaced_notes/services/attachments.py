"""
Attachment Loading.

Validates a file and embeds it as a base64 data URL. Only images and PDFs
up to MAX_ATTACHMENT_SIZE_BYTES are accepted. Error keys in
ValidationError.details are stable identifiers for user-facing messages.

Usage:
    from spaced_notes.services.attachments import read_attachment

    attachment = await read_attachment(Path("cell.png"))
    note_service.create_note_with_optional_attachment("Mitosis", attachment)
"""

import asyncio
import base64
import mimetypes
from concurrent.futures import Executor
from pathlib import Path

from spaced_notes.core.concurrency import get_io_pool
from spaced_notes.core.exceptions import ValidationError
from spaced_notes.core.logging import get_logger
from spaced_notes.schemas.note import Attachment, AttachmentType
from spaced_notes.services.scheduler import generate_id

logger = get_logger(__name__)

MAX_ATTACHMENT_SIZE_BYTES = 2 * 1024 * 1024

ERROR_FILE_TOO_LARGE = "error.fileTooLarge"
ERROR_UNSUPPORTED_FILE_TYPE = "error.unsupportedFileType"

PDF_MIME = "application/pdf"


def validate_attachment(
    mime_type: str | None,
    size_bytes: int,
    max_bytes: int = MAX_ATTACHMENT_SIZE_BYTES,
) -> None:
    """
    Check size first, then type.

    Raises:
        ValidationError: With details["error_key"] set to the reason
    """
    if size_bytes > max_bytes:
        raise ValidationError(
            "File is too large",
            details={"error_key": ERROR_FILE_TOO_LARGE, "max_bytes": max_bytes},
        )

    mime = mime_type or ""
    if not (mime.startswith("image/") or mime == PDF_MIME):
        raise ValidationError(
            "Unsupported file type",
            details={"error_key": ERROR_UNSUPPORTED_FILE_TYPE, "mime_type": mime},
        )


def attachment_type_for(mime_type: str) -> AttachmentType:
    """PDF for application/pdf, image for everything else that passed validation."""
    return AttachmentType.PDF if mime_type == PDF_MIME else AttachmentType.IMAGE


def to_data_url(mime_type: str, data: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def build_attachment(name: str, mime_type: str, data: bytes) -> Attachment:
    """Wrap raw bytes that already passed validation into an Attachment."""
    return Attachment(
        id=generate_id("att"),
        name=name,
        type=attachment_type_for(mime_type),
        content=to_data_url(mime_type, data),
        size_bytes=len(data),
    )


async def read_attachment(
    path: Path,
    max_bytes: int = MAX_ATTACHMENT_SIZE_BYTES,
    executor: Executor | None = None,
) -> Attachment:
    """
    Validate and read a file into an Attachment.

    The MIME type is guessed from the file name. The file is only read once
    it has passed validation; the blocking read runs on the shared I/O pool.

    Args:
        path: File to attach
        max_bytes: Size limit
        executor: Pool for the blocking read, defaults to the shared I/O pool

    Raises:
        ValidationError: If the file is too large or not an image/PDF
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    size_bytes = path.stat().st_size

    validate_attachment(mime_type, size_bytes, max_bytes)

    loop = asyncio.get_running_loop()
    data = await loop.run_in_executor(executor or get_io_pool(), path.read_bytes)

    logger.debug(
        "Attachment read",
        extra={"file_name": path.name, "mime_type": mime_type, "size_bytes": len(data)},
    )
    return build_attachment(path.name, mime_type, data)
