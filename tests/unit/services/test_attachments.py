"""
Unit Tests for Attachment Loading.
"""

import base64
from concurrent.futures import ThreadPoolExecutor

import pytest

from spaced_notes.core.exceptions import ValidationError
from spaced_notes.schemas.note import AttachmentType
from spaced_notes.services.attachments import (
    MAX_ATTACHMENT_SIZE_BYTES,
    attachment_type_for,
    build_attachment,
    read_attachment,
    validate_attachment,
)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=True)


class TestValidateAttachment:
    """Tests for size and type checks."""

    @pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "image/svg+xml", "application/pdf"])
    def test_accepts_images_and_pdf(self, mime):
        validate_attachment(mime, 1024)

    def test_limit_is_two_mebibytes(self):
        assert MAX_ATTACHMENT_SIZE_BYTES == 2 * 1024 * 1024
        validate_attachment("image/png", MAX_ATTACHMENT_SIZE_BYTES)

    def test_too_large(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_attachment("image/png", MAX_ATTACHMENT_SIZE_BYTES + 1)
        assert exc_info.value.details["error_key"] == "error.fileTooLarge"

    @pytest.mark.parametrize("mime", ["text/plain", "application/zip", "", None])
    def test_unsupported_type(self, mime):
        with pytest.raises(ValidationError) as exc_info:
            validate_attachment(mime, 10)
        assert exc_info.value.details["error_key"] == "error.unsupportedFileType"

    def test_size_is_checked_before_type(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_attachment("text/plain", MAX_ATTACHMENT_SIZE_BYTES + 1)
        assert exc_info.value.details["error_key"] == "error.fileTooLarge"


class TestBuildAttachment:
    def test_type_from_mime(self):
        assert attachment_type_for("application/pdf") == AttachmentType.PDF
        assert attachment_type_for("image/png") == AttachmentType.IMAGE

    def test_data_url(self):
        attachment = build_attachment("a.pdf", "application/pdf", b"%PDF-1.4")

        assert attachment.name == "a.pdf"
        assert attachment.type == AttachmentType.PDF
        assert attachment.size_bytes == 8
        assert attachment.content == "data:application/pdf;base64," + base64.b64encode(b"%PDF-1.4").decode()
        assert attachment.id.startswith("att_")


class TestReadAttachment:
    """Tests for reading files from disk."""

    @pytest.mark.asyncio
    async def test_reads_png(self, tmp_path, executor):
        path = tmp_path / "cell.png"
        path.write_bytes(b"\x89PNG\r\n\x1a\n")

        attachment = await read_attachment(path, executor=executor)

        assert attachment.name == "cell.png"
        assert attachment.type == AttachmentType.IMAGE
        assert attachment.size_bytes == 8
        assert attachment.content.startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_rejects_large_file(self, tmp_path, executor):
        path = tmp_path / "big.png"
        path.write_bytes(b"x" * 11)

        with pytest.raises(ValidationError) as exc_info:
            await read_attachment(path, max_bytes=10, executor=executor)
        assert exc_info.value.details["error_key"] == "error.fileTooLarge"

    @pytest.mark.asyncio
    async def test_rejects_text_file(self, tmp_path, executor):
        path = tmp_path / "notes.txt"
        path.write_text("hello")

        with pytest.raises(ValidationError) as exc_info:
            await read_attachment(path, executor=executor)
        assert exc_info.value.details["error_key"] == "error.unsupportedFileType"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path, executor):
        with pytest.raises(FileNotFoundError):
            await read_attachment(tmp_path / "absent.pdf", executor=executor)
