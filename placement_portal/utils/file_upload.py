"""
Resume upload checks and GridFS storage.

Only PDFs up to 5MB are accepted. Besides the declared content type, the
bytes must start with the %PDF- signature and contain both an %%EOF marker
and a cross-reference table or stream.
"""

import io
import logging
from datetime import datetime

from placement_portal.exceptions import ValidationError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
PDF_SIGNATURE = b"%PDF-"


def has_pdf_signature(content: bytes) -> bool:
    return content.startswith(PDF_SIGNATURE)


def has_pdf_structure(content: bytes) -> bool:
    text = content.decode("latin-1")
    if not text.startswith("%PDF-"):
        return False
    if "%%EOF" not in text:
        return False
    return "xref" in text or "/Type /XRef" in text


async def read_upload(upload) -> bytes:
    """Read at most one byte past the limit so oversized uploads are never fully buffered."""
    return await upload.read(MAX_FILE_SIZE_BYTES + 1)


def validate_resume(content: bytes, content_type: str) -> None:
    """Raise ValidationError unless content is an acceptable PDF resume."""
    if content_type != "application/pdf":
        raise ValidationError("Only PDF files are allowed")

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise ValidationError(f"File size must be less than {MAX_FILE_SIZE_MB}MB")

    if not has_pdf_signature(content):
        raise ValidationError("Invalid PDF file: File signature does not match PDF format")

    if not has_pdf_structure(content):
        raise ValidationError("Invalid PDF file: File structure is corrupted or invalid")


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    index = 0
    value = float(size)
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"


async def store_resume(fs_bucket, student: dict, filename: str, content: bytes):
    """Upload a validated resume to GridFS and return the file id."""
    file_id = await fs_bucket.upload_from_stream(
        filename=f"{student['_id']}-{int(datetime.utcnow().timestamp())}.pdf",
        source=io.BytesIO(content),
        metadata={
            "student_id": str(student["_id"]),
            "email": student.get("email"),
            "content_type": "application/pdf",
            "original_filename": filename,
            "uploaded_at": datetime.utcnow()
        }
    )
    logger.info(f"Stored resume {file_id} for student {student['_id']} ({format_file_size(len(content))})")
    return file_id
