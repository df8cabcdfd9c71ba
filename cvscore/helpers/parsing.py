import base64
from datetime import date
from typing import Iterable, Optional, Tuple

from fastapi import UploadFile

from cvscore.models.settings import UploadSettings
from cvscore.utils.exceptions import ValidationError


async def read_upload(field: str, upload: Optional[UploadFile], limits: UploadSettings) -> Tuple[str, bytes]:
    """Read and validate a multipart upload, returning (filename, content)"""
    if upload is None:
        validate_upload(field, None, None, None, limits.max_bytes, limits.allowed_content_types)
    data = await upload.read()
    filename = upload.filename or ""
    validate_upload(field, filename, upload.content_type, data, limits.max_bytes, limits.allowed_content_types)
    return filename, data


def validate_upload(
    field: str,
    filename: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    max_bytes: int,
    allowed_types: Iterable[str] = ("application/pdf",),
) -> None:
    """Reject a document before anything is sent upstream"""
    if data is None:
        raise ValidationError(f"No {field} file provided", field=field)
    if content_type not in set(allowed_types):
        raise ValidationError("Only PDF files are supported", field=field, value=content_type)
    if not data:
        raise ValidationError(f"The {field} file is empty", field=field, value=filename)
    if len(data) > max_bytes:
        raise ValidationError(
            f"File size must be less than {max_bytes // (1024 * 1024)}MB",
            field=field,
            value=len(data),
        )


def encode_document(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def last_modified(today: Optional[date] = None) -> str:
    """DocumentLastModified value: the upload date, YYYY-MM-DD"""
    return (today or date.today()).isoformat()
