# Overview: Image upload validation and data-URI projection for sweets.

"""
Image codec.

Uploads are stored verbatim (bytes + declared content type) on the sweet row.
Responses never carry the raw bytes; they carry a base64 data URI built on
read, or null when no image is attached.
"""

from __future__ import annotations

import base64

from ..validation import ValidationError

ALLOWED_IMAGE_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
})

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024


def read_upload(file_storage, *, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> tuple[bytes, str] | None:
    """
    Validate a werkzeug FileStorage and return (data, content_type).

    Returns None when the form carried an empty file field (no file chosen).
    Raises ValidationError for disallowed types or oversized files.
    """
    if file_storage is None:
        return None

    data = file_storage.read()
    if not data and not file_storage.filename:
        return None

    content_type = (file_storage.mimetype or "").lower()
    return validate_image(data, content_type, max_bytes=max_bytes)


def validate_image(data: bytes, content_type: str, *, max_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> tuple[bytes, str]:
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Invalid image type. Allowed types: JPEG, PNG, GIF, WebP")
    if not data:
        raise ValidationError("Image file is empty")
    if len(data) > max_bytes:
        raise ValidationError(f"File too large. Maximum size is {format_size(max_bytes)}")
    return data, content_type


def to_data_uri(data: bytes | None, content_type: str | None) -> str | None:
    if not data or not content_type:
        return None
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def format_size(num_bytes: int) -> str:
    if num_bytes >= 1024 * 1024 and num_bytes % (1024 * 1024) == 0:
        return f"{num_bytes // (1024 * 1024)}MB"
    if num_bytes >= 1024 and num_bytes % 1024 == 0:
        return f"{num_bytes // 1024}KB"
    return f"{num_bytes} bytes"
