"""
utils/validation_utils.py

Purpose: Input validation

- Email format checks and normalisation
- ObjectId parsing for path parameters
- Image payload checks (size, MIME type)
- Base64 data URI decoding for chat images
"""

import base64
import binascii
import re
from typing import Optional, Tuple, Iterable

from bson import ObjectId
from bson.errors import InvalidId

from app.core.exceptions import ValidationError


AVATAR_CONTENT_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_email(email: str) -> bool:
    """
    Validates email address shape (local@domain.tld).

    Args:
        email: Address to validate

    Returns:
        True if valid, False otherwise
    """
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email.strip()))


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


def to_object_id(value) -> Optional[ObjectId]:
    """
    Parses a string id into an ObjectId.

    Returns:
        ObjectId, or None if the value is not a valid id
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def format_size(num_bytes: int) -> str:
    """Formats a byte limit for messages, e.g. 2097152 -> '2MB'."""
    megabytes = num_bytes / (1024 * 1024)
    if megabytes >= 1 and megabytes == int(megabytes):
        return f"{int(megabytes)}MB"
    return f"{num_bytes // 1024}KB"


def describe_image_types(types: Iterable[str]) -> str:
    """Human list of MIME subtypes, e.g. ('image/png', 'image/gif') -> 'PNG or GIF'."""
    names = [t.split("/", 1)[-1].upper() for t in types]
    if len(names) < 2:
        return "".join(names)
    return f"{', '.join(names[:-1])} or {names[-1]}"


def validate_image_upload(
    content: bytes,
    content_type: Optional[str],
    max_bytes: int,
    allowed_types: Iterable[str] = AVATAR_CONTENT_TYPES
) -> str:
    """
    Checks an in-memory image before it is handed to the image host.

    Args:
        content: Raw image bytes
        content_type: Declared MIME type
        max_bytes: Size limit in bytes
        allowed_types: Accepted MIME types

    Returns:
        The bare, lower-cased MIME type (parameters stripped)

    Raises:
        ValidationError: If the payload is empty, too large or of the wrong type
    """
    if not content:
        raise ValidationError("Image file is empty")

    if len(content) > max_bytes:
        raise ValidationError(
            f"File size too large (max {format_size(max_bytes)})",
            details={"size": len(content), "max_size": max_bytes}
        )

    allowed_types = tuple(allowed_types)
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in allowed_types:
        raise ValidationError(
            f"Only {describe_image_types(allowed_types)} files are allowed",
            details={"content_type": content_type}
        )

    return mime


def parse_data_uri(value: str) -> Tuple[bytes, str]:
    """
    Decodes a base64 data URI (data:image/png;base64,....).

    Returns:
        (raw bytes, MIME type)

    Raises:
        ValidationError: If the string is not a base64 image data URI
    """
    match = DATA_URI_PATTERN.match(value.strip()) if value else None
    if not match:
        raise ValidationError("Image must be a base64 data URI")

    mime = match.group("mime").lower()
    if not mime.startswith("image/"):
        raise ValidationError("Not an image!", details={"content_type": mime})

    try:
        content = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image payload is not valid base64")

    if not content:
        raise ValidationError("Image file is empty")

    return content, mime
