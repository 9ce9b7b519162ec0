"""
utils/validation_utils.py

Purpose: Field-level validation rules

- Required / length / numeric range checks
- Enum membership
- Email and URL format
- ObjectId parsing
- Each check returns an error message or None
"""

import math
import re
from typing import Iterable, Optional, Union
from urllib.parse import urlparse

from bson import ObjectId
from email_validator import EmailNotValidError, validate_email as parse_email

Number = Union[int, float]


def check_required(value) -> Optional[str]:
    """
    Fails on None, empty strings (after stripping) and empty collections.
    """
    if value is None:
        return "is required"
    if isinstance(value, str) and not value.strip():
        return "is required"
    if isinstance(value, (list, tuple, dict)) and not value:
        return "is required"
    return None


def check_length(value: str, min_length: Optional[int] = None, max_length: Optional[int] = None) -> Optional[str]:
    """
    Checks string length in characters.
    """
    length = len(value or "")
    if min_length is not None and length < min_length:
        return f"must be at least {min_length} characters"
    if max_length is not None and length > max_length:
        return f"must be at most {max_length} characters"
    return None


def check_byte_length(value: str, max_bytes: int) -> Optional[str]:
    """
    Checks the UTF-8 encoded size of a string.
    """
    if len((value or "").encode("utf-8")) > max_bytes:
        return f"must be at most {max_bytes} bytes"
    return None


def check_range(
    value: Number,
    gt: Optional[Number] = None,
    ge: Optional[Number] = None,
    le: Optional[Number] = None,
) -> Optional[str]:
    """
    Checks a number against exclusive lower, inclusive lower and inclusive
    upper bounds.
    """
    if value is None:
        return "is required"
    if not math.isfinite(value):
        return "must be a finite number"
    if gt is not None and not value > gt:
        return f"must be greater than {gt}"
    if ge is not None and not value >= ge:
        return f"must be at least {ge}"
    if le is not None and not value <= le:
        return f"must be at most {le}"
    return None


def check_one_of(value: str, allowed: Iterable[str]) -> Optional[str]:
    """
    Checks enum membership.
    """
    allowed = list(allowed)
    if value not in allowed:
        return f"must be one of: {', '.join(allowed)}"
    return None


def validate_email(email: str) -> bool:
    """
    Validates email format.

    Args:
        email: Email address

    Returns:
        True if the address is syntactically valid
    """
    if not email:
        return False

    try:
        parse_email(email.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_url(url: str) -> bool:
    """
    Validates an absolute http(s) URL with a host.
    """
    if not url:
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_object_id(value) -> bool:
    """
    Checks whether a value is (or parses as) a MongoDB ObjectId.
    """
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


def sanitize_input(text: str, max_length: int = 100) -> str:
    """
    Strips control characters and trims search input.

    Args:
        text: Raw input
        max_length: Maximum length to keep

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = re.sub(r"[\x00-\x1F\x7F]", "", text)
    text = text.strip()

    return text[:max_length]
