"""
utils/time_utils.py

Purpose: Time and expiry helpers

- UTC timestamps for documents and tokens
- Token expiry calculations
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """
    Returns the current time as an aware UTC datetime.
    """
    return datetime.now(timezone.utc)


def calculate_expiry(issued_at: datetime, lifetime_hours: float) -> datetime:
    """
    Calculates the expiry timestamp for a token issued at `issued_at`.
    """
    return issued_at + timedelta(hours=lifetime_hours)

