# -*- coding: utf-8 -*-
"""
DateTime Utilities

Centralized datetime handling for everything that crosses a JSON boundary
(draft files, API payloads).
"""

from datetime import datetime, date
from typing import Union, Optional


def to_isoformat(value: Union[datetime, date, str, None]) -> Optional[str]:
    """
    Convert any datetime-like value to ISO format string.

    Args:
        value: datetime, date, ISO string, or None

    Returns:
        ISO format string (YYYY-MM-DDTHH:MM:SS or YYYY-MM-DD), None for None

    Examples:
        >>> to_isoformat(datetime(2024, 1, 15, 10, 30))
        '2024-01-15T10:30:00'
        >>> to_isoformat(date(2024, 1, 15))
        '2024-01-15'
    """
    if value is None:
        return None

    if isinstance(value, str):
        return value

    # datetime is a subclass of date, both expose isoformat()
    if isinstance(value, date):
        return value.isoformat()

    return str(value)


def from_isoformat(value: Union[str, datetime, date, None]) -> Optional[datetime]:
    """
    Convert ISO format string to datetime object.

    Reverse of to_isoformat() for deserialization. Unparsable strings
    yield None rather than raising.

    Examples:
        >>> from_isoformat('2024-01-15T10:30:00')
        datetime(2024, 1, 15, 10, 30)
        >>> from_isoformat('2024-01-15')
        datetime(2024, 1, 15, 0, 0)
        >>> from_isoformat('garbage')
        None
    """
    if value is None:
        return None

    # Already datetime -> return as-is
    if isinstance(value, datetime):
        return value

    # date -> convert to datetime
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    if isinstance(value, str):
        try:
            if 'T' in value:
                return datetime.fromisoformat(value.replace('Z', '+00:00'))
            parsed_date = date.fromisoformat(value)
            return datetime.combine(parsed_date, datetime.min.time())
        except (ValueError, AttributeError):
            return None

    return None


def from_date_isoformat(value: Union[str, datetime, date, None]) -> Optional[date]:
    """Parse a date-only field (start_date, end_date, ...) back into a date."""
    parsed = from_isoformat(value)
    return parsed.date() if parsed else None


def now_isoformat() -> str:
    """Current datetime as ISO format string."""
    return datetime.now().isoformat()
