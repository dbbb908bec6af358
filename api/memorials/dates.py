"""
Date normalization for memorial birth/death dates.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def normalize_date(value: object) -> date | None:
    """
    Parse a client-supplied date into a `date`, or None if it can't be read.

    Accepts plain ISO dates ("1950-01-01") and ISO timestamps
    ("1950-01-01T00:00:00Z"). Timestamps with an offset are converted to UTC
    before taking the calendar day. Other spellings browsers tolerate
    ("2020/05/05", "May 5, 2020") are deliberately not accepted and
    come back as None.
    """
    if not value or not isinstance(value, str):
        return None

    raw = value.strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass

    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()
