# File: utils/dt_utils.py
"""Date and time utilities for League Ops.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All timestamps are stored as UTC ISO 8601 strings.

Functions:
    - dt_now_utc: Current datetime in UTC
    - dt_now_iso: Current datetime as ISO string
"""

from __future__ import annotations

from datetime import UTC, datetime


def dt_now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return dt_now_utc().isoformat()
