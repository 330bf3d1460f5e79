"""Date-time helpers for tracker timestamps."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime, the form stored in the database."""

    return datetime.now(timezone.utc).replace(tzinfo=None)
