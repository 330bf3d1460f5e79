"""Error taxonomy shared by the tracker services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TrackerError):
    """Malformed or out-of-range input. Raised before any mutation."""

    status_code = 400


class NotFoundError(TrackerError):
    """Scholar is missing or not a verified scholar."""

    status_code = 404


class InfrastructureError(TrackerError):
    """Store or directory unavailable; the caller may retry the whole operation."""

    status_code = 503


@contextmanager
def translate_store_errors(session: Session, action: str) -> Iterator[None]:
    """Roll back and re-raise database failures as :class:`InfrastructureError`."""

    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("tracker store failure while trying to %s", action)
        raise InfrastructureError(f"Tracker store unavailable while trying to {action}.") from exc
