"""Backfill of tracker records for newly verified scholars."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.database import dialect_insert
from ..models import TrackerProgram, TrackerRecord
from ..utils.datetime import utc_now
from . import directory_service
from .exceptions import translate_store_errors

logger = logging.getLogger(__name__)


def ensure_records_for_verified(session: Session, program: TrackerProgram) -> int:
    """Insert a zeroed record for every verified scholar missing one in ``program``.

    Existing records are never touched: rows are inserted with
    ``ON CONFLICT DO NOTHING`` so a concurrent upsert for the same scholar wins.
    Returns the number of scholars that were missing a record.
    """

    program = TrackerProgram(program)
    with translate_store_errors(session, f"backfill {program.value} records"):
        scholars = directory_service.find_verified_scholars(session)
        if not scholars:
            return 0

        existing_stmt = select(TrackerRecord.scholar_id).where(
            TrackerRecord.program == program,
            TrackerRecord.scholar_id.in_([scholar.user_id for scholar in scholars]),
        )
        have = set(session.execute(existing_stmt).scalars().all())
        missing = [scholar for scholar in scholars if scholar.user_id not in have]
        if not missing:
            return 0

        now = utc_now()
        insert = dialect_insert(session)
        stmt = insert(TrackerRecord).values(
            [
                {
                    "program": program,
                    "scholar_id": scholar.user_id,
                    "full_name": scholar.full_name,
                    "batch_year": scholar.batch_year or "",
                    "allotted_budget": 0,
                    "total_consumed": 0,
                    "created_at": now,
                    "updated_at": now,
                }
                for scholar in missing
            ]
        )
        session.execute(stmt.on_conflict_do_nothing(index_elements=["program", "scholar_id"]))
        session.commit()

    logger.info("backfilled %d %s record(s)", len(missing), program.value)
    return len(missing)
