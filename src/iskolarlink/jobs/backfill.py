"""Manual backfill of tracker records for every verified scholar."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.config import get_settings
from ..core.database import SessionLocal
from ..models import TrackerProgram
from ..services.reconciler_service import ensure_records_for_verified

logger = logging.getLogger(__name__)


def run_backfill_once(programs: Optional[Iterable[TrackerProgram]] = None) -> dict[str, int]:
    """Reconcile the given programs (all by default) and return inserted counts."""

    selected = [TrackerProgram(program) for program in programs] if programs is not None else list(TrackerProgram)
    summary: dict[str, int] = {}
    session = SessionLocal()
    try:
        for program in selected:
            summary[program.value] = ensure_records_for_verified(session, program)
        logger.info("tracker backfill completed: %s", summary)
        return summary
    finally:
        session.close()


def main() -> None:
    """Console entrypoint: backfill every program and print the summary."""

    logging.basicConfig(level=get_settings().log_level.upper())
    for program, inserted in run_backfill_once().items():
        print(f"{program}: {inserted} record(s) inserted")


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    main()
