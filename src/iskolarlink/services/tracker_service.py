"""Budget, consumption and reset workflows shared by every tracker program."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from numbers import Real
from typing import List, NamedTuple, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.database import dialect_insert
from ..models import (
    HistoryAction,
    MAX_AMOUNT,
    ROLE_SCHOLAR,
    TrackerHistory,
    TrackerProgram,
    TrackerRecord,
    User,
    get_program_config,
)
from ..utils.datetime import utc_now
from . import directory_service
from .exceptions import NotFoundError, ValidationError, translate_store_errors
from .reconciler_service import ensure_records_for_verified

logger = logging.getLogger(__name__)

_UPSERT_KEYS = ["program", "scholar_id"]


class SnapshotRow(NamedTuple):
    scholar_id: UUID
    full_name: str
    batch_year: str
    allotted_budget: float
    total_consumed: float
    remaining: float
    last_updated: Optional[datetime]


class Performer(NamedTuple):
    user_id: UUID
    full_name: Optional[str]


class HistoryRow(NamedTuple):
    entry_id: int
    date: datetime
    action: HistoryAction
    label: str
    amount: float
    remaining_after: float
    performed_by: Optional[Performer]


def _validate_amount(value, *, field: str, allow_zero: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"Invalid {field}: expected a number.")
    amount = float(value)
    if not math.isfinite(amount):
        raise ValidationError(f"Invalid {field}: must be a finite number.")
    if allow_zero and amount < 0:
        raise ValidationError(f"Invalid {field}: must be zero or greater.")
    if not allow_zero and amount <= 0:
        raise ValidationError(f"Invalid {field}: must be greater than zero.")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"Invalid {field}: must not exceed {MAX_AMOUNT:,}.")
    return amount


def _require_scholar(session: Session, scholar_id: UUID) -> User:
    with translate_store_errors(session, "look up scholar"):
        scholar = directory_service.find_verified_scholar_by_id(session, scholar_id)
    if scholar is None:
        raise NotFoundError(f"Scholar {scholar_id} not found or not verified")
    return scholar


def _upsert(session: Session, stmt, action: str) -> tuple[TrackerRecord, int, float]:
    """Run a single-row upsert and commit it.

    Returns the record with the remaining balance read from the row the
    statement itself produced, before any later writer can change it.
    """

    with translate_store_errors(session, action):
        try:
            record = session.scalars(
                stmt.returning(TrackerRecord),
                execution_options={"populate_existing": True},
            ).one()
            record_id = record.record_id
            remaining = record.remaining
            session.commit()
        except IntegrityError as exc:
            # Only the amount ceilings can fail here; the key conflict is handled by the upsert.
            session.rollback()
            raise ValidationError(
                f"Cannot {action}: the resulting total would exceed {MAX_AMOUNT:,}."
            ) from exc
    logger.info("%s: record %s remaining=%s", action, record_id, remaining)
    return record, record_id, remaining


def _append_history(
    session: Session,
    record_id: int,
    *,
    action: HistoryAction,
    amount: float,
    remaining_after: float,
    performed_by: Optional[UUID],
) -> None:
    # The primary mutation is already committed; a lost entry is logged, not raised.
    try:
        session.add(
            TrackerHistory(
                record_id=record_id,
                action=action,
                amount=amount,
                remaining_after=remaining_after,
                performed_by=performed_by,
                created_at=utc_now(),
            )
        )
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "history append failed for record %s (%s, amount=%s); primary state kept",
            record_id,
            action.value,
            amount,
        )


def _identity_values(program: TrackerProgram, scholar: User, now: datetime) -> dict:
    return {
        "program": program,
        "scholar_id": scholar.user_id,
        "full_name": scholar.full_name,
        "batch_year": scholar.batch_year or "",
        "created_at": now,
        "updated_at": now,
    }


def set_budget(
    session: Session,
    *,
    program: TrackerProgram,
    scholar_id: UUID,
    allotted_budget,
    performed_by: Optional[UUID] = None,
) -> TrackerRecord:
    """Overwrite the allotted budget, keeping the consumed total."""

    program = TrackerProgram(program)
    amount = _validate_amount(allotted_budget, field="allotted budget", allow_zero=True)
    scholar = _require_scholar(session, scholar_id)

    insert = dialect_insert(session)
    stmt = insert(TrackerRecord).values(
        **_identity_values(program, scholar, utc_now()),
        allotted_budget=amount,
        total_consumed=0,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_UPSERT_KEYS,
        set_={
            "allotted_budget": stmt.excluded.allotted_budget,
            "full_name": stmt.excluded.full_name,
            "batch_year": stmt.excluded.batch_year,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    record, record_id, remaining = _upsert(session, stmt, f"set {program.value} budget")
    _append_history(
        session,
        record_id,
        action=HistoryAction.SET_BUDGET,
        amount=amount,
        remaining_after=remaining,
        performed_by=performed_by,
    )
    return record


def record_consumption(
    session: Session,
    *,
    program: TrackerProgram,
    scholar_id: UUID,
    add_amount,
    performed_by: Optional[UUID] = None,
) -> TrackerRecord:
    """Atomically add ``add_amount`` to the consumed total.

    No ceiling is enforced; consumption beyond the budget leaves a negative
    remaining balance.
    """

    program = TrackerProgram(program)
    amount = _validate_amount(add_amount, field="add amount", allow_zero=False)
    scholar = _require_scholar(session, scholar_id)

    insert = dialect_insert(session)
    stmt = insert(TrackerRecord).values(
        **_identity_values(program, scholar, utc_now()),
        allotted_budget=0,
        total_consumed=amount,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_UPSERT_KEYS,
        set_={
            "total_consumed": TrackerRecord.total_consumed + stmt.excluded.total_consumed,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    config = get_program_config(program)
    record, record_id, remaining = _upsert(session, stmt, f"record {program.value} {config.consumed_noun} amount")
    _append_history(
        session,
        record_id,
        action=HistoryAction.CONSUME,
        amount=amount,
        remaining_after=remaining,
        performed_by=performed_by,
    )
    return record


def reset(
    session: Session,
    *,
    program: TrackerProgram,
    scholar_id: UUID,
    performed_by: Optional[UUID] = None,
) -> TrackerRecord:
    """Zero the budget and consumed total; history is kept."""

    program = TrackerProgram(program)
    scholar = _require_scholar(session, scholar_id)

    insert = dialect_insert(session)
    stmt = insert(TrackerRecord).values(
        **_identity_values(program, scholar, utc_now()),
        allotted_budget=0,
        total_consumed=0,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=_UPSERT_KEYS,
        set_={
            "allotted_budget": 0,
            "total_consumed": 0,
            "updated_at": stmt.excluded.updated_at,
        },
    )
    record, record_id, _ = _upsert(session, stmt, f"reset {program.value} tracker")
    _append_history(
        session,
        record_id,
        action=HistoryAction.RESET,
        amount=0,
        remaining_after=0,
        performed_by=performed_by,
    )
    return record


def get_record(session: Session, *, program: TrackerProgram, scholar_id: UUID) -> TrackerRecord:
    program = TrackerProgram(program)
    _require_scholar(session, scholar_id)
    with translate_store_errors(session, f"load {program.value} record"):
        stmt = select(TrackerRecord).where(
            TrackerRecord.program == program,
            TrackerRecord.scholar_id == scholar_id,
        )
        record = session.execute(stmt).scalar_one_or_none()
    if record is None:
        raise NotFoundError(f"No {program.value} record for scholar {scholar_id}")
    return record


def list_snapshot(session: Session, *, program: TrackerProgram) -> List[SnapshotRow]:
    """Return every verified scholar merged with their record, ordered by full name.

    Names sort by code point (case-sensitive, "Carla" before "bea") regardless
    of the database collation; ties fall back to the scholar id.
    """

    program = TrackerProgram(program)
    ensure_records_for_verified(session, program)

    with translate_store_errors(session, f"list {program.value} records"):
        stmt = (
            select(User, TrackerRecord)
            .outerjoin(
                TrackerRecord,
                and_(TrackerRecord.scholar_id == User.user_id, TrackerRecord.program == program),
            )
            .where(User.role == ROLE_SCHOLAR, User.verified.is_(True))
        )
        rows = session.execute(stmt).all()

    snapshot: List[SnapshotRow] = []
    for scholar, record in rows:
        budget = record.allotted_budget if record is not None else 0
        consumed = record.total_consumed if record is not None else 0
        snapshot.append(
            SnapshotRow(
                scholar_id=scholar.user_id,
                full_name=scholar.full_name,
                batch_year=scholar.batch_year or "",
                allotted_budget=budget,
                total_consumed=consumed,
                remaining=budget - consumed,
                last_updated=record.updated_at if record is not None else None,
            )
        )
    snapshot.sort(key=lambda row: (row.full_name, str(row.scholar_id)))
    return snapshot


def get_history(session: Session, *, program: TrackerProgram, scholar_id: UUID) -> List[HistoryRow]:
    """Return the scholar's history, newest first."""

    program = TrackerProgram(program)
    _require_scholar(session, scholar_id)
    config = get_program_config(program)
    labels = {
        HistoryAction.SET_BUDGET: "Set Budget",
        HistoryAction.CONSUME: config.consume_label,
        HistoryAction.RESET: "Reset",
    }

    with translate_store_errors(session, f"load {program.value} history"):
        stmt = (
            select(TrackerHistory)
            .join(TrackerRecord, TrackerRecord.record_id == TrackerHistory.record_id)
            .where(TrackerRecord.program == program, TrackerRecord.scholar_id == scholar_id)
            .order_by(TrackerHistory.created_at.desc(), TrackerHistory.entry_id.desc())
        )
        entries = session.execute(stmt).scalars().all()
        names = directory_service.resolve_names(session, (entry.performed_by for entry in entries))

    return [
        HistoryRow(
            entry_id=entry.entry_id,
            date=entry.created_at,
            action=entry.action,
            label=labels[entry.action],
            amount=entry.amount,
            remaining_after=entry.remaining_after,
            performed_by=(
                Performer(user_id=entry.performed_by, full_name=names.get(entry.performed_by))
                if entry.performed_by is not None
                else None
            ),
        )
        for entry in entries
    ]
