"""Tracker endpoints, mounted once per budget program."""

from __future__ import annotations

from typing import List, NoReturn, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...models import PROGRAM_CONFIGS, TrackerProgram, get_program_config
from ...schemas import (
    BudgetUpdate,
    ConsumptionCreate,
    HistoryEntryRead,
    ProgramRead,
    TrackerRecordRead,
    TrackerSnapshot,
)
from ...services import tracker_service
from ...services.exceptions import TrackerError

_RECORD_EXAMPLE = {
    "record_id": 12,
    "program": "allowance",
    "scholar_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
    "full_name": "Bianca Reyes",
    "batch_year": "2023",
    "allotted_budget": 1000.0,
    "total_consumed": 300.0,
    "remaining": 700.0,
    "created_at": "2025-06-02T08:00:00",
    "updated_at": "2025-06-12T10:15:30",
}

_ERROR_RESPONSES = {
    400: {"description": "Invalid amount"},
    404: {"description": "Scholar not found or not verified"},
    503: {"description": "Tracker store unavailable"},
}


def _performer(
    performed_by: Optional[UUID] = Header(
        None,
        alias="X-Performed-By",
        description="Id of the admin performing the change; recorded in history.",
    ),
) -> Optional[UUID]:
    return performed_by


def _raise_http(db: Session, exc: TrackerError) -> NoReturn:
    db.rollback()
    raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


def build_tracker_router(program: TrackerProgram) -> APIRouter:
    """Create the five tracker routes for ``program`` under its URL prefix."""

    config = get_program_config(program)
    router = APIRouter(prefix=config.url_prefix, tags=[config.title])

    @router.get(
        "",
        response_model=List[TrackerSnapshot],
        summary=f"List {config.title.lower()} trackers",
        responses={
            200: {
                "description": "Every verified scholar with their totals, ordered by name",
                "content": {
                    "application/json": {
                        "example": [
                            {
                                "scholar_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
                                "full_name": "Bianca Reyes",
                                "batch_year": "2023",
                                "allotted_budget": 1000.0,
                                "total_consumed": 300.0,
                                "remaining": 700.0,
                                "last_updated": "2025-06-12T10:15:30",
                            }
                        ]
                    }
                },
            },
            503: _ERROR_RESPONSES[503],
        },
    )
    def list_trackers(db: Session = Depends(get_db)) -> List[TrackerSnapshot]:
        """Backfill missing records, then return the merged snapshot."""

        try:
            return tracker_service.list_snapshot(db, program=config.program)
        except TrackerError as exc:
            _raise_http(db, exc)

    @router.get(
        "/{scholar_id}",
        response_model=TrackerRecordRead,
        summary=f"Get a scholar's {config.title.lower()} record",
        responses={404: _ERROR_RESPONSES[404], 503: _ERROR_RESPONSES[503]},
    )
    def get_tracker(scholar_id: UUID, db: Session = Depends(get_db)) -> TrackerRecordRead:
        try:
            return tracker_service.get_record(db, program=config.program, scholar_id=scholar_id)
        except TrackerError as exc:
            _raise_http(db, exc)

    @router.put(
        "/{scholar_id}/budget",
        response_model=TrackerRecordRead,
        summary="Set allotted budget",
        responses={
            200: {
                "description": "Budget updated",
                "content": {"application/json": {"example": _RECORD_EXAMPLE}},
            },
            **_ERROR_RESPONSES,
        },
    )
    def set_budget(
        scholar_id: UUID,
        payload: BudgetUpdate,
        performed_by: Optional[UUID] = Depends(_performer),
        db: Session = Depends(get_db),
    ) -> TrackerRecordRead:
        """Replace the scholar's budget ceiling.

        Example request body::

            {"allottedBudget": 1000}
        """

        try:
            record = tracker_service.set_budget(
                db,
                program=config.program,
                scholar_id=scholar_id,
                allotted_budget=payload.allotted_budget,
                performed_by=performed_by,
            )
            db.refresh(record)
            return record
        except TrackerError as exc:
            _raise_http(db, exc)

    @router.put(
        f"/{{scholar_id}}/{config.consume_verb}",
        response_model=TrackerRecordRead,
        summary=f"Record amount {config.consumed_noun}",
        responses={
            200: {
                "description": "Amount recorded",
                "content": {"application/json": {"example": _RECORD_EXAMPLE}},
            },
            **_ERROR_RESPONSES,
        },
    )
    def record_consumption(
        scholar_id: UUID,
        payload: ConsumptionCreate,
        performed_by: Optional[UUID] = Depends(_performer),
        db: Session = Depends(get_db),
    ) -> TrackerRecordRead:
        """Add to the consumed total. Going over budget is allowed.

        Example request body::

            {"addAmount": 300}
        """

        try:
            record = tracker_service.record_consumption(
                db,
                program=config.program,
                scholar_id=scholar_id,
                add_amount=payload.add_amount,
                performed_by=performed_by,
            )
            db.refresh(record)
            return record
        except TrackerError as exc:
            _raise_http(db, exc)

    @router.put(
        "/{scholar_id}/reset",
        response_model=TrackerRecordRead,
        summary="Reset budget and total to zero",
        responses={404: _ERROR_RESPONSES[404], 503: _ERROR_RESPONSES[503]},
    )
    def reset_tracker(
        scholar_id: UUID,
        performed_by: Optional[UUID] = Depends(_performer),
        db: Session = Depends(get_db),
    ) -> TrackerRecordRead:
        try:
            record = tracker_service.reset(
                db,
                program=config.program,
                scholar_id=scholar_id,
                performed_by=performed_by,
            )
            db.refresh(record)
            return record
        except TrackerError as exc:
            _raise_http(db, exc)

    @router.get(
        "/{scholar_id}/history",
        response_model=List[HistoryEntryRead],
        summary="Tracker history, newest first",
        responses={404: _ERROR_RESPONSES[404], 503: _ERROR_RESPONSES[503]},
    )
    def get_history(scholar_id: UUID, db: Session = Depends(get_db)) -> List[HistoryEntryRead]:
        try:
            return tracker_service.get_history(db, program=config.program, scholar_id=scholar_id)
        except TrackerError as exc:
            _raise_http(db, exc)

    return router


programs_router = APIRouter(prefix="/programs", tags=["programs"])


@programs_router.get("", response_model=List[ProgramRead], summary="List tracker programs")
def list_programs() -> List[ProgramRead]:
    """Describe each program so clients can build their paths."""

    return list(PROGRAM_CONFIGS.values())
