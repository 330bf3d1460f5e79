"""Pydantic schemas for tracker endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..models import HistoryAction, TrackerProgram


class BudgetUpdate(BaseModel):
    """Request body for setting a scholar's allotted budget."""

    allotted_budget: float = Field(
        ...,
        alias="allottedBudget",
        description="New budget ceiling; replaces the previous value.",
    )

    class Config:
        populate_by_name = True


class ConsumptionCreate(BaseModel):
    """Request body for recording an amount given, reimbursed or paid."""

    add_amount: float = Field(
        ...,
        alias="addAmount",
        description="Amount to add to the consumed total. Must be greater than zero.",
    )

    class Config:
        populate_by_name = True


class TrackerRecordRead(BaseModel):
    """A scholar's tracker record with its derived remaining balance."""

    record_id: int
    program: TrackerProgram
    scholar_id: UUID
    full_name: str
    batch_year: str
    allotted_budget: float
    total_consumed: float
    remaining: float = Field(..., description="Budget minus consumed; negative on overage.")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TrackerSnapshot(BaseModel):
    """Directory entry merged with the scholar's tracker totals."""

    scholar_id: UUID
    full_name: str
    batch_year: str
    allotted_budget: float
    total_consumed: float
    remaining: float
    last_updated: Optional[datetime]

    class Config:
        from_attributes = True


class PerformerSummary(BaseModel):
    user_id: UUID
    full_name: Optional[str]

    class Config:
        from_attributes = True


class HistoryEntryRead(BaseModel):
    """One immutable history entry."""

    entry_id: int
    date: datetime
    action: HistoryAction
    label: str
    amount: float
    remaining_after: float
    performed_by: Optional[PerformerSummary]

    class Config:
        from_attributes = True


class ProgramRead(BaseModel):
    """Public description of a tracker program."""

    program: TrackerProgram
    title: str
    url_prefix: str
    consume_verb: str
    consume_label: str

    class Config:
        from_attributes = True
