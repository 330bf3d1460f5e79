"""Tracker record model holding a scholar's budget and running total."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now
from .tracker_program import TrackerProgram

# Upper bound for budgets and consumed totals; keeps sums finite on every backend.
MAX_AMOUNT = 1_000_000_000_000


class TrackerRecord(Base):
    """One row per scholar per program; mutated only through atomic upserts."""

    __tablename__ = "tracker_records"
    __table_args__ = (
        UniqueConstraint("program", "scholar_id", name="tracker_records_program_scholar_unique"),
        CheckConstraint("allotted_budget >= 0", name="tracker_records_budget_positive"),
        CheckConstraint("total_consumed >= 0", name="tracker_records_consumed_positive"),
        CheckConstraint(f"allotted_budget <= {MAX_AMOUNT}", name="tracker_records_budget_max"),
        CheckConstraint(f"total_consumed <= {MAX_AMOUNT}", name="tracker_records_consumed_max"),
    )

    record_id = Column(Integer, primary_key=True, autoincrement=True)
    program = Column(Enum(TrackerProgram, name="tracker_program"), nullable=False)
    scholar_id = Column(Uuid, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    # Copied from the directory when the record is created or its budget is set.
    full_name = Column(String, nullable=False, default="")
    batch_year = Column(String, nullable=False, default="")
    allotted_budget = Column(Float, nullable=False, default=0)
    total_consumed = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)

    scholar = relationship("User", back_populates="tracker_records")
    history = relationship(
        "TrackerHistory",
        back_populates="record",
        order_by="TrackerHistory.entry_id",
    )

    @property
    def remaining(self) -> float:
        return (self.allotted_budget or 0) - (self.total_consumed or 0)
