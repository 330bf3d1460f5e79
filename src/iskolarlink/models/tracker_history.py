"""Append-only history of tracker mutations."""

import enum

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now


class HistoryAction(str, enum.Enum):
    """Kind of mutation a history entry records."""

    SET_BUDGET = "SetBudget"
    CONSUME = "Consume"
    RESET = "Reset"


class TrackerHistory(Base):
    """Immutable audit row; inserted after each mutation and never updated."""

    __tablename__ = "tracker_history"

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    record_id = Column(Integer, ForeignKey("tracker_records.record_id", ondelete="RESTRICT"), nullable=False, index=True)
    action = Column(Enum(HistoryAction, name="tracker_history_action"), nullable=False)
    amount = Column(Float, nullable=False, default=0)
    remaining_after = Column(Float, nullable=False, default=0)
    performed_by = Column(Uuid)
    created_at = Column(DateTime, default=utc_now, nullable=False, index=True)

    record = relationship("TrackerRecord", back_populates="history")
