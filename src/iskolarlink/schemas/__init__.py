"""Public schema exports."""

from .tracker import (
	BudgetUpdate,
	ConsumptionCreate,
	HistoryEntryRead,
	PerformerSummary,
	ProgramRead,
	TrackerRecordRead,
	TrackerSnapshot,
)

__all__ = [
	"BudgetUpdate",
	"ConsumptionCreate",
	"HistoryEntryRead",
	"PerformerSummary",
	"ProgramRead",
	"TrackerRecordRead",
	"TrackerSnapshot",
]
