"""Service layer exports."""

from . import (
	directory_service,
	reconciler_service,
	tracker_service,
)

__all__ = [
	"directory_service",
	"reconciler_service",
	"tracker_service",
]
