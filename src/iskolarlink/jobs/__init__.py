"""Maintenance commands."""

from .backfill import main, run_backfill_once

__all__ = ["main", "run_backfill_once"]
