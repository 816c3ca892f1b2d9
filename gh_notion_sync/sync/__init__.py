"""Reconciliation of GitHub issues with the Notion database."""

from .reconciler import SyncPlan, diff
from .runner import CycleResult, SyncRunner, SyncScheduler
from .writer import BatchWriter, chunk

__all__ = [
    "SyncPlan",
    "diff",
    "BatchWriter",
    "chunk",
    "CycleResult",
    "SyncRunner",
    "SyncScheduler",
]
