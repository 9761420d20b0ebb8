"""
Core reconciliation engine.
"""

from skill_indexer.core.naming import repo_folder_name
from skill_indexer.core.reconcile import (
    Reconciler,
    ReconcileResult,
    RunState,
    format_timestamp,
    needs_source_path_update,
    reconcile,
    sort_entries,
)

__all__ = [
    "ReconcileResult",
    "Reconciler",
    "RunState",
    "format_timestamp",
    "needs_source_path_update",
    "reconcile",
    "repo_folder_name",
    "sort_entries",
]
