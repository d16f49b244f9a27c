"""Label reconciliation: planning, execution and results."""

from gh_labeler.sync.executor import SyncExecutor
from gh_labeler.sync.operations import Create, Delete, NoChange, Rename, SyncOperation, Update
from gh_labeler.sync.planner import ReconciliationOptions, ReconciliationPlanner
from gh_labeler.sync.result import SyncResult, SyncResultBuilder
from gh_labeler.sync.syncer import LabelSyncer

__all__ = [
    "Create",
    "Delete",
    "LabelSyncer",
    "NoChange",
    "ReconciliationOptions",
    "ReconciliationPlanner",
    "Rename",
    "SyncExecutor",
    "SyncOperation",
    "SyncResult",
    "SyncResultBuilder",
    "Update",
]
