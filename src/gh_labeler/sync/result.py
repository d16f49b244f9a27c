"""Sync result accumulation.

The executor feeds a `SyncResultBuilder` as operations resolve and hands the
caller an immutable `SyncResult` at the end of the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from gh_labeler.errors import EXIT_PARTIAL_SUCCESS, EXIT_SUCCESS
from gh_labeler.sync.operations import SyncOperation

_COUNTER_BY_KIND = {
    "create": "created",
    "update": "updated",
    "delete": "deleted",
    "rename": "renamed",
    "no_change": "unchanged",
}


@dataclass(frozen=True, slots=True)
class SyncResult:
    """Outcome of one sync run: what was (or would be) done, and what failed."""

    operations: tuple[SyncOperation, ...]
    created: int
    updated: int
    deleted: int
    renamed: int
    unchanged: int
    dry_run: bool
    errors: tuple[str, ...]

    @property
    def has_changes(self) -> bool:
        return (self.created + self.updated + self.deleted + self.renamed) > 0

    @property
    def total_operations(self) -> int:
        return self.created + self.updated + self.deleted + self.renamed + self.unchanged

    @property
    def status(self) -> str:
        return "partial_success" if self.errors else "success"

    @property
    def exit_code(self) -> int:
        return EXIT_PARTIAL_SUCCESS if self.errors else EXIT_SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "exit_code": self.exit_code,
            "dry_run": self.dry_run,
            "has_changes": self.has_changes,
            "summary": {
                "created": self.created,
                "updated": self.updated,
                "deleted": self.deleted,
                "renamed": self.renamed,
                "unchanged": self.unchanged,
                "total": self.total_operations,
            },
            "operations": [op.to_dict() for op in self.operations],
            "errors": list(self.errors),
        }


class SyncResultBuilder:
    """Mutable accumulator owned by a single executor run."""

    def __init__(self, *, dry_run: bool) -> None:
        self._dry_run = dry_run
        self._operations: list[SyncOperation] = []
        self._errors: list[str] = []
        self._counts = {"created": 0, "updated": 0, "deleted": 0, "renamed": 0, "unchanged": 0}

    def add_operation(self, operation: SyncOperation) -> None:
        self._counts[_COUNTER_BY_KIND[operation.kind]] += 1
        self._operations.append(operation)

    def add_error(self, message: str) -> None:
        self._errors.append(message)

    def build(self) -> SyncResult:
        return SyncResult(
            operations=tuple(self._operations),
            dry_run=self._dry_run,
            errors=tuple(self._errors),
            **self._counts,
        )
