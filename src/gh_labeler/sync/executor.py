"""Applies a label sync plan to a label store."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gh_labeler.github.store import LabelStore, SupportsLabelUpdate
from gh_labeler.labels import DesiredLabel
from gh_labeler.sync.operations import Create, Delete, Rename, SyncOperation, Update
from gh_labeler.sync.result import SyncResult, SyncResultBuilder

logger = logging.getLogger(__name__)


class SyncExecutor:
    """Runs operations one at a time, in plan order.

    A failing operation is recorded on the result and does not stop the run.
    Nothing is retried here and nothing already applied is rolled back.
    """

    def __init__(self, store: LabelStore) -> None:
        self._store = store

    def execute(self, plan: Sequence[SyncOperation], *, dry_run: bool) -> SyncResult:
        result = SyncResultBuilder(dry_run=dry_run)

        for operation in plan:
            if dry_run:
                logger.info(
                    "Label operation planned (dry run)",
                    extra={"operation": operation.kind, "detail": operation.describe()},
                )
                result.add_operation(operation)
                continue

            try:
                self._apply(operation)
            except Exception as e:
                logger.warning(
                    "Label operation failed",
                    extra={"operation": operation.kind, "detail": operation.describe()},
                    exc_info=True,
                )
                result.add_error(f"Operation failed: {operation.describe()} - {e}")
                continue

            logger.info(
                "Label operation applied",
                extra={"operation": operation.kind, "detail": operation.describe()},
            )
            result.add_operation(operation)

        return result.build()

    def _apply(self, operation: SyncOperation) -> None:
        if isinstance(operation, Create):
            self._store.create_label(operation.label)
        elif isinstance(operation, (Update, Rename)):
            self._replace(operation.current_name, operation.new_label)
        elif isinstance(operation, Delete):
            self._store.delete_label(operation.name)

    def _replace(self, current_name: str, label: DesiredLabel) -> None:
        if isinstance(self._store, SupportsLabelUpdate):
            self._store.update_label(current_name, label)
            return

        # Not atomic: a failed create leaves the label deleted until the next run.
        self._store.delete_label(current_name)
        try:
            self._store.create_label(label)
        except Exception as e:
            raise RuntimeError(
                f"label {current_name!r} was deleted but re-creating it as {label.name!r} failed: {e}"
            ) from e
