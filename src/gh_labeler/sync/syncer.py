"""One reconciliation pass against a repository."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from gh_labeler.errors import RepositoryNotFoundError
from gh_labeler.github.store import LabelStore, build_observed_set
from gh_labeler.labels import DesiredLabel, validate_unique_names
from gh_labeler.sync.executor import SyncExecutor
from gh_labeler.sync.operations import SyncOperation
from gh_labeler.sync.planner import ReconciliationOptions, ReconciliationPlanner
from gh_labeler.sync.result import SyncResult

logger = logging.getLogger(__name__)


class LabelSyncer:
    """Synchronizes a repository's labels with a desired label list."""

    def __init__(
        self,
        *,
        store: LabelStore,
        labels: Sequence[DesiredLabel],
        options: ReconciliationOptions | None = None,
        repository: str = "",
    ) -> None:
        validate_unique_names(labels)
        self._store = store
        self._labels = list(labels)
        self._options = options or ReconciliationOptions()
        self._repository = repository
        self._planner = ReconciliationPlanner(self._options)
        self._executor = SyncExecutor(store)

    def plan(self) -> list[SyncOperation]:
        """Check the repository, snapshot its labels and plan the sync."""

        if not self._store.repository_exists():
            raise RepositoryNotFoundError(repository=self._repository or "<unknown>")

        snapshot = build_observed_set(self._store.list_labels())
        logger.info(
            "Fetched current labels",
            extra={"repo": self._repository, "count": len(snapshot)},
        )
        return self._planner.plan(snapshot, self._labels)

    def sync(self) -> SyncResult:
        operations = self.plan()
        result = self._executor.execute(operations, dry_run=self._options.dry_run)
        logger.info(
            "Label sync finished",
            extra={
                "repo": self._repository,
                "dry_run": result.dry_run,
                "total": result.total_operations,
                "errors": len(result.errors),
            },
        )
        return result
