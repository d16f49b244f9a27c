"""Reconciliation planning: desired labels vs. the labels a repository has now.

Each desired label is resolved in configuration order and may consume at most
one existing label, in this priority:

1. exact name,
2. the first alias (in declared order) naming an existing label,
3. the most similar existing name, when similarity is strictly above
   `SIMILARITY_THRESHOLD`,
4. otherwise the label is created.

Existing labels consumed by an earlier desired label are not available to later
ones. Planning is pure: it never talks to the label store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gh_labeler.github.store import ObservedLabel, ObservedSet
from gh_labeler.labels import DesiredLabel, normalize_color, validate_unique_names
from gh_labeler.similarity import SIMILARITY_THRESHOLD, label_similarity
from gh_labeler.sync.operations import (
    REASON_MARKED_FOR_DELETION,
    REASON_NOT_IN_CONFIGURATION,
    Create,
    Delete,
    NoChange,
    Rename,
    SyncOperation,
    Update,
)

logger = logging.getLogger(__name__)

Scorer = Callable[[str, str], float]


@dataclass(frozen=True, slots=True)
class ReconciliationOptions:
    allow_added_labels: bool = False
    dry_run: bool = False


def check_label_changes(current: ObservedLabel, target: DesiredLabel) -> NoChange | Update:
    """Compare an existing label with its desired state.

    `None` and an empty description are treated as different states.
    """

    changes: list[str] = []

    current_color = normalize_color(current.color)
    target_color = target.normalized_color
    if current_color != target_color:
        changes.append(f"color: {current_color} -> {target_color}")

    if current.description != target.description:
        old_desc = current.description if current.description is not None else "(none)"
        new_desc = target.description if target.description is not None else "(none)"
        changes.append(f"description: {old_desc} -> {new_desc}")

    if not changes:
        return NoChange(name=current.name)
    return Update(current_name=current.name, new_label=target, changes=tuple(changes))


class ReconciliationPlanner:
    """Turns (observed labels, desired labels) into an ordered operation plan."""

    def __init__(
        self,
        options: ReconciliationOptions | None = None,
        *,
        scorer: Scorer = label_similarity,
        threshold: float = SIMILARITY_THRESHOLD,
    ) -> None:
        self.options = options or ReconciliationOptions()
        self._scorer = scorer
        self._threshold = threshold

    def plan(self, observed: ObservedSet, desired: Sequence[DesiredLabel]) -> list[SyncOperation]:
        validate_unique_names(desired)

        operations: list[SyncOperation] = []
        processed: set[str] = set()

        def available(name: str) -> ObservedLabel | None:
            if name in processed:
                return None
            return observed.get(name)

        for target in desired:
            if target.delete:
                if available(target.name) is not None:
                    operations.append(Delete(name=target.name, reason=REASON_MARKED_FOR_DELETION))
                    processed.add(target.name)
                continue

            current = available(target.name)
            if current is not None:
                processed.add(current.name)
                operations.append(check_label_changes(current, target))
                continue

            match = self._find_alias_match(target, available)
            if match is None:
                match = self._find_similar_label(target, observed, processed)

            if match is not None:
                processed.add(match.name)
                operations.append(
                    Rename(current_name=match.name, new_name=target.name, new_label=target)
                )
            else:
                operations.append(Create(label=target))

        if not self.options.allow_added_labels:
            for name in sorted(observed):
                if name not in processed:
                    operations.append(Delete(name=name, reason=REASON_NOT_IN_CONFIGURATION))

        logger.debug(
            "Planned label sync",
            extra={"observed": len(observed), "desired": len(desired), "operations": len(operations)},
        )
        return operations

    @staticmethod
    def _find_alias_match(
        target: DesiredLabel,
        available: Callable[[str], ObservedLabel | None],
    ) -> ObservedLabel | None:
        for alias in target.aliases:
            current = available(alias)
            if current is not None:
                return current
        return None

    def _find_similar_label(
        self,
        target: DesiredLabel,
        observed: ObservedSet,
        processed: set[str],
    ) -> ObservedLabel | None:
        best_match: ObservedLabel | None = None
        best_score = self._threshold
        # Ascending name order, strict comparison: ties keep the first name.
        for name in sorted(observed):
            if name in processed:
                continue
            score = self._scorer(name, target.name)
            if score > best_score:
                best_score = score
                best_match = observed[name]
        if best_match is not None:
            logger.debug(
                "Similar label found",
                extra={"label": target.name, "match": best_match.name, "score": best_score},
            )
        return best_match
