"""Human-readable rendering of sync results and label listings."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from gh_labeler.github.store import ObservedLabel
from gh_labeler.sync.operations import Create, Delete, NoChange, Rename, Update
from gh_labeler.sync.result import SyncResult


def format_sync_result(result: SyncResult, *, verbose: bool = False) -> str:
    lines: list[str] = []

    if result.dry_run and result.has_changes:
        lines.append("Sync preview (dry-run mode):")
    elif result.has_changes:
        lines.append("Sync completed:")
    else:
        lines.append("No changes required")

    lines.extend(
        [
            f"  Created:   {result.created}",
            f"  Updated:   {result.updated}",
            f"  Deleted:   {result.deleted}",
            f"  Renamed:   {result.renamed}",
            f"  Unchanged: {result.unchanged}",
        ]
    )

    if verbose and result.operations:
        lines.append("")
        lines.append("Detailed operations:")
        for i, op in enumerate(result.operations, start=1):
            prefix = f"  {i}."
            if isinstance(op, Create):
                lines.append(f"{prefix} Create label: {op.label.name} (#{op.label.normalized_color})")
            elif isinstance(op, Update):
                lines.append(f"{prefix} Update label: {op.current_name}")
                lines.extend(f"      {change}" for change in op.changes)
            elif isinstance(op, Delete):
                lines.append(f"{prefix} Delete label: {op.name} ({op.reason})")
            elif isinstance(op, Rename):
                lines.append(f"{prefix} Rename label: {op.current_name} -> {op.new_name}")
            elif isinstance(op, NoChange):
                lines.append(f"{prefix} No change: {op.name}")

    if result.errors:
        lines.append("")
        lines.append("Errors occurred:")
        lines.extend(f"  {error}" for error in result.errors)

    return "\n".join(lines)


def format_label_table(labels: Sequence[ObservedLabel]) -> str:
    lines = [f"{'Name':<30} {'Color':<8} Description", "-" * 90]
    for label in labels:
        description = label.description if label.description is not None else "(none)"
        lines.append(f"{label.name:<30} {'#' + label.color:<8} {description}")
    return "\n".join(lines)


def labels_to_dicts(labels: Sequence[ObservedLabel]) -> list[dict[str, Any]]:
    return [label.to_dict() for label in labels]
