"""The label store contract the sync engine depends on."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from gh_labeler.labels import DesiredLabel


@dataclass(frozen=True, slots=True)
class ObservedLabel:
    """A label as it currently exists in the repository."""

    id: int
    name: str
    color: str
    description: str | None = None
    is_default: bool = False
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "description": self.description,
            "default": self.is_default,
            "url": self.url,
        }


ObservedSet = dict[str, ObservedLabel]


def build_observed_set(labels: Iterable[ObservedLabel]) -> ObservedSet:
    return {label.name: label for label in labels}


class LabelStore(Protocol):
    """Minimal label operations on a single repository."""

    def repository_exists(self) -> bool: ...

    def list_labels(self) -> list[ObservedLabel]: ...

    def create_label(self, label: DesiredLabel) -> ObservedLabel: ...

    def delete_label(self, name: str) -> None: ...


@runtime_checkable
class SupportsLabelUpdate(Protocol):
    """A store that can change a label's name, color and description in one call."""

    def update_label(self, current_name: str, label: DesiredLabel) -> ObservedLabel: ...
