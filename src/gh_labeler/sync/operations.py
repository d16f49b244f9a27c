"""Label sync operations emitted by the planner."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from gh_labeler.labels import DesiredLabel

OperationKind = Literal["create", "update", "delete", "rename", "no_change"]


@dataclass(frozen=True, slots=True)
class Create:
    label: DesiredLabel

    kind: OperationKind = field(default="create", init=False)

    def describe(self) -> str:
        return f"create label {self.label.name!r} ({self.label.color})"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "name": self.label.name, "label": self.label.to_config_dict()}


@dataclass(frozen=True, slots=True)
class Update:
    current_name: str
    new_label: DesiredLabel
    changes: tuple[str, ...]

    kind: OperationKind = field(default="update", init=False)

    def describe(self) -> str:
        return f"update label {self.current_name!r} ({'; '.join(self.changes)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "name": self.current_name,
            "label": self.new_label.to_config_dict(),
            "changes": list(self.changes),
        }


@dataclass(frozen=True, slots=True)
class Delete:
    name: str
    reason: str

    kind: OperationKind = field(default="delete", init=False)

    def describe(self) -> str:
        return f"delete label {self.name!r} ({self.reason})"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "name": self.name, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class Rename:
    current_name: str
    new_name: str
    new_label: DesiredLabel

    kind: OperationKind = field(default="rename", init=False)

    def describe(self) -> str:
        return f"rename label {self.current_name!r} -> {self.new_name!r}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "name": self.current_name,
            "new_name": self.new_name,
            "label": self.new_label.to_config_dict(),
        }


@dataclass(frozen=True, slots=True)
class NoChange:
    name: str

    kind: OperationKind = field(default="no_change", init=False)

    def describe(self) -> str:
        return f"no change for label {self.name!r}"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "name": self.name}


SyncOperation = Create | Update | Delete | Rename | NoChange

REASON_MARKED_FOR_DELETION = "marked for deletion"
REASON_NOT_IN_CONFIGURATION = "not defined in configuration"
