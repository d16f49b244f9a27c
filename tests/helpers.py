"""In-memory label stores and label builders shared by tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock
from urllib.parse import unquote

from gh_labeler.errors import LabelStoreError
from gh_labeler.github.store import ObservedLabel
from gh_labeler.labels import DesiredLabel


class InMemoryLabelStore:
    """Label store without an atomic update call (forces delete + create)."""

    def __init__(self, labels: list[ObservedLabel] | None = None, *, exists: bool = True) -> None:
        self.labels: dict[str, ObservedLabel] = {label.name: label for label in labels or []}
        self.exists = exists
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self._next_id = 1000

    def fail(self, method: str, name: str, message: str = "boom") -> None:
        self.failures[(method, name)] = LabelStoreError(message)

    def _check(self, method: str, name: str) -> None:
        self.calls.append((method, name))
        error = self.failures.get((method, name))
        if error is not None:
            raise error

    def repository_exists(self) -> bool:
        return self.exists

    def list_labels(self) -> list[ObservedLabel]:
        return list(self.labels.values())

    def create_label(self, label: DesiredLabel) -> ObservedLabel:
        self._check("create", label.name)
        if label.name in self.labels:
            raise LabelStoreError(f"label {label.name!r} already exists")
        self._next_id += 1
        observed = ObservedLabel(
            id=self._next_id,
            name=label.name,
            color=label.normalized_color,
            description=label.description,
        )
        self.labels[label.name] = observed
        return observed

    def delete_label(self, name: str) -> None:
        self._check("delete", name)
        if name not in self.labels:
            raise LabelStoreError(f"label {name!r} not found")
        del self.labels[name]


class UpdatingLabelStore(InMemoryLabelStore):
    """Label store that supports renaming/restyling in place.

    Like the GitHub API, a description of None leaves the stored one unchanged.
    """

    def update_label(self, current_name: str, label: DesiredLabel) -> ObservedLabel:
        self._check("update", current_name)
        existing = self.labels.pop(current_name)
        observed = ObservedLabel(
            id=existing.id,
            name=label.name,
            color=label.normalized_color,
            description=label.description if label.description is not None else existing.description,
        )
        self.labels[label.name] = observed
        return observed


def observed(name: str, color: str = "d73a4a", description: str | None = None) -> ObservedLabel:
    return ObservedLabel(id=sum(map(ord, name)), name=name, color=color, description=description)


def fake_response(status_code: int = 200, payload: Any = None) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.json.return_value = payload
    return resp


class FakeLabelApi:
    """Stands in for `requests.Session` against the repository labels endpoints.

    Stores exactly the fields each request sends, the way GitHub does.
    """

    def __init__(self, labels: list[dict[str, Any]] | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.labels: dict[str, dict[str, Any]] = {label["name"]: dict(label) for label in labels or []}
        self.sent: list[tuple[str, str | None, dict[str, Any] | None]] = []
        self._next_id = 1000

    def request(
        self,
        method: str,
        url: str,
        *,
        timeout: float,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Mock:
        _, _, tail = url.partition("/labels")
        name = unquote(tail.lstrip("/")) or None
        if method != "GET":
            self.sent.append((method, name, json))

        if method == "GET":
            page = (params or {}).get("page", 1)
            return fake_response(200, list(self.labels.values()) if page == 1 else [])
        if method == "POST":
            assert json is not None
            self._next_id += 1
            created = {
                "id": self._next_id,
                "name": json["name"],
                "color": json["color"],
                "description": json.get("description"),
            }
            self.labels[created["name"]] = created
            return fake_response(201, created)
        if name not in self.labels:
            return fake_response(404, {"message": "Not Found"})
        if method == "PATCH":
            assert json is not None
            updated = self.labels.pop(name)
            updated["name"] = json.get("new_name", name)
            for key in ("color", "description"):
                if key in json:
                    updated[key] = json[key]
            self.labels[updated["name"]] = updated
            return fake_response(200, updated)
        if method == "DELETE":
            del self.labels[name]
            return fake_response(204)
        raise AssertionError(f"unexpected {method} {url}")

    def close(self) -> None:
        pass
