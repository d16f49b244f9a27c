"""Desired label definitions and label configuration loading.

Label configuration is a list of label mappings, in JSON or YAML:

    - name: bug
      color: "#d73a4a"
      description: Something isn't working
      aliases: [defect]
    - name: wontfix
      color: "#ffffff"
      delete: true

Labels are stable, human-readable names (not machine IDs) so that repositories
can be reconciled idempotently and previous names can be carried forward as
aliases.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal, Protocol, TextIO

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gh_labeler.errors import (
    ConfigFileNotFoundError,
    ConfigValidationError,
    DuplicateLabelError,
    InvalidColorError,
    InvalidRepositoryFormatError,
    LabelValidationError,
)

logger = logging.getLogger(__name__)

ConfigFormat = Literal["json", "yaml"]

CONVENTION_CONFIG_FILES: tuple[str, ...] = (
    ".gh-labeler.json",
    ".gh-labeler.yaml",
    ".gh-labeler.yml",
    ".github/labels.json",
    ".github/labels.yaml",
    ".github/labels.yml",
)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def normalize_color(color: str) -> str:
    """Strip a leading '#' and lower-case the hex digits."""

    return color.strip().lstrip("#").lower()


def is_valid_hex_color(color: str) -> bool:
    """Return True for exactly six hex digits (no '#')."""

    return len(color) == 6 and all(c in _HEX_DIGITS for c in color)


class DesiredLabel(BaseModel):
    """A label as it should exist in the repository."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    color: str
    description: str | None = Field(default=None)
    aliases: list[str] = Field(default_factory=list)
    delete: bool = Field(default=False)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Label name cannot be empty")
        return value

    @field_validator("color")
    @classmethod
    def _color_is_hex(cls, value: str) -> str:
        if not value.startswith("#") or not is_valid_hex_color(normalize_color(value)):
            raise ValueError(f"Invalid label color: {value!r} (expected '#' followed by 6 hex digits)")
        return value

    @property
    def normalized_color(self) -> str:
        return normalize_color(self.color)

    def to_config_dict(self) -> dict[str, Any]:
        """Dump in the on-disk configuration shape (defaults omitted)."""

        data: dict[str, Any] = {"name": self.name, "color": self.color}
        if self.description is not None:
            data["description"] = self.description
        if self.aliases:
            data["aliases"] = list(self.aliases)
        if self.delete:
            data["delete"] = True
        return data


def make_label(data: Any) -> DesiredLabel:
    """Validate one label mapping, translating pydantic errors into our taxonomy."""

    if not isinstance(data, dict):
        raise LabelValidationError(f"Label entry must be a mapping, got {type(data).__name__}")
    try:
        return DesiredLabel.model_validate(data)
    except ValidationError as e:
        color = data.get("color")
        if any(err.get("loc") == ("color",) for err in e.errors()) and isinstance(color, str):
            raise InvalidColorError(color) from e
        name = data.get("name", "<unnamed>")
        raise LabelValidationError(f"Invalid label {name!r}: {e}") from e


def validate_unique_names(labels: Sequence[DesiredLabel]) -> None:
    counts = Counter(label.name for label in labels)
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if duplicates:
        raise DuplicateLabelError(duplicates)


def parse_repository(repository: str) -> tuple[str, str]:
    """Split "owner/repo" into its parts."""

    parts = repository.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidRepositoryFormatError(repository)
    return parts[0], parts[1]


def parse_remote_config_spec(spec: str) -> tuple[str, str]:
    """Split "owner/repo:path/to/file" into (repository, path)."""

    repository, sep, path = spec.partition(":")
    if not sep:
        raise ConfigValidationError(
            f"Invalid remote config format: {spec} (expected 'owner/repo:path/to/file')"
        )
    if not path:
        raise ConfigValidationError(f"Empty file path in remote config: {spec}")
    parse_repository(repository)
    return repository, path


def default_labels() -> list[DesiredLabel]:
    """GitHub's standard label set."""

    return [
        DesiredLabel(
            name="bug",
            color="#d73a4a",
            description="Something isn't working",
            aliases=["defect"],
        ),
        DesiredLabel(
            name="enhancement",
            color="#a2eeef",
            description="New feature or request",
            aliases=["feature"],
        ),
        DesiredLabel(
            name="documentation",
            color="#0075ca",
            description="Improvements or additions to documentation",
            aliases=["docs"],
        ),
        DesiredLabel(
            name="duplicate",
            color="#cfd3d7",
            description="This issue or pull request already exists",
        ),
        DesiredLabel(
            name="good first issue",
            color="#7057ff",
            description="Good for newcomers",
            aliases=["beginner-friendly"],
        ),
        DesiredLabel(
            name="help wanted",
            color="#008672",
            description="Extra attention is needed",
        ),
    ]


def detect_format(content: str) -> ConfigFormat:
    stripped = content.lstrip()
    if stripped.startswith("[") or stripped.startswith("{"):
        return "json"
    return "yaml"


def format_for_path(path: Path) -> ConfigFormat:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return "json"
    if suffix in {".yaml", ".yml"}:
        return "yaml"
    raise ConfigValidationError(
        f"Unsupported config file extension: {path.name} (expected .json, .yaml or .yml)"
    )


def parse_labels(content: str, fmt: ConfigFormat | None = None) -> list[DesiredLabel]:
    """Parse and validate a label configuration document."""

    fmt = fmt or detect_format(content)
    try:
        if fmt == "json":
            raw = json.loads(content)
        else:
            raw = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigValidationError(f"Failed to parse {fmt.upper()} label configuration: {e}") from e

    if raw is None:
        raw = []
    if not isinstance(raw, list):
        raise ConfigValidationError("Label configuration must be a list of labels")

    labels = [make_label(item) for item in raw]
    validate_unique_names(labels)
    return labels


def load_labels_from_file(path: Path) -> list[DesiredLabel]:
    fmt = format_for_path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigFileNotFoundError(searched=(str(path),)) from e
    labels = parse_labels(content, fmt)
    logger.debug("Loaded label configuration", extra={"path": str(path), "labels": len(labels)})
    return labels


def load_labels_from_stdin(stream: TextIO) -> list[DesiredLabel]:
    return parse_labels(stream.read())


def find_convention_config(directory: Path) -> Path | None:
    """Return the first convention config file present under `directory`."""

    for name in CONVENTION_CONFIG_FILES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def dump_labels(labels: Sequence[DesiredLabel], fmt: ConfigFormat) -> str:
    data = [label.to_config_dict() for label in labels]
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


class TextFileSource(Protocol):
    def get_text_file(self, *, repository: str, path: str, ref: str = "") -> str: ...


def fetch_remote_config(source: TextFileSource, repository: str, path: str) -> list[DesiredLabel]:
    """Load label configuration from a file in another repository."""

    parse_repository(repository)
    try:
        content = source.get_text_file(repository=repository, path=path)
    except FileNotFoundError as e:
        raise ConfigFileNotFoundError(searched=(f"{repository}:{path}",)) from e

    fmt: ConfigFormat | None
    try:
        fmt = format_for_path(Path(path))
    except ConfigValidationError:
        fmt = None
    return parse_labels(content, fmt)


def fetch_convention_config(source: TextFileSource, repository: str) -> list[DesiredLabel]:
    """Load the first convention config file found in a template repository."""

    parse_repository(repository)
    for name in CONVENTION_CONFIG_FILES:
        try:
            content = source.get_text_file(repository=repository, path=name)
        except FileNotFoundError:
            continue
        logger.info("Using template config", extra={"repo": repository, "path": name})
        return parse_labels(content, format_for_path(Path(name)))
    raise ConfigFileNotFoundError(searched=tuple(f"{repository}:{name}" for name in CONVENTION_CONFIG_FILES))
