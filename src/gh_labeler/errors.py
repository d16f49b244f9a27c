"""Error types and process exit codes.

Precondition and authentication errors abort a run before any label is touched.
Failures of individual label operations never surface as exceptions from a run;
they are recorded on the sync result instead.
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_PARTIAL_SUCCESS = 3
EXIT_AUTH_ERROR = 4
EXIT_NOT_FOUND = 5


class LabelerError(Exception):
    """Base class for all gh-labeler errors."""

    exit_code: int = EXIT_ERROR


class ConfigValidationError(LabelerError):
    """Raised when configuration (settings, CLI arguments, label files) is invalid."""

    exit_code = EXIT_CONFIG_ERROR


class LabelValidationError(ConfigValidationError):
    """Raised when a label definition is invalid."""


class InvalidColorError(LabelValidationError):
    def __init__(self, color: str) -> None:
        super().__init__(f"Invalid label color: {color!r} (expected '#' followed by 6 hex digits)")
        self.color = color


class DuplicateLabelError(LabelValidationError):
    def __init__(self, names: list[str]) -> None:
        super().__init__(f"Duplicate label names in configuration: {', '.join(names)}")
        self.names = names


class InvalidRepositoryFormatError(ConfigValidationError):
    def __init__(self, repository: str) -> None:
        super().__init__(f"Invalid repository format: {repository!r} (expected 'owner/repo')")
        self.repository = repository


class ConfigFileNotFoundError(ConfigValidationError):
    """Raised when no label configuration file could be located."""

    def __init__(self, searched: tuple[str, ...]) -> None:
        super().__init__(f"No label configuration file found (searched: {', '.join(searched)})")
        self.searched = searched


class AuthenticationError(LabelerError):
    """Raised when the GitHub token is rejected."""

    exit_code = EXIT_AUTH_ERROR


class RepositoryNotFoundError(LabelerError):
    """Raised when the target repository does not exist or is not visible to the token."""

    exit_code = EXIT_NOT_FOUND

    def __init__(self, repository: str) -> None:
        super().__init__(f"Repository not found: {repository}")
        self.repository = repository


class LabelStoreError(LabelerError):
    """Raised when a GitHub label API call fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
