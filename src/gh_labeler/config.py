"""Runtime settings for gh-labeler, read from the environment and `.env`.

The token may come from `GH_LABELER_TOKEN` or the conventional `GITHUB_TOKEN`;
a token passed on the command line takes precedence over both.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gh_labeler.errors import ConfigValidationError


class LabelerSettings(BaseSettings):
    """Settings for the label sync tool.

    Environment variables:
    - GH_LABELER_TOKEN / GITHUB_TOKEN
    - GITHUB_BASE_URL            (optional)
    - LOG_LEVEL                  (optional)
    - GH_LABELER_REQUEST_TIMEOUT (optional, seconds)
    - GH_LABELER_MAX_RETRIES     (optional)
    - GH_LABELER_RETRY_BACKOFF   (optional, seconds)

    Tests can point at a different env file with `LabelerSettings(_env_file=path)`.
    """

    github_token: str = Field(
        default="",
        validation_alias=AliasChoices("GH_LABELER_TOKEN", "GITHUB_TOKEN"),
        description="Token for the GitHub API (needs label write access to sync)",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="REST API root; set for GitHub Enterprise Server",
    )

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Level for the JSON log stream on stderr",
    )

    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="GH_LABELER_REQUEST_TIMEOUT",
        description="Timeout applied to every GitHub API request",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        validation_alias="GH_LABELER_MAX_RETRIES",
        description="Retries for idempotent requests (listing, deleting, reading files)",
    )
    retry_backoff_seconds: float = Field(
        default=0.5,
        ge=0,
        validation_alias="GH_LABELER_RETRY_BACKOFF",
        description="Initial backoff between retries; doubles on each attempt",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def resolve_token(self, explicit: str | None = None) -> str:
        """Return the CLI-provided token, falling back to the configured one."""

        token = (explicit or self.github_token).strip()
        if not token:
            raise ConfigValidationError(
                "GitHub access token is required. "
                "Set it via --access-token, GH_LABELER_TOKEN or GITHUB_TOKEN"
            )
        return token
