"""GitHub API client wrapper for repository labels.

PyGithub handles authentication and repository lookup; label and contents calls
go straight to the REST API through a `requests.Session` so that every call has
an explicit timeout and idempotent calls can be retried.
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any
from urllib.parse import quote

import requests
from github import Auth, Github
from github.GithubException import BadCredentialsException, GithubException, UnknownObjectException

from gh_labeler.errors import (
    AuthenticationError,
    ConfigValidationError,
    LabelStoreError,
    RepositoryNotFoundError,
)
from gh_labeler.github.store import ObservedLabel
from gh_labeler.labels import DesiredLabel, parse_repository

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def encode_path_segment(value: str) -> str:
    """Percent-encode a label name for use in a URL path (UTF-8, RFC 3986)."""

    return quote(value, safe="")


class GitHubClient:
    """Label store backed by the GitHub REST API."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
        github_api: Github | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ConfigValidationError("GitHub token is required")
        parse_repository(repository.strip().strip("/"))

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_backoff = retry_backoff

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "gh-labeler",
            }
        )

        if github_api is not None:
            self._github = github_api
            logger.debug("Using injected Github instance")
            return

        auth = Auth.Token(token)
        self._github = Github(auth=auth, base_url=self._rest_base_url, timeout=int(timeout))
        self._authenticate()

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _authenticate(self) -> None:
        try:
            login = self._github.get_user().login
        except BadCredentialsException as e:
            raise AuthenticationError("Authentication failed: invalid token") from e
        except GithubException as e:
            if e.status in {401, 403}:
                raise AuthenticationError(f"Authentication failed: {e}") from e
            raise LabelStoreError(f"GitHub API error: {e}", status_code=e.status) from e
        logger.info("Authenticated with GitHub", extra={"login": login})

    def _repo_url(self, *, repository: str, path: str) -> str:
        repository = repository.strip().strip("/")
        path = path.lstrip("/")
        if not path:
            return f"{self._rest_base_url}/repos/{repository}"
        return f"{self._rest_base_url}/repos/{repository}/{path}"

    def _labels_url(self, name: str | None = None) -> str:
        if name is None:
            return self._repo_url(repository=self._repository_name, path="labels")
        return self._repo_url(
            repository=self._repository_name, path=f"labels/{encode_path_segment(name)}"
        )

    def _request(self, method: str, url: str, *, retry: bool = False, **kwargs: Any) -> requests.Response:
        return self._send(method, url, retry=retry, **kwargs)[0]

    def _send(
        self, method: str, url: str, *, retry: bool = False, **kwargs: Any
    ) -> tuple[requests.Response, int]:
        """Send a request with the configured timeout; return the response and the retry count.

        With `retry`, connection errors, timeouts, 429 and 5xx responses are retried
        up to `max_retries` times with exponential backoff.
        """

        retries = self._max_retries if retry else 0
        attempt = 0
        while True:
            try:
                resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= retries:
                    raise LabelStoreError(f"{method} {url} failed: {e}") from e
                logger.warning(
                    "GitHub request failed; retrying",
                    extra={"method": method, "url": url, "attempt": attempt + 1, "error": str(e)},
                )
            else:
                if resp.status_code not in _RETRYABLE_STATUS or attempt >= retries:
                    return resp, attempt
                logger.warning(
                    "GitHub request returned retryable status; retrying",
                    extra={"method": method, "url": url, "attempt": attempt + 1, "status": resp.status_code},
                )
            time.sleep(self._retry_backoff * (2**attempt))
            attempt += 1

    @staticmethod
    def _raise_for_status(resp: requests.Response, action: str) -> None:
        if resp.ok:
            return
        message = ""
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            message = payload["message"]
        if resp.status_code == 401:
            raise AuthenticationError(f"Authentication failed while trying to {action}")
        detail = f": {message}" if message else ""
        raise LabelStoreError(
            f"Failed to {action} (HTTP {resp.status_code}){detail}", status_code=resp.status_code
        )

    @staticmethod
    def _parse_label(data: dict[str, Any]) -> ObservedLabel:
        label_id = data.get("id")
        name = data.get("name")
        if not isinstance(label_id, int) or not isinstance(name, str):
            raise LabelStoreError("Invalid label response: missing id or name")

        color = data.get("color")
        description = data.get("description")
        url = data.get("url")
        return ObservedLabel(
            id=label_id,
            name=name,
            color=color.lower() if isinstance(color, str) else "",
            description=description if isinstance(description, str) else None,
            is_default=bool(data.get("default", False)),
            url=url if isinstance(url, str) else None,
        )

    def repository_exists(self) -> bool:
        try:
            self._github.get_repo(self._repository_name)
        except UnknownObjectException:
            return False
        return True

    def list_labels(self) -> list[ObservedLabel]:
        """Fetch every label in the repository, following pagination."""

        url = self._labels_url()
        labels: list[ObservedLabel] = []
        per_page = 100
        page = 1
        while True:
            resp = self._request("GET", url, retry=True, params={"per_page": per_page, "page": page})
            if resp.status_code == 404:
                raise RepositoryNotFoundError(repository=self._repository_name)
            self._raise_for_status(resp, "list labels")

            payload = resp.json()
            if not isinstance(payload, list):
                raise LabelStoreError("Invalid labels response: expected a list")

            labels.extend(self._parse_label(item) for item in payload if isinstance(item, dict))
            if len(payload) < per_page:
                break
            page += 1

        logger.debug("Listed labels", extra={"repo": self._repository_name, "count": len(labels)})
        return labels

    def create_label(self, label: DesiredLabel) -> ObservedLabel:
        payload: dict[str, Any] = {"name": label.name, "color": label.normalized_color}
        # Omitted rather than "" so a label without a description reads back as None.
        if label.description is not None:
            payload["description"] = label.description

        resp = self._request("POST", self._labels_url(), json=payload)
        self._raise_for_status(resp, f"create label {label.name!r}")
        logger.info("Label created", extra={"repo": self._repository_name, "label": label.name})
        return self._parse_label(resp.json())

    def update_label(self, current_name: str, label: DesiredLabel) -> ObservedLabel:
        """Rename and/or restyle a label in place."""

        payload: dict[str, Any] = {"new_name": label.name, "color": label.normalized_color}
        # Omitted fields are left unchanged; sending "" would store "" rather than null.
        if label.description is not None:
            payload["description"] = label.description
        resp = self._request("PATCH", self._labels_url(current_name), json=payload)
        self._raise_for_status(resp, f"update label {current_name!r}")
        logger.info(
            "Label updated",
            extra={"repo": self._repository_name, "label": current_name, "new_name": label.name},
        )
        return self._parse_label(resp.json())

    def delete_label(self, name: str) -> None:
        resp, retries = self._send("DELETE", self._labels_url(name), retry=True)
        if resp.status_code == 404 and retries > 0:
            # An earlier attempt may have deleted it before its response was lost.
            logger.info(
                "Label already gone after retried delete",
                extra={"repo": self._repository_name, "label": name, "retries": retries},
            )
            return
        self._raise_for_status(resp, f"delete label {name!r}")
        logger.info("Label deleted", extra={"repo": self._repository_name, "label": name})

    def get_text_file(self, *, repository: str, path: str, ref: str = "") -> str:
        """Return the text content of a file in any repository the token can read.

        Raises:
            FileNotFoundError if not present.
        """

        norm = path.lstrip("/")
        url = self._repo_url(repository=repository, path=f"contents/{norm}")
        params: dict[str, str] = {}
        if ref.strip():
            params["ref"] = ref

        resp = self._request("GET", url, retry=True, params=params or None)
        if resp.status_code == 404:
            raise FileNotFoundError(f"File not found: {repository}:{norm}")
        self._raise_for_status(resp, f"read {repository}:{norm}")
        data: dict[str, Any] = resp.json()

        encoding = data.get("encoding")
        content = data.get("content")
        if encoding == "base64" and isinstance(content, str):
            return base64.b64decode(content.encode("utf-8")).decode("utf-8")

        if isinstance(content, str):
            return content
        raise LabelStoreError(f"Unexpected contents response for {repository}:{norm}")

    def close(self) -> None:
        self._session.close()
        self._github.close()
