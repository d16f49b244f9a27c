"""Unit tests for the GitHub label client (mocked HTTP)."""

from __future__ import annotations

import base64
from typing import Any
from unittest.mock import Mock

import pytest
import requests
from github.GithubException import BadCredentialsException, UnknownObjectException

from gh_labeler.errors import (
    AuthenticationError,
    ConfigValidationError,
    InvalidRepositoryFormatError,
    LabelStoreError,
    RepositoryNotFoundError,
)
from gh_labeler.github.client import GitHubClient, encode_path_segment
from gh_labeler.labels import DesiredLabel

BASE = "https://api.github.com/repos/octo-org/octo-repo"


def _response(status_code: int = 200, payload: Any = None) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.json.return_value = payload
    return resp


def _label_json(name: str, color: str = "d73a4a", description: str | None = None, id: int = 1) -> dict:
    return {
        "id": id,
        "name": name,
        "color": color,
        "description": description,
        "default": False,
        "url": f"{BASE}/labels/{encode_path_segment(name)}",
    }


def _client(*responses: Mock, github_api: Mock | None = None) -> tuple[GitHubClient, Mock]:
    session = Mock()
    session.request.side_effect = list(responses)
    client = GitHubClient(
        token="test-token",
        repository="octo-org/octo-repo",
        retry_backoff=0,
        github_api=github_api or Mock(),
        session=session,
    )
    return client, session


def test_requires_token() -> None:
    with pytest.raises(ConfigValidationError, match="token"):
        GitHubClient(token="", repository="octo-org/octo-repo", github_api=Mock(), session=Mock())


def test_rejects_bad_repository() -> None:
    with pytest.raises(InvalidRepositoryFormatError):
        GitHubClient(token="t", repository="octo-org", github_api=Mock(), session=Mock())


def test_sets_auth_headers() -> None:
    client, session = _client()

    headers = session.headers.update.call_args.args[0]
    assert headers["Authorization"] == "Bearer test-token"
    assert headers["Accept"] == "application/vnd.github+json"
    assert client.repository == "octo-org/octo-repo"


def test_bad_credentials_raise_authentication_error(monkeypatch: pytest.MonkeyPatch) -> None:
    github = Mock()
    github.get_user.side_effect = BadCredentialsException(401, {"message": "Bad credentials"}, {})
    monkeypatch.setattr("gh_labeler.github.client.Github", lambda **kwargs: github)

    with pytest.raises(AuthenticationError) as excinfo:
        GitHubClient(token="bad", repository="octo-org/octo-repo", session=Mock())

    assert excinfo.value.exit_code == 4


def test_repository_exists() -> None:
    github = Mock()
    client, _ = _client(github_api=github)

    assert client.repository_exists() is True
    github.get_repo.assert_called_once_with("octo-org/octo-repo")


def test_repository_missing() -> None:
    github = Mock()
    github.get_repo.side_effect = UnknownObjectException(404, {"message": "Not Found"}, {})
    client, _ = _client(github_api=github)

    assert client.repository_exists() is False


def test_list_labels_follows_pagination() -> None:
    first = [_label_json(f"label-{i}", id=i) for i in range(100)]
    second = [_label_json("Bug", "D73A4A", "Broken", id=500)]
    client, session = _client(_response(200, first), _response(200, second))

    labels = client.list_labels()

    assert len(labels) == 101
    assert labels[-1].name == "Bug"
    assert labels[-1].color == "d73a4a"
    assert labels[-1].description == "Broken"
    assert labels[0].description is None
    pages = [c.kwargs["params"]["page"] for c in session.request.call_args_list]
    assert pages == [1, 2]
    assert session.request.call_args.args == ("GET", f"{BASE}/labels")
    assert session.request.call_args.kwargs["timeout"] == 30.0


def test_list_labels_missing_repository() -> None:
    client, _ = _client(_response(404, {"message": "Not Found"}))

    with pytest.raises(RepositoryNotFoundError):
        client.list_labels()


def test_list_labels_retries_server_errors() -> None:
    client, session = _client(_response(502), _response(503), _response(200, [_label_json("bug")]))

    labels = client.list_labels()

    assert [label.name for label in labels] == ["bug"]
    assert session.request.call_count == 3


def test_list_labels_gives_up_after_max_retries() -> None:
    client, session = _client(*[_response(502, {"message": "Bad Gateway"}) for _ in range(4)])

    with pytest.raises(LabelStoreError) as excinfo:
        client.list_labels()

    assert excinfo.value.status_code == 502
    assert "Bad Gateway" in str(excinfo.value)
    assert session.request.call_count == 4


def test_connection_errors_are_retried() -> None:
    client, session = _client(
        requests.ConnectionError("reset"), _response(200, [_label_json("bug")])
    )

    assert [label.name for label in client.list_labels()] == ["bug"]
    assert session.request.call_count == 2


def test_unauthorized_response_is_authentication_error() -> None:
    client, _ = _client(_response(401, {"message": "Bad credentials"}))

    with pytest.raises(AuthenticationError):
        client.list_labels()


def test_create_label_omits_missing_description() -> None:
    client, session = _client(_response(201, _label_json("bug")))

    created = client.create_label(DesiredLabel(name="bug", color="#D73A4A"))

    assert session.request.call_args.args == ("POST", f"{BASE}/labels")
    assert session.request.call_args.kwargs["json"] == {"name": "bug", "color": "d73a4a"}
    assert created.name == "bug"


def test_create_label_sends_description() -> None:
    client, session = _client(_response(201, _label_json("bug", description="Broken")))

    client.create_label(DesiredLabel(name="bug", color="#d73a4a", description="Broken"))

    assert session.request.call_args.kwargs["json"]["description"] == "Broken"


def test_create_label_is_not_retried() -> None:
    client, session = _client(_response(502, {"message": "Bad Gateway"}))

    with pytest.raises(LabelStoreError, match=r"Failed to create label 'bug' \(HTTP 502\)"):
        client.create_label(DesiredLabel(name="bug", color="#d73a4a"))

    assert session.request.call_count == 1


def test_create_label_conflict() -> None:
    client, _ = _client(_response(422, {"message": "Validation Failed"}))

    with pytest.raises(LabelStoreError) as excinfo:
        client.create_label(DesiredLabel(name="bug", color="#d73a4a"))

    assert excinfo.value.status_code == 422


def test_update_label_patches_in_place() -> None:
    client, session = _client(_response(200, _label_json("good first issue", "7057ff")))

    client.update_label(
        "beginner friendly", DesiredLabel(name="good first issue", color="#7057FF")
    )

    assert session.request.call_args.args == ("PATCH", f"{BASE}/labels/beginner%20friendly")
    assert session.request.call_args.kwargs["json"] == {
        "new_name": "good first issue",
        "color": "7057ff",
    }


def test_update_label_sends_description() -> None:
    client, session = _client(_response(200, _label_json("bug", description="Broken")))

    client.update_label("bug", DesiredLabel(name="bug", color="#d73a4a", description="Broken"))

    assert session.request.call_args.kwargs["json"]["description"] == "Broken"


@pytest.mark.parametrize(
    ("name", "segment"),
    [
        ("bug", "bug"),
        ("good first issue", "good%20first%20issue"),
        ("バグ", "%E3%83%90%E3%82%B0"),
        ("area/api", "area%2Fapi"),
        ("a?b#c", "a%3Fb%23c"),
    ],
)
def test_delete_label_encodes_name(name: str, segment: str) -> None:
    client, session = _client(_response(204))

    client.delete_label(name)

    assert session.request.call_args.args == ("DELETE", f"{BASE}/labels/{segment}")


def test_delete_missing_label() -> None:
    client, _ = _client(_response(404, {"message": "Not Found"}))

    with pytest.raises(LabelStoreError, match="HTTP 404"):
        client.delete_label("gone")


def test_delete_after_lost_response_is_not_an_error() -> None:
    client, session = _client(
        requests.Timeout("read timed out"), _response(404, {"message": "Not Found"})
    )

    client.delete_label("stray")

    assert session.request.call_count == 2


def test_delete_not_found_after_server_error_retry_is_not_an_error() -> None:
    client, session = _client(_response(502), _response(404, {"message": "Not Found"}))

    client.delete_label("stray")

    assert session.request.call_count == 2


def test_get_text_file_decodes_base64() -> None:
    content = "- name: bug\n  color: '#d73a4a'\n"
    encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
    client, session = _client(_response(200, {"encoding": "base64", "content": encoded}))

    text = client.get_text_file(repository="octo-org/templates", path="/.github/labels.yml", ref="main")

    assert text == content
    assert session.request.call_args.args == (
        "GET",
        "https://api.github.com/repos/octo-org/templates/contents/.github/labels.yml",
    )
    assert session.request.call_args.kwargs["params"] == {"ref": "main"}


def test_get_text_file_missing() -> None:
    client, _ = _client(_response(404, {"message": "Not Found"}))

    with pytest.raises(FileNotFoundError):
        client.get_text_file(repository="octo-org/templates", path="labels.yml")


def test_close_releases_resources() -> None:
    github = Mock()
    client, session = _client(github_api=github)

    client.close()

    session.close.assert_called_once_with()
    github.close.assert_called_once_with()
