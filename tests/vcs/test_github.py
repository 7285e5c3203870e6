"""Tests for the GitHub REST client."""

import asyncio
import base64

import httpx
import pytest

from module_scorecard.config import ScorecardConfig
from module_scorecard.errors import (
    MalformedDataError,
    ResourceNotFoundError,
    UpstreamUnavailableError,
)
from module_scorecard.vcs.github import GitHubClient, decode_content


def _client(handler) -> GitHubClient:
    transport = httpx.MockTransport(handler)
    return GitHubClient(
        token="test_token", http_client=httpx.AsyncClient(transport=transport)
    )


def test_github_client_requires_token():
    with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
        GitHubClient(token="")
    with pytest.raises(ValueError, match="GITHUB_TOKEN is required"):
        GitHubClient(token=None)


def test_from_config_uses_token_and_api_base():
    config = ScorecardConfig(github_token="abc", github_api="https://ghe.example.com/api/v3/")
    client = GitHubClient.from_config(config)
    assert client.token == "abc"
    assert client.api_base == "https://ghe.example.com/api/v3"


def test_requests_carry_bearer_token_and_params():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"number": 1}])

    issues = asyncio.run(
        _client(handler).list_issues("octocat", "Hello-World", state="all", labels="bug")
    )
    assert issues == [{"number": 1}]
    assert seen["auth"] == "Bearer test_token"
    assert seen["path"] == "/repos/octocat/Hello-World/issues"
    assert seen["params"] == {"state": "all", "per_page": "100", "labels": "bug"}


def test_not_found_maps_to_resource_not_found():
    client = _client(lambda request: httpx.Response(404, json={"message": "Not Found"}))
    with pytest.raises(ResourceNotFoundError):
        asyncio.run(client.get_readme("octocat", "missing"))


@pytest.mark.parametrize("status", [403, 500, 502])
def test_error_status_maps_to_upstream_unavailable(status):
    client = _client(lambda request: httpx.Response(status, json={"message": "nope"}))
    with pytest.raises(UpstreamUnavailableError) as excinfo:
        asyncio.run(client.get_repository("octocat", "Hello-World"))
    assert excinfo.value.status_code == status


def test_network_error_maps_to_upstream_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(_client(handler).list_contributors("octocat", "Hello-World"))


def test_invalid_json_maps_to_malformed_data():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(MalformedDataError):
        asyncio.run(client.get_repository("octocat", "Hello-World"))


def test_empty_repository_has_no_contributors():
    client = _client(lambda request: httpx.Response(204))
    assert asyncio.run(client.list_contributors("octocat", "empty")) == []


def test_is_collaborator_status_codes():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/maintainer"):
            return httpx.Response(204)
        return httpx.Response(404)

    client = _client(handler)
    assert asyncio.run(client.is_collaborator("o", "r", "maintainer")) is True
    assert asyncio.run(client.is_collaborator("o", "r", "stranger")) is False


def test_list_collaborators_follows_pagination():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[{"login": "carol"}])
        return httpx.Response(
            200,
            json=[{"login": "alice"}, {"login": "bob"}],
            headers={
                "Link": '<https://api.github.com/repos/o/r/collaborators?per_page=100&page=2>; rel="next"'
            },
        )

    logins = asyncio.run(_client(handler).list_collaborators("o", "r"))
    assert logins == {"alice", "bob", "carol"}


class TestDecodeContent:
    def test_decodes_wrapped_base64(self):
        encoded = base64.b64encode("# Hello\nworld\n".encode()).decode()
        payload = {"content": encoded[:8] + "\n" + encoded[8:], "encoding": "base64"}
        assert decode_content(payload) == "# Hello\nworld\n"

    def test_missing_content(self):
        with pytest.raises(MalformedDataError):
            decode_content({"encoding": "base64"})

    def test_unsupported_encoding(self):
        with pytest.raises(MalformedDataError):
            decode_content({"content": "abc", "encoding": "none"})

    def test_invalid_utf8(self):
        payload = {"content": base64.b64encode(b"\xff\xfe\xfd").decode(), "encoding": "base64"}
        with pytest.raises(MalformedDataError):
            decode_content(payload)

    def test_not_an_object(self):
        with pytest.raises(MalformedDataError):
            decode_content([])
