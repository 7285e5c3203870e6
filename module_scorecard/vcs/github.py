"""
GitHub REST client for Module Scorecard.

This module wraps the handful of GitHub REST endpoints the metrics need and
translates transport and status failures into the scorecard error taxonomy.
"""

import base64
import binascii
from typing import Any

import httpx

from module_scorecard.config import GITHUB_API, ScorecardConfig
from module_scorecard.errors import (
    MalformedDataError,
    ResourceNotFoundError,
    UpstreamUnavailableError,
)
from module_scorecard.http_client import _get_async_http_client

# GitHub caps per_page at 100 for every list endpoint used here
MAX_PAGE_SIZE = 100

# Upper bound on pages followed when listing collaborators
MAX_COLLABORATOR_PAGES = 10


class GitHubClient:
    """Authenticated async client for the GitHub REST API."""

    def __init__(
        self,
        token: str | None,
        api_base: str = GITHUB_API,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: GitHub Personal Access Token, sent as a bearer credential.
            api_base: REST API root, overridable for GitHub Enterprise.
            http_client: Client to issue requests with. Defaults to the shared
                pooled client.

        Raises:
            ValueError: If token is empty.
        """
        if not token:
            raise ValueError(
                "GITHUB_TOKEN is required.\n"
                "\n"
                "To get started:\n"
                "1. Create a GitHub Personal Access Token:\n"
                "   → https://github.com/settings/tokens/new\n"
                "2. Select scope: 'public_repo'\n"
                "3. Set the token:\n"
                "   export GITHUB_TOKEN='your_token_here'  # Linux/macOS\n"
                "   or add to your .env file: GITHUB_TOKEN=your_token_here\n"
            )
        self.token = token
        self.api_base = api_base.rstrip("/")
        self._http_client = http_client

    @classmethod
    def from_config(
        cls, config: ScorecardConfig, http_client: httpx.AsyncClient | None = None
    ) -> "GitHubClient":
        return cls(config.github_token, config.github_api, http_client=http_client)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return await _get_async_http_client()

    async def _request(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """
        Issue a GET request and map failures to the error taxonomy.

        Raises:
            ResourceNotFoundError: On 404.
            UpstreamUnavailableError: On network errors and other non-2xx codes.
        """
        if not url.startswith("http"):
            url = f"{self.api_base}{url}"
        client = await self._client()
        try:
            response = await client.get(url, params=params, headers=self._headers())
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(f"GitHub request failed: {e}") from e

        if response.status_code == 404:
            raise ResourceNotFoundError(f"GitHub resource not found: {url}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailableError(
                f"GitHub API returned {response.status_code} for {url}",
                status_code=response.status_code,
            ) from e
        return response

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise MalformedDataError(f"Invalid JSON from GitHub for {path}") from e

    async def list_contributors(
        self, owner: str, repo: str, per_page: int = MAX_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """Return the first page of contributors, ordered by contributions."""
        path = f"/repos/{owner}/{repo}/contributors"
        response = await self._request(path, {"per_page": per_page})
        # Empty repositories answer 204 with no body
        if response.status_code == 204 or not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise MalformedDataError(f"Invalid JSON from GitHub for {path}") from e

    async def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        labels: str | None = None,
        since: str | None = None,
        per_page: int = MAX_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """
        List repository issues.

        Args:
            owner: Repository owner.
            repo: Repository name.
            state: "open", "closed" or "all".
            labels: Comma-separated label filter.
            since: ISO 8601 timestamp; only issues updated at or after it.
            per_page: Page size (max 100).
        """
        params: dict[str, Any] = {"state": state, "per_page": per_page}
        if labels:
            params["labels"] = labels
        if since:
            params["since"] = since
        return await self._get_json(f"/repos/{owner}/{repo}/issues", params)

    async def list_issue_comments(
        self, owner: str, repo: str, issue_number: int
    ) -> list[dict[str, Any]]:
        return await self._get_json(
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            {"per_page": MAX_PAGE_SIZE},
        )

    async def list_collaborators(self, owner: str, repo: str) -> set[str]:
        """
        Return the logins of all repository collaborators.

        Listing collaborators needs push access; callers should expect
        UpstreamUnavailableError (403) for repositories the token cannot
        administer.
        """
        logins: set[str] = set()
        url: str | None = f"/repos/{owner}/{repo}/collaborators"
        params: dict[str, Any] | None = {"per_page": MAX_PAGE_SIZE}
        pages = 0
        while url and pages < MAX_COLLABORATOR_PAGES:
            response = await self._request(url, params)
            try:
                collaborators = response.json()
            except ValueError as e:
                raise MalformedDataError("Invalid JSON for collaborator list") from e
            for collaborator in collaborators:
                login = collaborator.get("login")
                if login:
                    logins.add(login)
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None
            pages += 1
        return logins

    async def is_collaborator(self, owner: str, repo: str, username: str) -> bool:
        """Check a single login; GitHub answers 204 for collaborators, 404 otherwise."""
        try:
            await self._request(f"/repos/{owner}/{repo}/collaborators/{username}")
        except ResourceNotFoundError:
            return False
        return True

    async def get_content(self, owner: str, repo: str, path: str) -> dict[str, Any]:
        """Fetch a file through the contents API (base64 encoded)."""
        return await self._get_json(f"/repos/{owner}/{repo}/contents/{path}")

    async def get_readme(self, owner: str, repo: str) -> dict[str, Any]:
        return await self._get_json(f"/repos/{owner}/{repo}/readme")

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch repository metadata, including the detected license."""
        return await self._get_json(f"/repos/{owner}/{repo}")


def decode_content(payload: dict[str, Any]) -> str:
    """
    Decode the body of a contents/README API response.

    Raises:
        MalformedDataError: If the payload has no content or it does not decode.
    """
    if not isinstance(payload, dict):
        raise MalformedDataError("Content payload is not an object.")
    content = payload.get("content")
    if not isinstance(content, str):
        raise MalformedDataError("Content payload has no 'content' field.")
    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        raise MalformedDataError(f"Unsupported content encoding: {encoding}")
    try:
        return base64.b64decode(content).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise MalformedDataError(f"Could not decode content: {e}") from e
