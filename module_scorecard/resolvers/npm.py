"""
npm registry client.
"""

from typing import Any
from urllib.parse import urlparse

import httpx

from module_scorecard.config import NPM_REGISTRY
from module_scorecard.errors import (
    InvalidURLError,
    MalformedDataError,
    ResourceNotFoundError,
    UpstreamUnavailableError,
)
from module_scorecard.http_client import _get_async_http_client


def package_name_from_url(url: str) -> str:
    """
    Extract the package name from an npm package page URL.

    Scoped packages keep their scope: https://www.npmjs.com/package/@types/node
    yields "@types/node".

    Raises:
        InvalidURLError: If the path is not a /package/<name> page.
    """
    path = urlparse(url).path
    marker = "/package/"
    if marker not in path:
        raise InvalidURLError()
    name = path.split(marker, 1)[1].strip("/")
    parts = name.split("/")
    if name.startswith("@") and len(parts) >= 2:
        name = "/".join(parts[:2])
    else:
        name = parts[0]
    if not name:
        raise InvalidURLError()
    return name


class NpmRegistryClient:
    """Resolve npm packages to their backing source repository."""

    def __init__(
        self,
        registry_base: str = NPM_REGISTRY,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.registry_base = registry_base.rstrip("/")
        self._http_client = http_client

    def metadata_url(self, package_url: str) -> str:
        """Map a package page URL onto the registry metadata endpoint."""
        return f"{self.registry_base}/{package_name_from_url(package_url)}"

    async def get_package_metadata(self, package_url: str) -> dict[str, Any]:
        """
        Fetch the registry document for the package behind a package page URL.

        Raises:
            ResourceNotFoundError: If the registry does not know the package.
            UpstreamUnavailableError: On network errors and other non-2xx codes.
            MalformedDataError: If the response is not JSON.
        """
        url = self.metadata_url(package_url)
        client = self._http_client or await _get_async_http_client()
        try:
            response = await client.get(url)
        except httpx.RequestError as e:
            raise UpstreamUnavailableError(f"npm registry request failed: {e}") from e

        if response.status_code == 404:
            raise ResourceNotFoundError(f"npm package not found: {url}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamUnavailableError(
                f"npm registry returned {response.status_code} for {url}",
                status_code=response.status_code,
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedDataError(f"Invalid JSON from npm registry for {url}") from e

    async def get_repository_url(self, package_url: str) -> str:
        """
        Return the repository URL declared by an npm package.

        Raises:
            MalformedDataError: If the package declares no repository URL.
        """
        metadata = await self.get_package_metadata(package_url)
        repository = metadata.get("repository")
        if isinstance(repository, str):
            repo_url = repository
        elif isinstance(repository, dict):
            repo_url = repository.get("url")
        else:
            repo_url = None
        if not repo_url:
            raise MalformedDataError(
                f"npm package at {package_url} declares no repository URL."
            )
        return repo_url
