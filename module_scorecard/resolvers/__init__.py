"""
Identity resolution: map an input URL to the (owner, repo) it is scored as.
"""

import logging
from urllib.parse import urlparse

from module_scorecard.errors import InvalidURLError
from module_scorecard.resolvers.npm import NpmRegistryClient
from module_scorecard.scorecard import Scorecard

logger = logging.getLogger(__name__)

GITHUB_HOST_MARKER = "github.com"
NPM_HOST_MARKER = "npmjs.com"

__all__ = [
    "GITHUB_HOST_MARKER",
    "NPM_HOST_MARKER",
    "NpmRegistryClient",
    "classify_url",
    "is_valid_url",
    "parse_repository_url",
    "resolve",
]


def is_valid_url(url: object) -> bool:
    """Basic syntactic check: an http(s) URL with a host."""
    if not isinstance(url, str) or not url.strip():
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def classify_url(url: str) -> str:
    """
    Classify a URL by hostname.

    Returns:
        "github" or "npm".

    Raises:
        InvalidURLError: For any other (or missing) hostname.
    """
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError as e:
        raise InvalidURLError() from e
    if GITHUB_HOST_MARKER in hostname:
        return "github"
    if NPM_HOST_MARKER in hostname:
        return "npm"
    raise InvalidURLError()


def parse_repository_url(repo_url: str) -> tuple[str, str]:
    """
    Extract (owner, repo) from a repository URL.

    The 4th and 5th "/"-separated segments are the owner and the repository;
    a trailing ".git" is dropped. Works for https://github.com/o/r as well as
    git+https://github.com/o/r.git and git+ssh://git@github.com/o/r.git.

    Raises:
        InvalidURLError: If the URL has no owner/repo segments.
    """
    parts = repo_url.strip().split("/")
    if len(parts) < 5 or not parts[3] or not parts[4]:
        raise InvalidURLError()
    owner = parts[3]
    repo = parts[4]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidURLError()
    return owner, repo


async def resolve(url: str, registry: NpmRegistryClient | None = None) -> Scorecard:
    """
    Create the scorecard for an input URL with its identity filled in.

    GitHub URLs are used directly. npm package URLs are resolved to their
    repository through the registry first.

    Args:
        url: GitHub repository or npm package page URL.
        registry: npm registry client; a default one is created when omitted.

    Returns:
        Scorecard with url, owner and repo set.

    Raises:
        InvalidURLError: If the hostname is not supported.
        ScorecardError: If the npm registry lookup fails.
    """
    trimmed = url.strip()
    logger.info("Creating scorecard for URL: %s", trimmed)

    kind = classify_url(trimmed)
    if kind == "github":
        logger.info("Detected GitHub URL: %s", trimmed)
        repo_url = trimmed
    else:
        logger.info("Detected npm URL: %s", trimmed)
        registry = registry or NpmRegistryClient()
        repo_url = await registry.get_repository_url(trimmed)
        logger.info("npm repository URL: %s", repo_url)

    owner, repo = parse_repository_url(repo_url)
    logger.info("Owner: %s, Repo: %s", owner, repo)
    return Scorecard(url=trimmed, owner=owner, repo=repo)
