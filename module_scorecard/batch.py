"""Batch evaluation of newline-delimited URL files."""

import asyncio
import logging
from pathlib import Path
from typing import Callable

from module_scorecard.config import ScorecardConfig, load_config
from module_scorecard.core import build_clients, evaluate_module_async
from module_scorecard.http_client import close_async_http_client
from module_scorecard.resolvers import NpmRegistryClient
from module_scorecard.vcs.github import GitHubClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 4


def read_urls(path: Path | str) -> list[str]:
    """Read one URL per line, skipping blank lines."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


async def evaluate_urls(
    urls: list[str],
    client: GitHubClient,
    registry: NpmRegistryClient,
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    on_result: Callable[[str], None] | None = None,
) -> list[str | None]:
    """
    Evaluate URLs concurrently.

    Args:
        urls: URLs to evaluate.
        client: GitHub client shared by every evaluation.
        registry: npm registry client shared by every evaluation.
        max_concurrent: Maximum number of URLs evaluated at once.
        on_result: Called with each successful result line as soon as it and
            every URL before it have finished, so output keeps input order.

    Returns:
        One entry per input URL, in input order: the result line, or None if
        that URL failed. Failures are logged and never stop the batch.
    """
    semaphore = asyncio.Semaphore(max(1, max_concurrent))
    results: list[str | None] = [None] * len(urls)
    finished = [False] * len(urls)
    next_index = 0

    def _flush() -> None:
        nonlocal next_index
        while next_index < len(urls) and finished[next_index]:
            result = results[next_index]
            if on_result is not None and result is not None:
                on_result(result)
            next_index += 1

    async def _evaluate(index: int, url: str) -> None:
        async with semaphore:
            try:
                result = await evaluate_module_async(url, client=client, registry=registry)
            except Exception as e:
                logger.error("Error evaluating module at %s: %s", url, e)
                result = None
            else:
                logger.info("Results for %s: %s", url, result)
        results[index] = result
        finished[index] = True
        _flush()

    await asyncio.gather(*(_evaluate(index, url) for index, url in enumerate(urls)))
    return results


async def _evaluate_file_async(
    path: Path | str,
    config: ScorecardConfig,
    max_concurrent: int,
    echo: Callable[[str], None],
) -> list[str]:
    urls = read_urls(path)
    logger.info("Found %d URL(s) in %s", len(urls), path)
    client, registry = build_clients(config)
    try:
        results = await evaluate_urls(
            urls, client, registry, max_concurrent, on_result=echo
        )
    finally:
        await close_async_http_client()
    return [result for result in results if result is not None]


def evaluate_file(
    path: Path | str,
    config: ScorecardConfig | None = None,
    max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    echo: Callable[[str], None] = print,
) -> list[str]:
    """
    Evaluate every URL in a file and print each result line as it is ready.

    Args:
        path: File with one URL per line.
        config: Configuration; defaults to load_config().
        max_concurrent: Maximum number of URLs evaluated at once.
        echo: Output function for result lines.

    Returns:
        The result lines of the URLs that evaluated successfully.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If no GitHub token is configured.
    """
    logger.info("Reading URLs from file: %s", path)
    config = config or load_config()
    return asyncio.run(_evaluate_file_async(path, config, max_concurrent, echo))
