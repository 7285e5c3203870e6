"""
Core evaluation pipeline for Module Scorecard.

URL -> identity -> five concurrent metrics -> net score -> result line.
"""

import asyncio
import logging

from module_scorecard.config import ScorecardConfig, load_config, set_verify_ssl
from module_scorecard.http_client import close_async_http_client
from module_scorecard.metrics import (
    METRICS,
    MetricContext,
    MetricFailure,
    MetricResult,
    MetricSpec,
    run_metric,
)
from module_scorecard.resolvers import NpmRegistryClient, resolve
from module_scorecard.scorecard import Scorecard
from module_scorecard.vcs.github import GitHubClient

logger = logging.getLogger(__name__)


def apply_result(card: Scorecard, spec: MetricSpec, result: MetricResult) -> None:
    """Write one metric result into the scorecard fields named by its MetricSpec."""
    if isinstance(result, MetricFailure):
        logger.warning(
            "%s defaulted to %s for %s/%s: %s",
            spec.name,
            result.default_score,
            card.owner,
            card.repo,
            result.reason,
        )
        card.record(
            spec.score_field, spec.latency_field, result.default_score, result.latency_ms
        )
        return

    logger.debug(
        "%s for %s/%s: %s (%d ms) %s",
        spec.name,
        card.owner,
        card.repo,
        result.score,
        result.latency_ms,
        result.message,
    )
    card.record(spec.score_field, spec.latency_field, result.score, result.latency_ms)


async def score_card(card: Scorecard, client: GitHubClient) -> Scorecard:
    """
    Run every metric against a resolved scorecard and aggregate.

    The metrics run concurrently; each writes only its own fields.
    """
    context = MetricContext(owner=card.owner, repo=card.repo, url=card.url)
    results = await asyncio.gather(
        *(run_metric(spec, client, context) for spec in METRICS)
    )
    for spec, result in zip(METRICS, results):
        apply_result(card, spec, result)
    card.calculate_net_score()
    return card


def build_clients(
    config: ScorecardConfig,
) -> tuple[GitHubClient, NpmRegistryClient]:
    """Create the upstream clients described by a configuration."""
    set_verify_ssl(config.verify_ssl)
    return GitHubClient.from_config(config), NpmRegistryClient(config.npm_registry)


async def evaluate_module_async(
    url: str,
    client: GitHubClient | None = None,
    registry: NpmRegistryClient | None = None,
    config: ScorecardConfig | None = None,
) -> str:
    """
    Evaluate one module URL and return its serialized scorecard.

    Args:
        url: GitHub repository or npm package page URL.
        client: GitHub client; built from config when omitted.
        registry: npm registry client; built from config when omitted.
        config: Configuration used for missing clients. Defaults to load_config().

    Raises:
        InvalidURLError: If the URL's hostname is not supported.
        ScorecardError: If resolving an npm package fails.
        ValueError: If no GitHub token is configured.
    """
    if registry is None:
        config = config or load_config()
        registry = NpmRegistryClient(config.npm_registry)

    card = await resolve(url, registry)

    if client is None:
        config = config or load_config()
        set_verify_ssl(config.verify_ssl)
        client = GitHubClient.from_config(config)

    await score_card(card, client)
    return card.get_results()


async def _evaluate_and_close(url: str, config: ScorecardConfig | None) -> str:
    try:
        return await evaluate_module_async(url, config=config)
    finally:
        await close_async_http_client()


def evaluate_module(url: str, config: ScorecardConfig | None = None) -> str:
    """Synchronous entry point around evaluate_module_async()."""
    return asyncio.run(_evaluate_and_close(url, config))
