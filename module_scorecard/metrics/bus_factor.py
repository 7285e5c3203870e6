"""Contributor concentration (bus factor) metric."""

from typing import Any

from module_scorecard.metrics.base import (
    LatencyTimer,
    MetricContext,
    MetricSpec,
    MetricSuccess,
)
from module_scorecard.vcs.github import GitHubClient

NAME = "Bus Factor"


def score_top_share(top_share: float) -> float:
    """
    Map the top contributor's share of commits to a score.

    Scoring:
    - share >= 0.8: 0 (one person carries the project)
    - share >= 0.6: 0.2
    - share >= 0.4: 0.5
    - otherwise: 1
    """
    if top_share >= 0.8:
        return 0.0
    if top_share >= 0.6:
        return 0.2
    if top_share >= 0.4:
        return 0.5
    return 1.0


def check_bus_factor_data(contributors: list[dict[str, Any]]) -> MetricSuccess:
    """Score a contributor list as returned by the contributors endpoint."""
    counts = [int(c.get("contributions", 0) or 0) for c in contributors]
    total = sum(counts)
    if not counts or total == 0:
        return MetricSuccess(NAME, 0.0, 0, "No contributors found.")

    top_share = max(counts) / total
    score = score_top_share(top_share)
    message = (
        f"Top contributor made {top_share:.0%} of {total} commits "
        f"across {len(counts)} contributor(s)."
    )
    return MetricSuccess(NAME, score, 0, message)


async def check_bus_factor(client: GitHubClient, context: MetricContext) -> MetricSuccess:
    timer = LatencyTimer()
    with timer.measure():
        contributors = await client.list_contributors(context.owner, context.repo)
    return check_bus_factor_data(contributors)._replace(latency_ms=timer.total_ms)


METRIC = MetricSpec(
    name=NAME,
    score_field="bus_factor",
    latency_field="bus_factor_latency",
    checker=check_bus_factor,
)
