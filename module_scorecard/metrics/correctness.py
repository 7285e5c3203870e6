"""Correctness metric: test suite presence and bug backlog."""

import json
import logging
from typing import Any

from module_scorecard.errors import ScorecardError
from module_scorecard.metrics.base import (
    LatencyTimer,
    MetricContext,
    MetricSpec,
    MetricSuccess,
)
from module_scorecard.vcs.github import GitHubClient, decode_content

logger = logging.getLogger(__name__)

NAME = "Correctness"

MANIFEST_PATH = "package.json"
TEST_COMPONENT = 0.5
NEUTRAL_BUG_COMPONENT = 0.5


def has_test_script(manifest_text: str) -> bool:
    """Return True if a package.json declares a non-empty scripts.test entry."""
    try:
        manifest = json.loads(manifest_text)
    except ValueError:
        return False
    if not isinstance(manifest, dict):
        return False
    scripts = manifest.get("scripts")
    return isinstance(scripts, dict) and bool(scripts.get("test"))


def score_bug_ratio(issues: list[dict[str, Any]]) -> float:
    """
    Score the share of bug-labelled issues that are still open.

    Scoring (0 to 0.5):
    - No bug issues at all: 0.5 (neutral)
    - open ratio >= 0.5: 0
    - open ratio >= 0.3: 0.1
    - open ratio >= 0.1: 0.3
    - otherwise: 0.5
    """
    open_bugs = sum(1 for issue in issues if issue.get("state") == "open")
    closed_bugs = sum(1 for issue in issues if issue.get("state") == "closed")
    total = open_bugs + closed_bugs
    if total == 0:
        return NEUTRAL_BUG_COMPONENT

    open_ratio = open_bugs / total
    if open_ratio >= 0.5:
        return 0.0
    if open_ratio >= 0.3:
        return 0.1
    if open_ratio >= 0.1:
        return 0.3
    return 0.5


async def _probe_tests(
    client: GitHubClient, context: MetricContext, timer: LatencyTimer
) -> bool:
    try:
        with timer.measure():
            payload = await client.get_content(context.owner, context.repo, MANIFEST_PATH)
        return has_test_script(decode_content(payload))
    except ScorecardError as e:
        logger.debug("Test probe for %s/%s: %s", context.owner, context.repo, e)
        return False


async def _probe_bugs(
    client: GitHubClient, context: MetricContext, timer: LatencyTimer
) -> float:
    try:
        with timer.measure():
            issues = await client.list_issues(
                context.owner, context.repo, state="all", labels="bug"
            )
        return score_bug_ratio(issues)
    except ScorecardError as e:
        logger.debug("Bug probe for %s/%s: %s", context.owner, context.repo, e)
        return 0.0


async def check_correctness(
    client: GitHubClient, context: MetricContext
) -> MetricSuccess:
    # Latency is the sum of both probes
    timer = LatencyTimer()
    has_tests = await _probe_tests(client, context, timer)
    bug_component = await _probe_bugs(client, context, timer)

    test_component = TEST_COMPONENT if has_tests else 0.0
    score = min(test_component + bug_component, 1.0)
    message = (
        f"Test script {'found' if has_tests else 'missing'}; "
        f"bug component {bug_component:.1f}."
    )
    return MetricSuccess(NAME, score, timer.total_ms, message)


METRIC = MetricSpec(
    name=NAME,
    score_field="correctness",
    latency_field="correctness_latency",
    checker=check_correctness,
)
