"""
Shared metric types and context helpers.
"""

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Awaitable, Callable, Iterator, NamedTuple, Union

if TYPE_CHECKING:
    from module_scorecard.vcs.github import GitHubClient

logger = logging.getLogger(__name__)


class MetricContext(NamedTuple):
    """Context provided to metric checks."""

    owner: str
    repo: str
    url: str


class MetricSuccess(NamedTuple):
    """A metric that ran to completion."""

    name: str
    score: float
    latency_ms: int
    message: str = ""


class MetricFailure(NamedTuple):
    """A metric that raised; the scorecard gets default_score instead."""

    name: str
    reason: str
    default_score: float = 0.0
    latency_ms: int = 0


MetricResult = Union[MetricSuccess, MetricFailure]

MetricChecker = Callable[["GitHubClient", MetricContext], Awaitable[MetricSuccess]]


class MetricSpec(NamedTuple):
    """Specification for a metric check."""

    name: str
    score_field: str
    latency_field: str
    checker: MetricChecker
    default_score: float = 0.0


class LatencyTimer:
    """Accumulate wall-clock milliseconds spent in upstream calls."""

    def __init__(self) -> None:
        self.total_ms = 0

    @contextmanager
    def measure(self) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.total_ms += round((time.perf_counter() - start) * 1000)


async def run_metric(
    spec: MetricSpec, client: "GitHubClient", context: MetricContext
) -> MetricResult:
    """
    Run one metric and turn any exception into a MetricFailure.

    Nothing raised by a checker escapes this function.
    """
    try:
        result = await spec.checker(client, context)
    except Exception as e:
        reason = f"{type(e).__name__}: {e}"
        logger.debug("%s failed for %s/%s: %s", spec.name, context.owner, context.repo, reason)
        return MetricFailure(spec.name, reason, default_score=spec.default_score)
    return result
