"""Ramp-up metric: how well the README onboards a new developer."""

import re

from pymarkdown.api import PyMarkdownApi, PyMarkdownApiException

from module_scorecard.errors import MalformedDataError
from module_scorecard.metrics.base import (
    LatencyTimer,
    MetricContext,
    MetricSpec,
    MetricSuccess,
)
from module_scorecard.vcs.github import GitHubClient, decode_content

NAME = "Ramp Up"

EXPECTED_SECTIONS = ("Installation", "Usage", "Contributing", "License")
SECTION_WEIGHT = 0.2
LINT_WEIGHT = 0.2

_SECTION_PATTERNS = {
    section: re.compile(rf"#\s*{section}", re.IGNORECASE)
    for section in EXPECTED_SECTIONS
}


def find_sections(readme_text: str) -> list[str]:
    """Return the expected sections that appear as markdown headings."""
    return [
        section
        for section, pattern in _SECTION_PATTERNS.items()
        if pattern.search(readme_text)
    ]


def count_lint_failures(readme_text: str) -> int:
    """Run the markdown linter with its default rules; return the failure count."""
    try:
        result = PyMarkdownApi().scan_string(readme_text)
    except PyMarkdownApiException as e:
        raise MalformedDataError(f"Markdown linter failed: {e}") from e
    return len(result.scan_failures)


def score_readme(readme_text: str) -> tuple[float, str]:
    """
    Score README content.

    Scoring:
    - +0.2 per expected section heading (Installation, Usage, Contributing,
      License)
    - +0.2 if the linter reports no issues
    - capped at 1
    """
    sections = find_sections(readme_text)
    failures = count_lint_failures(readme_text)
    hits = len(sections) + (1 if failures == 0 else 0)
    score = min(round(hits * SECTION_WEIGHT, 1), 1.0)
    message = (
        f"{len(sections)}/{len(EXPECTED_SECTIONS)} sections found; "
        f"{failures} lint issue(s)."
    )
    return score, message


async def check_ramp_up(client: GitHubClient, context: MetricContext) -> MetricSuccess:
    timer = LatencyTimer()
    with timer.measure():
        readme = await client.get_readme(context.owner, context.repo)
    score, message = score_readme(decode_content(readme))
    return MetricSuccess(NAME, score, timer.total_ms, message)


METRIC = MetricSpec(
    name=NAME,
    score_field="ramp_up",
    latency_field="ramp_up_latency",
    checker=check_ramp_up,
)
