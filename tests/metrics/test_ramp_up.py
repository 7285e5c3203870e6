"""
Tests for the ramp_up metric.
"""

import asyncio

import pytest

import module_scorecard.metrics.ramp_up as ramp_up
from module_scorecard.errors import ResourceNotFoundError
from module_scorecard.metrics.base import MetricContext, MetricFailure, run_metric
from module_scorecard.metrics.ramp_up import (
    METRIC,
    check_ramp_up,
    count_lint_failures,
    find_sections,
    score_readme,
)

CONTEXT = MetricContext(owner="octocat", repo="Hello-World", url="https://github.com/octocat/Hello-World")

FULL_README = """# Demo

## Installation

npm install demo

## Usage

Call it.

## Contributing

Open a pull request.

## License

MIT
"""


@pytest.fixture
def lint_clean(monkeypatch):
    monkeypatch.setattr(ramp_up, "count_lint_failures", lambda text: 0)


@pytest.fixture
def lint_dirty(monkeypatch):
    monkeypatch.setattr(ramp_up, "count_lint_failures", lambda text: 3)


class TestFindSections:
    def test_all_sections(self):
        assert find_sections(FULL_README) == [
            "Installation",
            "Usage",
            "Contributing",
            "License",
        ]

    def test_case_insensitive(self):
        assert find_sections("### INSTALLATION\n#usage\n") == ["Installation", "Usage"]

    def test_plain_words_are_not_headings(self):
        assert find_sections("Installation is easy. Usage too.") == []


class TestScoreReadme:
    def test_full_readme_with_clean_lint_is_capped(self, lint_clean):
        score, _ = score_readme(FULL_README)
        assert score == 1.0

    def test_full_readme_with_lint_issues(self, lint_dirty):
        score, message = score_readme(FULL_README)
        assert score == 0.8
        assert "3 lint issue(s)" in message

    def test_partial_readme(self, lint_dirty):
        score, _ = score_readme("# Demo\n\n## Usage\n\nRun it.\n")
        assert score == 0.2

    def test_empty_sections_clean_lint(self, lint_clean):
        score, _ = score_readme("# Demo\n")
        assert score == 0.2


def test_linter_reports_problems():
    # No space after the hash and no trailing newline
    assert count_lint_failures("#Heading\nText") > 0


def test_linter_accepts_well_formed_readme():
    assert count_lint_failures(FULL_README) == 0
    score, message = score_readme(FULL_README)
    assert score == 1.0
    assert "0 lint issue(s)" in message


def test_check_ramp_up_decodes_readme(fake_client, content_payload, lint_clean):
    client = fake_client(get_readme=content_payload(FULL_README))
    result = asyncio.run(check_ramp_up(client, CONTEXT))
    assert result.score == 1.0
    assert client.calls == [("get_readme", ("octocat", "Hello-World"))]


def test_missing_readme_fails(fake_client):
    client = fake_client(get_readme=ResourceNotFoundError("README"))
    result = asyncio.run(run_metric(METRIC, client, CONTEXT))
    assert isinstance(result, MetricFailure)
    assert result.default_score == 0
