"""
Tests for the core evaluation pipeline.
"""

import asyncio
import json
import logging

import pytest

import module_scorecard.metrics.ramp_up as ramp_up
from module_scorecard.core import apply_result, evaluate_module_async, score_card
from module_scorecard.errors import InvalidURLError, UpstreamUnavailableError
from module_scorecard.metrics import METRICS, MetricFailure, MetricSuccess
from module_scorecard.metrics.bus_factor import METRIC as BUS_FACTOR
from module_scorecard.scorecard import Scorecard

README = "# Demo\n\n## Installation\n\n## Usage\n\n## License\n\nMIT\n"


@pytest.fixture(autouse=True)
def _clean_lint(monkeypatch):
    monkeypatch.setattr(ramp_up, "count_lint_failures", lambda text: 0)


@pytest.fixture
def healthy_client(fake_client, content_payload):
    return fake_client(
        get_readme=content_payload(README),
        get_content=content_payload('{"scripts": {"test": "jest"}}'),
        list_issues=[],
        list_contributors=[{"contributions": 30}, {"contributions": 30}, {"contributions": 40}],
        get_repository={"license": {"spdx_id": "MIT"}},
    )


class FakeRegistry:
    async def get_repository_url(self, package_url):
        return "git+https://github.com/lodash/lodash.git"


def test_score_card_runs_every_metric(healthy_client):
    card = Scorecard(url="https://github.com/octocat/Hello-World", owner="octocat", repo="Hello-World")
    asyncio.run(score_card(card, healthy_client))

    assert card.ramp_up == pytest.approx(0.8)
    assert card.correctness == 1.0
    assert card.bus_factor == 0.5
    assert card.responsive_maintainer == 1.0
    assert card.license == 1.0
    assert card.net_score == pytest.approx((0.8 + 1.0 + 0.5 + 1.0 + 1.0) / 5)
    assert card.owner == "octocat"
    assert card.repo == "Hello-World"


def test_failing_metric_does_not_abort_pipeline(fake_client, content_payload, caplog):
    client = fake_client(
        get_readme=content_payload(README),
        get_content=content_payload("{}"),
        list_issues=[],
        list_contributors=UpstreamUnavailableError("rate limited", 403),
        get_repository={"license": {"spdx_id": "MIT"}},
    )
    card = Scorecard(url="https://github.com/o/r", owner="o", repo="r")
    with caplog.at_level(logging.WARNING, logger="module_scorecard"):
        asyncio.run(score_card(card, client))

    assert card.bus_factor == 0
    assert card.bus_factor_latency == 0
    assert card.license == 1.0
    assert "Bus Factor defaulted" in caplog.text
    assert "rate limited" in caplog.text


def test_apply_result_writes_spec_fields():
    card = Scorecard(url="u", owner="o", repo="r")
    apply_result(card, BUS_FACTOR, MetricSuccess("Bus Factor", 0.2, 33, "msg"))
    assert (card.bus_factor, card.bus_factor_latency) == (0.2, 33)
    apply_result(card, BUS_FACTOR, MetricFailure("Bus Factor", "boom"))
    assert (card.bus_factor, card.bus_factor_latency) == (0.0, 0)


def test_sub_scores_stay_in_range_for_all_metrics(healthy_client):
    card = Scorecard(url="https://github.com/o/r", owner="o", repo="r")
    asyncio.run(score_card(card, healthy_client))
    for spec in METRICS:
        assert 0 <= getattr(card, spec.score_field) <= 1
        assert getattr(card, spec.latency_field) >= 0


def test_evaluate_module_async_serializes(healthy_client):
    result = asyncio.run(
        evaluate_module_async(
            "https://www.npmjs.com/package/lodash",
            client=healthy_client,
            registry=FakeRegistry(),
        )
    )
    record = json.loads(result)
    assert record["URL"] == "https://www.npmjs.com/package/lodash"
    assert record["License"] == 1
    assert ("get_readme", ("lodash", "lodash")) in healthy_client.calls


def test_evaluate_module_async_rejects_unknown_host(healthy_client):
    with pytest.raises(InvalidURLError):
        asyncio.run(
            evaluate_module_async(
                "https://example.com/a/b", client=healthy_client, registry=FakeRegistry()
            )
        )
    assert healthy_client.calls == []
