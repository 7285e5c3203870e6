"""Maintainer responsiveness metric."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from module_scorecard.errors import ScorecardError
from module_scorecard.metrics.base import (
    LatencyTimer,
    MetricContext,
    MetricSpec,
    MetricSuccess,
)
from module_scorecard.vcs.github import GitHubClient

logger = logging.getLogger(__name__)

NAME = "Responsive Maintainer"

LOOKBACK_DAYS = 30


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def lookback_since(now: datetime | None = None) -> str:
    """ISO 8601 timestamp LOOKBACK_DAYS before now, as GitHub expects for 'since'."""
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=LOOKBACK_DAYS)
    return since.strftime("%Y-%m-%dT%H:%M:%SZ")


def score_response_time(average_hours: float) -> float:
    """
    Map the average first-response delay to a score.

    Scoring:
    - <= 24h: 1
    - <= 72h: 0.7
    - <= 168h (7 days): 0.4
    - otherwise: 0
    """
    if average_hours <= 24:
        return 1.0
    if average_hours <= 72:
        return 0.7
    if average_hours <= 168:
        return 0.4
    return 0.0


class CollaboratorLookup:
    """
    Answer "is this login a collaborator?" for one repository.

    The collaborator list is fetched once. When the token is not allowed to
    list collaborators, each login is checked individually, at most once.
    """

    def __init__(
        self, client: GitHubClient, owner: str, repo: str, timer: LatencyTimer
    ):
        self._client = client
        self._owner = owner
        self._repo = repo
        self._timer = timer
        self._listed: set[str] | None = None
        self._listing_attempted = False
        self._checked: dict[str, bool] = {}

    async def is_collaborator(self, login: str) -> bool:
        if not self._listing_attempted:
            self._listing_attempted = True
            try:
                with self._timer.measure():
                    self._listed = await self._client.list_collaborators(
                        self._owner, self._repo
                    )
            except ScorecardError as e:
                logger.debug(
                    "Collaborator list unavailable for %s/%s (%s); checking logins individually",
                    self._owner,
                    self._repo,
                    e,
                )

        if self._listed is not None:
            return login in self._listed

        if login not in self._checked:
            try:
                with self._timer.measure():
                    self._checked[login] = await self._client.is_collaborator(
                        self._owner, self._repo, login
                    )
            except ScorecardError:
                self._checked[login] = False
        return self._checked[login]


async def first_response_hours(
    client: GitHubClient,
    context: MetricContext,
    issue: dict[str, Any],
    lookup: CollaboratorLookup,
    timer: LatencyTimer,
) -> float | None:
    """
    Hours between an issue's creation and the first collaborator comment.

    Returns None if no collaborator commented or the comments are unavailable.
    """
    try:
        with timer.measure():
            comments = await client.list_issue_comments(
                context.owner, context.repo, issue["number"]
            )
        created_at = _parse_timestamp(issue["created_at"])
    except (ScorecardError, KeyError, ValueError, AttributeError, TypeError):
        return None
    if not isinstance(comments, list):
        return None

    dated_comments = []
    for comment in comments:
        try:
            dated_comments.append((_parse_timestamp(comment["created_at"]), comment))
        except (KeyError, ValueError, AttributeError, TypeError):
            continue
    dated_comments.sort(key=lambda item: item[0])

    for commented_at, comment in dated_comments:
        user = comment.get("user")
        login = user.get("login") if isinstance(user, dict) else None
        if not login:
            continue
        if await lookup.is_collaborator(login):
            return (commented_at - created_at).total_seconds() / 3600
    return None


async def check_responsive_maintainer(
    client: GitHubClient, context: MetricContext
) -> MetricSuccess:
    """
    Score how quickly collaborators answer recently active open issues.

    No open issues in the lookback window means nothing is waiting on the
    maintainers, which scores 1. Issues without any collaborator answer
    contribute no sample; if no issue has one, the score is 0.
    """
    timer = LatencyTimer()
    with timer.measure():
        issues = await client.list_issues(
            context.owner, context.repo, state="open", since=lookback_since()
        )

    if not issues:
        return MetricSuccess(
            NAME, 1.0, timer.total_ms, f"No open issues in the last {LOOKBACK_DAYS} days."
        )

    lookup = CollaboratorLookup(client, context.owner, context.repo, timer)
    response_times: list[float] = []
    for issue in issues:
        hours = await first_response_hours(client, context, issue, lookup, timer)
        if hours is not None:
            response_times.append(hours)

    if not response_times:
        return MetricSuccess(
            NAME,
            0.0,
            timer.total_ms,
            f"No collaborator responses on {len(issues)} open issue(s).",
        )

    average = sum(response_times) / len(response_times)
    return MetricSuccess(
        NAME,
        score_response_time(average),
        timer.total_ms,
        f"Average first response {average:.1f}h over {len(response_times)} issue(s).",
    )


METRIC = MetricSpec(
    name=NAME,
    score_field="responsive_maintainer",
    latency_field="responsive_maintainer_latency",
    checker=check_responsive_maintainer,
)
