"""License compliance metric."""

from typing import Any

from module_scorecard.metrics.base import (
    LatencyTimer,
    MetricContext,
    MetricSpec,
    MetricSuccess,
)
from module_scorecard.vcs.github import GitHubClient, decode_content

NAME = "License"

# SPDX identifiers accepted as compatible
APPROVED_LICENSE_IDS = frozenset({"MIT", "LGPL", "Apache-1.0", "Apache-1.1"})

# Full-text names searched for in the README when the SPDX id does not match
APPROVED_LICENSE_NAMES = (
    "MIT",
    "GNU Lesser General Public License",
    "Apache License 1.0",
    "Apache License 1.1",
)


def has_approved_license_id(repo_data: dict[str, Any]) -> bool:
    license_info = repo_data.get("license")
    if not isinstance(license_info, dict):
        return False
    return license_info.get("spdx_id") in APPROVED_LICENSE_IDS


def mentions_approved_license(readme_text: str) -> bool:
    return any(name in readme_text for name in APPROVED_LICENSE_NAMES)


async def check_license(client: GitHubClient, context: MetricContext) -> MetricSuccess:
    """
    Score 1 if the repository carries an approved license.

    The SPDX identifier GitHub detected is checked first; only if it is not
    approved is the README fetched and searched for an approved license name.
    Latency covers every call made.
    """
    timer = LatencyTimer()
    with timer.measure():
        repo_data = await client.get_repository(context.owner, context.repo)

    if has_approved_license_id(repo_data):
        spdx_id = repo_data["license"]["spdx_id"]
        return MetricSuccess(NAME, 1.0, timer.total_ms, f"Approved license: {spdx_id}.")

    with timer.measure():
        readme = await client.get_readme(context.owner, context.repo)

    if mentions_approved_license(decode_content(readme)):
        return MetricSuccess(
            NAME, 1.0, timer.total_ms, "Approved license named in README."
        )
    return MetricSuccess(NAME, 0.0, timer.total_ms, "No approved license found.")


METRIC = MetricSpec(
    name=NAME,
    score_field="license",
    latency_field="license_latency",
    checker=check_license,
)
