"""
Shared fixtures: an in-memory GitHub client and content payload helpers.
"""

import base64

import pytest


class FakeGitHubClient:
    """Stand-in for GitHubClient returning canned responses.

    Each keyword names a client method. Its value is returned as is, raised if
    it is an exception, or called with the method arguments if it is callable.
    """

    def __init__(self, **responses):
        self.responses = responses
        self.calls: list[tuple[str, tuple]] = []

    async def _answer(self, method: str, *args):
        self.calls.append((method, args))
        if method not in self.responses:
            raise AssertionError(f"Unexpected call: {method}{args}")
        value = self.responses[method]
        if callable(value):
            value = value(*args)
        if isinstance(value, Exception):
            raise value
        return value

    def call_count(self, method: str) -> int:
        return sum(1 for name, _ in self.calls if name == method)

    async def list_contributors(self, owner, repo, per_page=100):
        return await self._answer("list_contributors", owner, repo)

    async def list_issues(
        self, owner, repo, state="open", labels=None, since=None, per_page=100
    ):
        return await self._answer("list_issues", owner, repo, state, labels, since)

    async def list_issue_comments(self, owner, repo, issue_number):
        return await self._answer("list_issue_comments", owner, repo, issue_number)

    async def list_collaborators(self, owner, repo):
        return await self._answer("list_collaborators", owner, repo)

    async def is_collaborator(self, owner, repo, username):
        return await self._answer("is_collaborator", owner, repo, username)

    async def get_content(self, owner, repo, path):
        return await self._answer("get_content", owner, repo, path)

    async def get_readme(self, owner, repo):
        return await self._answer("get_readme", owner, repo)

    async def get_repository(self, owner, repo):
        return await self._answer("get_repository", owner, repo)


def encode_content(text: str) -> dict:
    """Build a contents API payload the way GitHub returns it."""
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    # GitHub wraps base64 bodies at 60 characters
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
    return {"content": wrapped, "encoding": "base64"}


@pytest.fixture
def fake_client():
    """Factory for FakeGitHubClient instances."""
    return FakeGitHubClient


@pytest.fixture
def content_payload():
    """Factory for base64 contents API payloads."""
    return encode_content
