"""
Upstream repository-hosting clients for Module Scorecard.
"""

from module_scorecard.vcs.github import GitHubClient, decode_content

__all__ = [
    "GitHubClient",
    "decode_content",
]
