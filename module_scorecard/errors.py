"""
Error taxonomy shared by the upstream clients, the resolver and the metrics.
"""


class ScorecardError(Exception):
    """Base class for all scorecard pipeline errors."""


class InvalidURLError(ScorecardError):
    """The input URL does not point at a supported host."""

    def __init__(self, message: str = "Invalid URL"):
        super().__init__(message)


class UpstreamUnavailableError(ScorecardError):
    """Network failure, rate limit or non-2xx response from an upstream API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResourceNotFoundError(ScorecardError):
    """An expected upstream resource (manifest, README, package) is missing."""


class MalformedDataError(ScorecardError):
    """Fetched content could not be decoded or parsed."""
