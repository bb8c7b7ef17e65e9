"""Custom exceptions for the PodcastIndex client."""


class PodcastIndexError(Exception):
    """Base exception for all PodcastIndex client errors."""

    pass


class ConfigurationError(PodcastIndexError, ValueError):
    """Missing or unusable API credentials."""

    pass


class NotFoundError(PodcastIndexError):
    """
    The service answered with a well-formed reply whose status is false.

    Raised instead of returning an empty result so callers can tell
    "no results" apart from a failed request.
    """

    def __init__(self, operation: str, message: str):
        # Both arguments go to args so pickle and copy can rebuild the error
        super().__init__(operation, message)
        self.operation = operation
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"NotFoundError(operation={self.operation!r}, message={self.message!r})"
