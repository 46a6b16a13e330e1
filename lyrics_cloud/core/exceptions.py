"""
Failure taxonomy for lyrics-wordcloud.

Every failure this package can report has a `FailureKind`. Components raise the
matching exception internally; the resolver and the pipeline convert those
exceptions into typed result objects at their boundary, so callers branch on
`result.failure` instead of catching exceptions.

Exception Hierarchy:
    LyricsCloudError (base)
        InvalidQueryError - empty artist or song
        NotFoundError - no search hit
        ExtractionFailedError - page fetched but no lyrics container
        NetworkError - transport-level failure
            UpstreamStatusError - upstream answered with HTTP status >= 400
        RateLimitedError - client exceeded its request window
        InsufficientContentError - too few meaningful words for a cloud
"""

from enum import Enum
from typing import Optional


class FailureKind(Enum):
    """
    Machine-readable failure kinds

    The value doubles as the `kind` field of HTTP error payloads.
    """
    INVALID_QUERY = "invalid_query"
    NOT_FOUND = "not_found"
    EXTRACTION_FAILED = "extraction_failed"
    NETWORK_ERROR = "network_error"
    RATE_LIMITED = "rate_limited"
    INSUFFICIENT_CONTENT = "insufficient_content"

    @property
    def allows_manual_paste(self) -> bool:
        """True when pasting lyrics by hand is a sensible remedy"""
        return self in (FailureKind.NOT_FOUND, FailureKind.EXTRACTION_FAILED, FailureKind.NETWORK_ERROR)


class LyricsCloudError(Exception):
    """
    Base exception for all lyrics-wordcloud errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g. url, query).
        kind: FailureKind reported to callers for this error.
    """

    kind: Optional[FailureKind] = None

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InvalidQueryError(LyricsCloudError):
    """Raised when artist or song is empty after trimming."""
    kind = FailureKind.INVALID_QUERY


class NotFoundError(LyricsCloudError):
    """Raised when a provider has no match for the query."""
    kind = FailureKind.NOT_FOUND


class ExtractionFailedError(LyricsCloudError):
    """
    Raised when a song page was fetched but holds no lyrics.

    For Genius this means the page has no `data-lyrics-container` element,
    or the containers were empty once annotations were stripped.
    """
    kind = FailureKind.EXTRACTION_FAILED


class NetworkError(LyricsCloudError):
    """Raised on connection errors, DNS failures, resets and malformed payloads."""
    kind = FailureKind.NETWORK_ERROR


class UpstreamStatusError(NetworkError):
    """
    Raised when an upstream service answers with an HTTP error status.

    Attributes:
        status: HTTP status code returned by the upstream service.
    """

    def __init__(self, message: str, status: int, details: Optional[dict] = None) -> None:
        super().__init__(message, details)
        self.status = status


class RateLimitedError(LyricsCloudError):
    """Raised when a client exceeded its admitted requests for the current window."""
    kind = FailureKind.RATE_LIMITED


class InsufficientContentError(LyricsCloudError):
    """
    Raised when text yields too few tokens to build a meaningful cloud.

    Attributes:
        token_count: Number of tokens that survived filtering.
    """
    kind = FailureKind.INSUFFICIENT_CONTENT

    def __init__(self, message: str, token_count: int = 0, details: Optional[dict] = None) -> None:
        super().__init__(message, details)
        self.token_count = token_count
