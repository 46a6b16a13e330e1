"""Core definitions shared by every lyrics-wordcloud component: failure taxonomy and the request rate limiter."""

from .exceptions import (
    FailureKind,
    LyricsCloudError,
    InvalidQueryError,
    NotFoundError,
    ExtractionFailedError,
    NetworkError,
    UpstreamStatusError,
    RateLimitedError,
    InsufficientContentError,
)
from .rate_limiter import Admission, RateLimitStore, RateLimiter

__all__ = [
    'FailureKind',
    'LyricsCloudError',
    'InvalidQueryError',
    'NotFoundError',
    'ExtractionFailedError',
    'NetworkError',
    'UpstreamStatusError',
    'RateLimitedError',
    'InsufficientContentError',
    'Admission',
    'RateLimitStore',
    'RateLimiter',
]
