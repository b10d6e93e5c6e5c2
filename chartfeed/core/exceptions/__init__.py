"""Exception handling module."""

from chartfeed.core.exceptions.base import (
    AuthenticationError,
    ChartfeedError,
    ConfigurationError,
    FetchError,
    NetworkError,
    NoDataAvailableError,
    ProviderError,
    RateLimitError,
    StageFailureError,
)
from chartfeed.core.exceptions.messages import format_error_response

__all__ = [
    "ChartfeedError",
    "ConfigurationError",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "NetworkError",
    "NoDataAvailableError",
    "FetchError",
    "StageFailureError",
    "format_error_response",
]
