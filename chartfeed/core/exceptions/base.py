"""Core exception classes for chartfeed."""

from typing import Any


class ChartfeedError(Exception):
    """Base exception for chartfeed."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: human readable message
            error_code: machine readable error code
            details: additional context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(ChartfeedError):
    """Required configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if missing:
            super_details["missing"] = missing
        super().__init__(message, "CONFIGURATION_ERROR", super_details)
        self.missing = missing or []


class ProviderError(ChartfeedError):
    """Error raised while talking to a remote service."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = "PROVIDER_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class RateLimitError(ProviderError):
    """Remote service refused the request because of rate limiting."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        retry_after: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if retry_after is not None:
            super_details["retry_after"] = retry_after
        super().__init__(message, provider_name, "RATE_LIMIT_ERROR", super_details)
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Credentials were rejected."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        auth_method: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if auth_method:
            super_details["auth_method"] = auth_method
        super().__init__(message, provider_name, "AUTHENTICATION_ERROR", super_details)


class NetworkError(ProviderError):
    """Transport failure or unexpected HTTP status."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, "NETWORK_ERROR", super_details)
        self.status_code = status_code


class NoDataAvailableError(ChartfeedError):
    """Every requested symbol came back without a usable series."""

    def __init__(
        self,
        message: str,
        symbols: list[str] | None = None,
        reasons: dict[str, str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if symbols is not None:
            super_details["symbols"] = symbols
        if reasons:
            super_details["reasons"] = reasons
        super().__init__(message, "NO_DATA_AVAILABLE", super_details)
        self.symbols = symbols or []
        self.reasons = reasons or {}


class FetchError(ChartfeedError):
    """The fetch fan-out failed as a whole."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if cause is not None:
            super_details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message, "FETCH_ERROR", super_details)
        self.cause = cause


class StageFailureError(ChartfeedError):
    """A publish pipeline stage failed; later stages were skipped."""

    def __init__(
        self,
        stage: str,
        chart_id: str,
        cause: BaseException,
        completed: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.update(
            {
                "chart_id": chart_id,
                "stage": stage,
                "cause": f"{type(cause).__name__}: {cause}",
                "completed_stages": list(completed or []),
            }
        )
        message = f"[{chart_id}] {stage} stage failed: {cause}"
        super().__init__(message, "STAGE_FAILURE", super_details)
        self.stage = stage
        self.chart_id = chart_id
        self.cause = cause
        self.completed = list(completed or [])
