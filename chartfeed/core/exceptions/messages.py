"""Standard error message templates."""

from enum import Enum
from typing import Any

from chartfeed.core.exceptions.base import ChartfeedError


class ErrorCode(str, Enum):
    """Error codes surfaced to CLI users."""

    GENERAL_ERROR = "GENERAL_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    NO_DATA_AVAILABLE = "NO_DATA_AVAILABLE"
    FETCH_ERROR = "FETCH_ERROR"
    STAGE_FAILURE = "STAGE_FAILURE"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


class ErrorMessageTemplate:
    """Lookup table for default user facing messages."""

    _templates: dict[ErrorCode, str] = {
        ErrorCode.GENERAL_ERROR: "An unknown error occurred",
        ErrorCode.CONFIGURATION_ERROR: "Missing configuration: {missing}",
        ErrorCode.PROVIDER_ERROR: "Remote service {provider} failed: {message}",
        ErrorCode.NETWORK_ERROR: "Network error: {message}",
        ErrorCode.AUTHENTICATION_ERROR: "Authentication failed: {message}",
        ErrorCode.RATE_LIMIT_ERROR: "Request was rate limited",
        ErrorCode.NO_DATA_AVAILABLE: "[{chart_id}] No data available. Update aborted.",
        ErrorCode.FETCH_ERROR: "Fetching stock data failed: {message}",
        ErrorCode.STAGE_FAILURE: "[{chart_id}] {stage} stage failed",
        ErrorCode.UNEXPECTED_ERROR: "An unexpected error occurred",
    }

    @classmethod
    def get_message(cls, error_code: ErrorCode, **kwargs: Any) -> str:
        """Render the template for ``error_code``.

        Falls back to the generic message when a template variable is missing.
        """
        template = cls._templates.get(error_code, cls._templates[ErrorCode.GENERAL_ERROR])
        try:
            return template.format(**kwargs)
        except KeyError:
            return f"{cls._templates[ErrorCode.GENERAL_ERROR]} (error code: {error_code.value})"


def format_error_response(error: ChartfeedError, **context: Any) -> dict[str, Any]:
    """Build the ``{code, message, details}`` payload printed by the CLI.

    ``context`` is merged into the details so callers can name the chart the
    failure belongs to.
    """
    details = {**context, **error.details}
    return {"code": error.error_code, "message": error.message, "details": details}


__all__ = ["ErrorCode", "ErrorMessageTemplate", "format_error_response"]
