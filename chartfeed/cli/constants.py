"""Exit codes used by CLI commands."""

SUCCESS_EXIT_CODE = 0
SYSTEM_EXIT_CODE = 1
VALIDATION_EXIT_CODE = 2
PROVIDER_EXIT_CODE = 3

__all__ = ["SUCCESS_EXIT_CODE", "SYSTEM_EXIT_CODE", "VALIDATION_EXIT_CODE", "PROVIDER_EXIT_CODE"]
