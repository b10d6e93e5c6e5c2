"""Pytest configuration for the chartfeed test suite."""

from __future__ import annotations

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--chartfeed-run-integration",
        action="store_true",
        default=False,
        help="Run chartfeed integration tests that call Alpha Vantage and Datawrapper.",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks chartfeed tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--chartfeed-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --chartfeed-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
