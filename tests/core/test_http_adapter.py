"""Tests for the shared HTTP client."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from chartfeed.core.exceptions import NetworkError, RateLimitError
from chartfeed.core.http_adapter import AuthConfig, AuthType, HttpClient, HttpConfig, RetryConfig


class TestHttpConfig:
    """Test HttpConfig data class."""

    def test_defaults(self):
        config = HttpConfig(base_url="https://api.example.com")

        assert config.timeout is None
        assert config.max_redirects == 5
        assert config.verify_ssl is True
        assert config.headers == {}

    def test_validation_empty_url(self):
        with pytest.raises(ValueError, match="base_url cannot be empty"):
            HttpConfig(base_url="")

    def test_validation_negative_timeout(self):
        with pytest.raises(ValueError, match="timeout must be positive"):
            HttpConfig(base_url="https://api.example.com", timeout=-1.0)


class TestRetryConfig:
    """Test RetryConfig data class."""

    def test_no_retries_by_default(self):
        assert RetryConfig().max_retries == 0

    def test_validation_negative_retries(self):
        with pytest.raises(ValueError, match="max_retries must be non-negative"):
            RetryConfig(max_retries=-1)


class TestAuthConfig:
    def test_bearer_header(self):
        auth = AuthConfig(auth_type=AuthType.BEARER_TOKEN, credentials={"token": "abc"})

        assert auth.is_valid()
        assert auth.get_auth_headers() == {"Authorization": "Bearer abc"}
        assert auth.get_auth_params() == {}

    def test_api_key_param(self):
        auth = AuthConfig(auth_type=AuthType.API_KEY, credentials={"api_key": "k"})

        assert auth.get_auth_headers() == {}
        assert auth.get_auth_params() == {"apikey": "k"}

    def test_missing_credentials_invalid(self):
        assert not AuthConfig(auth_type=AuthType.BEARER_TOKEN).is_valid()


class TestHttpClient:
    @pytest.mark.asyncio
    async def test_failing_request_is_not_retried_by_default(self):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        client = HttpClient("test", HttpConfig(base_url="https://api.example.com"), transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(NetworkError) as excinfo:
                await client.get("/things")

        assert len(calls) == 1
        assert excinfo.value.status_code == 503

    @pytest.mark.asyncio
    async def test_retries_when_configured(self):
        responses = iter([httpx.Response(503), httpx.Response(200, json={"ok": True})])

        client = HttpClient(
            "test",
            HttpConfig(base_url="https://api.example.com"),
            retry_config=RetryConfig(max_retries=1, backoff_factor=1.0),
            transport=httpx.MockTransport(lambda request: next(responses)),
        )
        with patch("chartfeed.core.http_adapter.asyncio.sleep", new=AsyncMock()) as sleep:
            async with client:
                response = await client.get("/things")

        assert response.json() == {"ok": True}
        sleep.assert_awaited_once_with(1.0)

    @pytest.mark.asyncio
    async def test_rate_limit_translated(self):
        client = HttpClient(
            "test",
            HttpConfig(base_url="https://api.example.com"),
            transport=httpx.MockTransport(lambda request: httpx.Response(429, headers={"Retry-After": "30"})),
        )
        async with client:
            with pytest.raises(RateLimitError) as excinfo:
                await client.post("/things")

        assert excinfo.value.retry_after == 30

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = HttpClient("test", HttpConfig(base_url="https://api.example.com"), transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(NetworkError) as excinfo:
                await client.delete("/things/1")

        assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)

    @pytest.mark.asyncio
    async def test_client_closed_on_exit(self):
        client = HttpClient(
            "test",
            HttpConfig(base_url="https://api.example.com"),
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )
        async with client:
            assert client._client is not None

        assert client._client is None
