"""
HTTP client shared by the quote source and chart backend adapters.

Wraps ``httpx.AsyncClient`` with authentication headers, optional retries
and translation of transport failures into chartfeed exceptions.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
from loguru import logger

from chartfeed.core.exceptions import AuthenticationError, NetworkError, RateLimitError


class AuthType(str, Enum):
    """Supported authentication schemes."""

    NONE = "none"
    API_KEY = "api_key"
    BEARER_TOKEN = "bearer_token"


@dataclass
class AuthConfig:
    """Credentials attached to every request."""

    auth_type: AuthType = AuthType.NONE
    credentials: dict[str, str] = field(default_factory=dict)

    def is_valid(self) -> bool:
        if self.auth_type == AuthType.NONE:
            return True
        if self.auth_type == AuthType.API_KEY:
            return bool(self.credentials.get("api_key"))
        return bool(self.credentials.get("token"))

    def get_auth_headers(self) -> dict[str, str]:
        if self.auth_type == AuthType.BEARER_TOKEN:
            return {"Authorization": f"Bearer {self.credentials.get('token', '')}"}
        return {}

    def get_auth_params(self) -> dict[str, str]:
        """Query parameters carrying the credential (API key sources)."""
        if self.auth_type == AuthType.API_KEY:
            return {"apikey": self.credentials.get("api_key", "")}
        return {}


@dataclass
class HttpConfig:
    """Configuration for HTTP client behavior."""

    base_url: str
    timeout: float | None = None
    max_redirects: int = 5
    verify_ssl: bool = True
    user_agent: str = "chartfeed/0.1.0"
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("base_url cannot be empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")


@dataclass
class RetryConfig:
    """Retry behaviour. Requests are not retried unless ``max_retries`` is raised."""

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on_status: list[int] = field(default_factory=lambda: [429, 502, 503, 504])
    retry_on_exceptions: list[type] = field(
        default_factory=lambda: [httpx.TimeoutException, httpx.ConnectError]
    )

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.backoff_factor <= 0:
            raise ValueError("backoff_factor must be positive")


class HttpClient:
    """
    Async HTTP client bound to one remote service.

    Use as an async context manager; the underlying connection pool lives only
    for the duration of the ``async with`` block.
    """

    def __init__(
        self,
        provider_name: str,
        http_config: HttpConfig,
        auth_config: AuthConfig | None = None,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.provider_name = provider_name
        self.http_config = http_config
        self.auth_config = auth_config or AuthConfig()
        self.retry_config = retry_config or RetryConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {
                "User-Agent": self.http_config.user_agent,
                **self.http_config.headers,
                **self.auth_config.get_auth_headers(),
            }
            client_kwargs: dict[str, Any] = {
                "base_url": self.http_config.base_url,
                "follow_redirects": True,
                "max_redirects": self.http_config.max_redirects,
                "verify": self.http_config.verify_ssl,
                "headers": headers,
            }
            if self.http_config.timeout is not None:
                client_kwargs["timeout"] = httpx.Timeout(self.http_config.timeout)
            if self._transport is not None:
                client_kwargs["transport"] = self._transport
            self._client = httpx.AsyncClient(**client_kwargs)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request_with_retry(self, method: str, url: str, **kwargs) -> httpx.Response:
        client = await self._ensure_client()

        for attempt in range(self.retry_config.max_retries + 1):
            last_attempt = attempt == self.retry_config.max_retries
            try:
                response = await client.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                should_retry = any(
                    isinstance(e, exc_type) for exc_type in self.retry_config.retry_on_exceptions
                )
                if should_retry and not last_attempt:
                    delay = self.retry_config.backoff_factor**attempt
                    logger.warning(
                        f"{method} {url} failed with {type(e).__name__}: {e}, "
                        f"retrying in {delay} seconds (attempt {attempt + 1})"
                    )
                    await asyncio.sleep(delay)
                    continue
                raise NetworkError(
                    f"{method} {url} failed: {type(e).__name__}: {e}",
                    provider_name=self.provider_name,
                    details={"method": method, "url": url},
                ) from e

            if response.status_code in self.retry_config.retry_on_status and not last_attempt:
                delay = self.retry_config.backoff_factor**attempt
                logger.warning(
                    f"{method} {url} returned {response.status_code}, "
                    f"retrying in {delay} seconds (attempt {attempt + 1})"
                )
                await asyncio.sleep(delay)
                continue

            self._raise_for_status(response, method, url)
            return response

        raise AssertionError("unreachable")  # pragma: no cover

    def _raise_for_status(self, response: httpx.Response, method: str, url: str) -> None:
        status = response.status_code
        if status < 400:
            return
        details = {"method": method, "url": url, "status_code": status, "body": response.text[:500]}
        if status in (401, 403):
            raise AuthenticationError(
                f"{method} {url} was rejected with status {status}",
                provider_name=self.provider_name,
                auth_method=self.auth_config.auth_type.value,
                details=details,
            )
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                f"{method} {url} was rate limited",
                provider_name=self.provider_name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                details=details,
            )
        raise NetworkError(
            f"{method} {url} failed with status {status}",
            provider_name=self.provider_name,
            status_code=status,
            details=details,
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        params = {**self.auth_config.get_auth_params(), **kwargs.pop("params", {})}
        return await self._request_with_retry("GET", url, params=params, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self._request_with_retry("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self._request_with_retry("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs) -> httpx.Response:
        return await self._request_with_retry("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self._request_with_retry("DELETE", url, **kwargs)


__all__ = ["AuthType", "AuthConfig", "HttpConfig", "RetryConfig", "HttpClient"]
