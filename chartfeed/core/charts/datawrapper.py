"""
Datawrapper chart backend.

Thin async wrapper over the ``/v3/charts`` REST endpoints. Every call is a
single request; failures surface as :class:`ProviderError` subclasses.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
from loguru import logger

from chartfeed.core.charts.base import Payload
from chartfeed.core.config import ChartBackendConfig
from chartfeed.core.exceptions import ConfigurationError, ProviderError
from chartfeed.core.http_adapter import AuthConfig, AuthType, HttpClient, HttpConfig


class DatawrapperClient:
    """Chart backend talking to the Datawrapper API with a bearer token."""

    name = "datawrapper"

    def __init__(
        self,
        config: ChartBackendConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not config.token:
            raise ConfigurationError("Datawrapper token is required", missing=["backend.token"])
        self.config = config
        self.http_client = HttpClient(
            self.name,
            HttpConfig(base_url=config.base_url, timeout=config.timeout, user_agent="chartfeed-datawrapper/0.1.0"),
            AuthConfig(auth_type=AuthType.BEARER_TOKEN, credentials={"token": config.token}),
            transport=transport,
        )

    async def __aenter__(self) -> "DatawrapperClient":
        await self.http_client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.http_client.close()

    async def upload_data(self, chart_id: str, payload: Payload) -> None:
        """Replace the chart's data with ``payload``.

        Text is sent verbatim as CSV, mappings and lists as JSON.
        """
        content, content_type = encode_payload(payload)
        await self.http_client.put(
            f"/charts/{chart_id}/data",
            content=content,
            headers={"Content-Type": content_type},
        )

    async def get_data(self, chart_id: str) -> str:
        response = await self.http_client.get(f"/charts/{chart_id}/data")
        return response.text

    async def update_chart(self, chart_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        response = await self.http_client.patch(f"/charts/{chart_id}", json=changes)
        return _json_or_empty(response)

    async def update_notes(self, chart_id: str, notes: str) -> None:
        await self.update_chart(chart_id, {"metadata": {"annotate": {"notes": notes}}})

    async def publish_chart(self, chart_id: str) -> str:
        """Republish the chart and return its public URL."""
        response = await self.http_client.post(f"/charts/{chart_id}/publish")
        body = _json_or_empty(response)
        public_url = body.get("publicUrl")
        if public_url is None and isinstance(body.get("data"), dict):
            public_url = body["data"].get("publicUrl")
        if not public_url:
            raise ProviderError(
                f"Publish response for chart {chart_id} has no publicUrl",
                provider_name=self.name,
                error_code="INVALID_RESPONSE",
                details={"chart_id": chart_id},
            )
        return normalize_public_url(public_url)

    async def delete_chart(self, chart_id: str) -> None:
        await self.http_client.delete(f"/charts/{chart_id}")
        logger.info(f"Chart with ID {chart_id} deleted successfully.")


def encode_payload(payload: Payload) -> tuple[bytes, str]:
    """Encode a payload for the data endpoint, returning body and content type."""
    if isinstance(payload, bytes):
        return payload, "text/csv; charset=utf-8"
    if isinstance(payload, str):
        return payload.encode("utf-8"), "text/csv; charset=utf-8"
    return json.dumps(payload, ensure_ascii=False).encode("utf-8"), "application/json"


def normalize_public_url(url: str) -> str:
    """Give protocol-relative URLs (``//datawrapper.dwcdn.net/...``) an https scheme."""
    if url.startswith("//"):
        return f"https:{url}"
    return url


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


__all__ = ["DatawrapperClient", "encode_payload", "normalize_public_url"]
