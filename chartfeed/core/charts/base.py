"""Chart backend interface."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Payload = str | bytes | dict[str, Any] | list[Any]


@runtime_checkable
class ChartBackend(Protocol):
    """Remote chart service used by the publish pipeline."""

    name: str

    async def upload_data(self, chart_id: str, payload: Payload) -> None: ...

    async def update_notes(self, chart_id: str, notes: str) -> None: ...

    async def publish_chart(self, chart_id: str) -> str: ...
