"""Read-only wrapper for the Notion ``/pages`` endpoints."""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncPageAPI:
    """Async wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, page_id: str) -> dict[str, Any]:
        """Retrieve a page object, including its ``properties``."""
        return await self._transport.request("GET", f"/pages/{page_id}")
