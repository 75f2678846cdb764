"""Read-only wrapper for the Notion ``/blocks`` endpoints."""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport


class AsyncBlockAPI:
    """Async wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def retrieve(self, block_id: str) -> dict[str, Any]:
        """Retrieve a single block by its ID."""
        return await self._transport.request("GET", f"/blocks/{block_id}")

    async def get_children(self, block_id: str) -> list[dict[str, Any]]:
        """Return every direct child of *block_id*, following pagination.

        Page IDs are accepted too: a page's top-level blocks are its
        children.
        """
        return [
            child
            async for child in self._transport.paginate(f"/blocks/{block_id}/children")
        ]
