"""Chain stage loading a page's block tree from the Notion API.

The fetcher fills :attr:`ChainData.block_tree` with the page properties
and the full block hierarchy, then hands the record to the next stage.
Nested blocks are stored under ``block["children"]``, which is where the
block transformers look for them.
"""

from __future__ import annotations

import asyncio
import dataclasses
import time
from typing import Any

from notionmdx.chain import BaseChainNode, gather_ordered
from notionmdx.config import NotionMDXConfig
from notionmdx.models import BlockTree, ChainData
from notionmdx.notion_api import AsyncBlockAPI, AsyncNotionTransport, AsyncPageAPI
from notionmdx.observability import NoopMetricsHook, get_logger

log = get_logger("notionmdx.fetcher")

# Blocks whose children are separate documents.
_PAGE_BLOCKS = frozenset({"child_page", "child_database"})


class NotionBlockFetcher(BaseChainNode):
    """Fetch a page and its blocks, then forward.

    Parameters
    ----------
    config:
        Connection, retry and fetch options.
    transport:
        Transport to reuse.  When omitted the fetcher creates one from
        *config* and closes it in :meth:`close`.
    """

    def __init__(
        self,
        config: NotionMDXConfig,
        transport: AsyncNotionTransport | None = None,
    ) -> None:
        super().__init__()
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else AsyncNotionTransport(config)
        self._pages = AsyncPageAPI(self._transport)
        self._blocks = AsyncBlockAPI(self._transport)
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    async def process(self, data: ChainData) -> ChainData:
        t0 = time.monotonic()
        page = await self._pages.retrieve(data.page_id)
        semaphore = asyncio.Semaphore(self._config.fetch_max_concurrent)
        blocks = await self._fetch_children(data.page_id, semaphore)

        elapsed_ms = (time.monotonic() - t0) * 1000
        log.info(
            "Page fetched",
            extra={
                "extra_fields": {
                    "page_id": data.page_id,
                    "top_level_blocks": len(blocks),
                    "duration_ms": round(elapsed_ms, 3),
                }
            },
        )
        tree = BlockTree(blocks=blocks, properties=page.get("properties", {}))
        return await self.forward(dataclasses.replace(data, block_tree=tree))

    async def fetch_block_tree(self, block_id: str) -> list[dict[str, Any]]:
        """Return the children of *block_id* with their descendants attached."""
        semaphore = asyncio.Semaphore(self._config.fetch_max_concurrent)
        return await self._fetch_children(block_id, semaphore)

    async def _fetch_children(
        self, block_id: str, semaphore: asyncio.Semaphore
    ) -> list[dict[str, Any]]:
        # The semaphore only guards the listing; holding it while recursing
        # would deadlock once the tree is deeper than the limit.
        async with semaphore:
            children = await self._blocks.get_children(block_id)
        self._metrics.increment("notionmdx.blocks_fetched_total", len(children))

        nested = [child for child in children if self._should_descend(child)]
        results = await gather_ordered(
            self._fetch_children(child["id"], semaphore) for child in nested
        )
        for child, grandchildren in zip(nested, results):
            child["children"] = grandchildren
        return children

    def _should_descend(self, block: dict[str, Any]) -> bool:
        if not block.get("has_children"):
            return False
        if block.get("type") in _PAGE_BLOCKS:
            return self._config.fetch_child_pages
        return True

    async def close(self) -> None:
        """Close the transport if this fetcher created it."""
        if self._owns_transport:
            await self._transport.close()
