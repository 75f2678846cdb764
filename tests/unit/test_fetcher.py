"""Tests for notionmdx.fetcher.NotionBlockFetcher against a fake Notion API."""

from __future__ import annotations

import asyncio

import httpx
import pytest
from helpers import RecordingMetricsHook, make_span

from notionmdx.chain import BaseChainNode, build_chain
from notionmdx.config import NotionMDXConfig
from notionmdx.errors import NotionMDXNotFoundError
from notionmdx.fetcher import NotionBlockFetcher
from notionmdx.models import ChainData
from notionmdx.notion_api import AsyncNotionTransport

PAGE_ID = "page-1"


def api_block(block_id: str, block_type: str = "paragraph", has_children: bool = False, **data) -> dict:
    payload = data or {"rich_text": [make_span(block_id)]}
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: payload,
    }


class FakeNotion:
    """Serves pages and block children from in-memory dicts."""

    def __init__(self, children: dict[str, list[dict]], properties: dict | None = None, page_size: int = 100):
        self.children = children
        self.properties = properties or {}
        self.page_size = page_size
        self.requests: list[httpx.Request] = []
        self.in_flight = 0
        self.peak = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        if path.startswith("/pages/"):
            page_id = path.split("/")[2]
            if page_id != PAGE_ID:
                return httpx.Response(404, json={"code": "object_not_found", "message": "missing"})
            return httpx.Response(200, json={"object": "page", "id": page_id, "properties": self.properties})

        block_id = path.split("/")[2]
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        await asyncio.sleep(0.005)
        self.in_flight -= 1

        items = self.children.get(block_id, [])
        start = int(request.url.params.get("start_cursor", "0"))
        chunk = items[start:start + self.page_size]
        more = start + self.page_size < len(items)
        return httpx.Response(
            200,
            json={
                "object": "list",
                "results": chunk,
                "has_more": more,
                "next_cursor": str(start + self.page_size) if more else None,
            },
        )


def make_fetcher(fake: FakeNotion, **config_kwargs) -> NotionBlockFetcher:
    config = NotionMDXConfig(token="test_token_1234", retry_jitter=False, **config_kwargs)
    transport = AsyncNotionTransport(config, http_transport=httpx.MockTransport(fake))
    return NotionBlockFetcher(config, transport=transport)


class Capture(BaseChainNode):
    def __init__(self) -> None:
        super().__init__()
        self.data: ChainData | None = None

    async def process(self, data):
        self.data = data
        return await self.forward(data)


class TestFetcher:
    async def test_fills_properties_and_blocks(self):
        properties = {"Name": {"type": "title", "title": [make_span("Doc")]}}
        fake = FakeNotion({PAGE_ID: [api_block("a"), api_block("b")]}, properties)
        fetcher = make_fetcher(fake)
        result = await fetcher.process(ChainData(page_id=PAGE_ID, metadata={"k": "v"}))

        assert [b["id"] for b in result.block_tree.blocks] == ["a", "b"]
        assert result.block_tree.properties == properties
        assert result.metadata == {"k": "v"}
        assert result.content is None

    async def test_nests_children_recursively(self):
        fake = FakeNotion(
            {
                PAGE_ID: [api_block("parent", "toggle", has_children=True)],
                "parent": [api_block("child", "bulleted_list_item", has_children=True)],
                "child": [api_block("grandchild")],
            }
        )
        result = await make_fetcher(fake).process(ChainData(page_id=PAGE_ID))
        parent = result.block_tree.blocks[0]
        assert parent["children"][0]["id"] == "child"
        assert parent["children"][0]["children"][0]["id"] == "grandchild"
        assert "children" not in parent["children"][0]["children"][0]

    async def test_paginates(self):
        blocks = [api_block(f"b{i}") for i in range(5)]
        fake = FakeNotion({PAGE_ID: blocks}, page_size=2)
        result = await make_fetcher(fake).process(ChainData(page_id=PAGE_ID))
        assert [b["id"] for b in result.block_tree.blocks] == [f"b{i}" for i in range(5)]

    async def test_child_pages_not_descended_by_default(self):
        fake = FakeNotion(
            {
                PAGE_ID: [api_block("sub", "child_page", has_children=True, title="Sub")],
                "sub": [api_block("hidden")],
            }
        )
        result = await make_fetcher(fake).process(ChainData(page_id=PAGE_ID))
        assert "children" not in result.block_tree.blocks[0]
        assert not any("/blocks/sub/" in str(r.url) for r in fake.requests)

    async def test_child_pages_descended_when_enabled(self):
        fake = FakeNotion(
            {
                PAGE_ID: [api_block("sub", "child_page", has_children=True, title="Sub")],
                "sub": [api_block("inner")],
            }
        )
        result = await make_fetcher(fake, fetch_child_pages=True).process(ChainData(page_id=PAGE_ID))
        assert result.block_tree.blocks[0]["children"][0]["id"] == "inner"

    async def test_concurrency_bounded(self):
        children = {PAGE_ID: [api_block(f"p{i}", "toggle", has_children=True) for i in range(8)]}
        for i in range(8):
            children[f"p{i}"] = [api_block(f"c{i}")]
        fake = FakeNotion(children)
        await make_fetcher(fake, fetch_max_concurrent=2).process(ChainData(page_id=PAGE_ID))
        assert fake.peak <= 2

    async def test_deep_tree_with_small_limit(self):
        children = {PAGE_ID: [api_block("l0", "toggle", has_children=True)]}
        for depth in range(5):
            children[f"l{depth}"] = [api_block(f"l{depth + 1}", "toggle", has_children=depth < 4)]
        fake = FakeNotion(children)
        result = await asyncio.wait_for(
            make_fetcher(fake, fetch_max_concurrent=1).process(ChainData(page_id=PAGE_ID)),
            timeout=5,
        )
        assert result.block_tree.blocks[0]["children"][0]["id"] == "l1"

    async def test_forwards_to_next(self):
        fake = FakeNotion({PAGE_ID: [api_block("a")]})
        fetcher = make_fetcher(fake)
        capture = Capture()
        build_chain(fetcher, capture)
        result = await fetcher.process(ChainData(page_id=PAGE_ID))
        assert capture.data is result

    async def test_not_found_propagates(self):
        fetcher = make_fetcher(FakeNotion({}))
        with pytest.raises(NotionMDXNotFoundError):
            await fetcher.process(ChainData(page_id="unknown"))

    async def test_failed_listing_cancels_sibling_fetches(self):
        cancelled = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.path.removeprefix("/v1")
            if path.startswith("/pages/"):
                return httpx.Response(200, json={"object": "page", "id": PAGE_ID, "properties": {}})
            block_id = path.split("/")[2]
            if block_id == PAGE_ID:
                results = [
                    api_block("slow", "toggle", has_children=True),
                    api_block("gone", "toggle", has_children=True),
                ]
                return httpx.Response(
                    200,
                    json={"object": "list", "results": results, "has_more": False, "next_cursor": None},
                )
            if block_id == "gone":
                await asyncio.sleep(0.01)
                return httpx.Response(404, json={"code": "object_not_found", "message": "missing"})
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return httpx.Response(200, json={"object": "list", "results": [], "has_more": False})

        fetcher = make_fetcher(handler)
        with pytest.raises(NotionMDXNotFoundError):
            await asyncio.wait_for(fetcher.process(ChainData(page_id=PAGE_ID)), timeout=5)
        assert cancelled.is_set()

    async def test_blocks_fetched_metric(self):
        hook = RecordingMetricsHook()
        fake = FakeNotion({PAGE_ID: [api_block("a"), api_block("b")]})
        await make_fetcher(fake, metrics=hook).process(ChainData(page_id=PAGE_ID))
        fetched = [e for e in hook.increments if e["name"] == "notionmdx.blocks_fetched_total"]
        assert sum(e["value"] for e in fetched) == 2

    async def test_fetch_block_tree(self):
        fake = FakeNotion({"blk": [api_block("x")]})
        blocks = await make_fetcher(fake).fetch_block_tree("blk")
        assert [b["id"] for b in blocks] == ["x"]


class TestOwnership:
    async def test_shared_transport_left_open(self):
        fake = FakeNotion({PAGE_ID: []})
        fetcher = make_fetcher(fake)
        await fetcher.close()
        result = await fetcher.process(ChainData(page_id=PAGE_ID))
        assert result.block_tree.blocks == []

    async def test_owned_transport_closed(self):
        fetcher = NotionBlockFetcher(NotionMDXConfig(token="t"))
        await fetcher.close()
        assert fetcher._transport._client.is_closed
