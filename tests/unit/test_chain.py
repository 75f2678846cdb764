"""Tests for notionmdx.chain."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest

from notionmdx.chain import BaseChainNode, ProcessorChainNode, build_chain, gather_ordered
from notionmdx.errors import NotionMDXConfigurationError
from notionmdx.models import ChainData


class Tag(BaseChainNode):
    def __init__(self, name: str) -> None:
        super().__init__()
        self.name = name

    async def process(self, data):
        trail = data.metadata.get("trail", []) + [self.name]
        updated = dataclasses.replace(data, metadata={**data.metadata, "trail": trail})
        return await self.forward(updated)


class TestBuildChain:
    async def test_stages_run_in_order(self):
        head = build_chain(Tag("a"), Tag("b"), Tag("c"))
        result = await head.process(ChainData(page_id="p"))
        assert result.metadata["trail"] == ["a", "b", "c"]

    async def test_single_stage(self):
        stage = Tag("only")
        assert build_chain(stage) is stage
        assert stage.next is None

    def test_empty_chain_rejected(self):
        with pytest.raises(NotionMDXConfigurationError):
            build_chain()

    async def test_reused_stage_loses_stale_successor(self):
        a, b, c = Tag("a"), Tag("b"), Tag("c")
        build_chain(a, b, c)
        head = build_chain(a, b)
        result = await head.process(ChainData(page_id="p"))
        assert result.metadata["trail"] == ["a", "b"]
        assert b.next is None


class TestBaseChainNode:
    async def test_default_process_forwards_unchanged(self):
        data = ChainData(page_id="p")
        assert await BaseChainNode().process(data) is data

    def test_satisfies_protocol(self):
        assert isinstance(BaseChainNode(), ProcessorChainNode)


class TestGatherOrdered:
    async def test_results_in_input_order(self):
        async def after(delay, value):
            await asyncio.sleep(delay)
            return value

        results = await gather_ordered([after(0.03, "a"), after(0, "b"), after(0.01, "c")])
        assert results == ["a", "b", "c"]

    async def test_empty(self):
        assert await gather_ordered([]) == []

    async def test_failure_cancels_pending(self):
        cancelled = asyncio.Event()

        async def slow():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        async def fail():
            await asyncio.sleep(0)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await gather_ordered([slow(), fail()])
        assert cancelled.is_set()
