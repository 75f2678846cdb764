"""Sequential processing pipeline.

A pipeline is a linked list of stages.  Each stage does its own work on a
:class:`~notionmdx.models.ChainData` record and then hands the updated
record to ``next``; the result of the last stage travels back up as the
return value of the first stage's :meth:`process`.

Usage::

    from notionmdx.chain import build_chain

    head = build_chain(fetcher, renderer, exporter)
    result = await head.process(ChainData(page_id="abc"))
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import Protocol, TypeVar, runtime_checkable

from notionmdx.errors import NotionMDXConfigurationError
from notionmdx.models import ChainData

T = TypeVar("T")


@runtime_checkable
class ProcessorChainNode(Protocol):
    """Protocol satisfied by every pipeline stage."""

    next: ProcessorChainNode | None

    async def process(self, data: ChainData) -> ChainData:
        """Process *data* and forward the result to ``next``, if any."""
        ...


class BaseChainNode:
    """Convenience base class holding the ``next`` pointer."""

    def __init__(self) -> None:
        self.next: ProcessorChainNode | None = None

    async def forward(self, data: ChainData) -> ChainData:
        """Hand *data* to the next stage, or return it when this is the last."""
        if self.next is None:
            return data
        return await self.next.process(data)

    async def process(self, data: ChainData) -> ChainData:
        return await self.forward(data)


def build_chain(*stages: ProcessorChainNode) -> ProcessorChainNode:
    """Link *stages* in order and return the head of the pipeline.

    The last stage's ``next`` is cleared so that a stage reused from an
    earlier pipeline does not keep forwarding to a stale successor.

    Raises
    ------
    NotionMDXConfigurationError
        If no stage is given.
    """
    if not stages:
        raise NotionMDXConfigurationError(
            message="A processing chain needs at least one stage",
            context={"missing": "stages"},
        )
    for current, following in zip(stages, stages[1:]):
        current.next = following
    stages[-1].next = None
    return stages[0]


async def gather_ordered(coros: Iterable[Awaitable[T]]) -> list[T]:
    """Start every coroutine, await them all, return results in input order.

    If one fails, siblings still pending are cancelled and drained before
    the error propagates.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        raise
