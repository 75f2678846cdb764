"""Per-render context handed to transformers and resolvers.

A :class:`RendererContext` is built fresh at the start of every
:meth:`~notionmdx.renderer.BaseRendererPlugin.process` call and is never
mutated afterwards; per-block contexts are derived copies made with
:meth:`RendererContext.with_block`.  Transformers recurse through the
helpers on the context rather than through the renderer directly, so the
right context always travels with the work.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .registry import TransformerRegistry

if TYPE_CHECKING:
    from .base import BaseRendererPlugin


@dataclass(frozen=True)
class RendererContext:
    """Read-only view of one render.

    Attributes
    ----------
    page_id:
        Identifier of the page being rendered.
    page_properties:
        The page's Notion properties.
    metadata:
        Renderer metadata merged with the caller's metadata.
    block_tree:
        Top-level blocks of the page.
    transformers:
        The renderer's transformer registry.
    variable_data:
        Live read-only view of the variable collectors.
    utils:
        Helper callables registered with ``add_util``.
    renderer:
        The renderer that owns this context.
    block:
        The block currently being transformed (empty outside a block).
    rendered_children:
        Results of the blocks rendered through :meth:`process_children`
        with this context, in input order.  The renderer commits them to
        the variable collectors once the enclosing block is done.
    """

    page_id: str
    page_properties: Mapping[str, Any]
    metadata: Mapping[str, Any]
    block_tree: Sequence[dict]
    transformers: TransformerRegistry
    variable_data: Mapping[str, list[str]]
    utils: Mapping[str, Callable[..., Any]]
    renderer: BaseRendererPlugin = field(repr=False, compare=False)
    block: Mapping[str, Any] = field(default_factory=dict)
    rendered_children: list = field(default_factory=list, repr=False, compare=False)

    def with_block(
        self,
        block: Mapping[str, Any],
        metadata: Mapping[str, Any] | None = None,
    ) -> RendererContext:
        """Context for transforming *block*; *metadata* wins on key collisions."""
        merged = {**self.metadata, **(metadata or {})}
        return dataclasses.replace(
            self,
            block=block,
            metadata=MappingProxyType(merged),
            rendered_children=[],
        )

    async def process_rich_text(
        self,
        rich_text: Sequence[Mapping[str, Any]],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render a Notion ``rich_text`` array through the annotation transformers."""
        return await self.renderer.process_rich_text(self, rich_text, metadata)

    async def process_children(
        self,
        blocks: Sequence[Mapping[str, Any]],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render nested blocks; non-empty outputs are joined with newlines."""
        return await self.renderer.process_children(self, blocks, metadata)
