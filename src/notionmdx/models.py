"""Public data models for notionmdx.

Plain dataclasses exchanged between pipeline stages, plus the capability
records collaborators register with a renderer:

* :class:`ChainData` / :class:`BlockTree` -- the record every chain stage
  receives and returns.
* :class:`BlockTransformer` -- renders one block type.
* :class:`AnnotationTransformer` / :class:`AnnotationInput` -- wraps text
  for one annotation (bold, italic, link...).
* :data:`VariableResolver` -- turns a variable's collected fragments into
  its final template value.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from notionmdx.renderer.context import RendererContext


# ---------------------------------------------------------------------------
# Chain records
# ---------------------------------------------------------------------------

@dataclass
class BlockTree:
    """The block content and properties of one Notion page.

    Attributes
    ----------
    blocks:
        Top-level Notion block objects (dicts as returned by the API), in
        page order.  Nested blocks live under ``block["children"]``.
    properties:
        The page's ``properties`` object, keyed by property name.
    """

    blocks: list[dict] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass
class ChainData:
    """Record passed from one pipeline stage to the next.

    Attributes
    ----------
    page_id:
        The Notion page identifier.
    block_tree:
        Blocks and properties of the page.
    metadata:
        Arbitrary caller data.  Renderers merge it into their own metadata
        and expose it to transformers.
    content:
        The rendered document; ``None`` until a renderer stage has run.
    """

    page_id: str
    block_tree: BlockTree = field(default_factory=BlockTree)
    metadata: dict[str, Any] = field(default_factory=dict)
    content: str | None = None


# ---------------------------------------------------------------------------
# Transformer contracts
# ---------------------------------------------------------------------------

VariableResolver = Callable[[str, "RendererContext"], Awaitable[str]]
"""``async (variable_name, context) -> str``."""


@dataclass
class BlockTransformer:
    """Renders one Notion block type.

    Attributes
    ----------
    transform:
        ``async (context) -> str``.  ``context.block`` is the block being
        rendered.
    imports:
        Import lines added to the ``imports`` variable whenever this
        transformer produces output.
    target_variable:
        The variable collecting this transformer's output.
    """

    transform: Callable[[RendererContext], Awaitable[str]]
    imports: list[str] = field(default_factory=list)
    target_variable: str = "content"


@dataclass(frozen=True)
class AnnotationInput:
    """Arguments handed to an annotation transformer.

    Attributes
    ----------
    text:
        The text produced by the previous step of the cascade.
    annotations:
        All annotation flags of the span (active or not).
    link:
        ``{"url": ...}`` for the ``link`` step, otherwise ``None``.
    metadata:
        Caller metadata passed to ``process_rich_text``, if any.
    """

    text: str
    annotations: Mapping[str, Any] = field(default_factory=dict)
    link: Mapping[str, str] | None = None
    metadata: Mapping[str, Any] | None = None


@dataclass
class AnnotationTransformer:
    """Wraps a text span for one annotation name.

    Attributes
    ----------
    transform:
        ``async (AnnotationInput) -> str``.
    """

    transform: Callable[[AnnotationInput], Awaitable[str]]
