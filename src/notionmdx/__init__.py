"""notionmdx — Template-driven Notion to Markdown/MDX rendering.

Public re-exports
-----------------

* **Facade:** :class:`NotionConverter`
* **Pipeline:** :func:`build_chain`, :class:`BaseChainNode`,
  :class:`NotionBlockFetcher`, :class:`FileExporter`
* **Rendering:** :class:`BaseRendererPlugin`, :class:`MDXRenderer`,
  :class:`RendererContext`
* **Configuration:** :class:`NotionMDXConfig`, :class:`FrontmatterConfig`
* **Errors:** Every :class:`NotionMDXError` subclass and :class:`ErrorCode`
* **Models:** :class:`ChainData`, :class:`BlockTree` and the transformer
  records

Usage::

    from notionmdx import NotionConverter

    async with NotionConverter(token="secret_xxx", frontmatter=True) as converter:
        result = await converter.convert("<page_id>")
        print(result.content)
"""

from __future__ import annotations

# ── Pipeline ────────────────────────────────────────────────────────────
from notionmdx.chain import BaseChainNode, ProcessorChainNode, build_chain

# ── Configuration ───────────────────────────────────────────────────────
from notionmdx.config import FrontmatterConfig, NotionMDXConfig

# ── Facade ──────────────────────────────────────────────────────────────
from notionmdx.converter import NotionConverter

# ── Errors ──────────────────────────────────────────────────────────────
from notionmdx.errors import (
    ErrorCode,
    NotionMDXAPIError,
    NotionMDXAuthError,
    NotionMDXConfigurationError,
    NotionMDXError,
    NotionMDXExportError,
    NotionMDXNetworkError,
    NotionMDXNotFoundError,
    NotionMDXPermissionError,
    NotionMDXRateLimitError,
    NotionMDXRenderError,
    NotionMDXTransformationError,
)
from notionmdx.exporter import FileExporter
from notionmdx.fetcher import NotionBlockFetcher

# ── Models ──────────────────────────────────────────────────────────────
from notionmdx.models import (
    AnnotationInput,
    AnnotationTransformer,
    BlockTransformer,
    BlockTree,
    ChainData,
    VariableResolver,
)

# ── Rendering ───────────────────────────────────────────────────────────
from notionmdx.renderer import (
    ANNOTATION_ORDER,
    BaseRendererPlugin,
    MDXRenderer,
    RendererContext,
)

__version__ = "0.1.0"

__all__ = [
    "ANNOTATION_ORDER",
    "AnnotationInput",
    "AnnotationTransformer",
    "BaseChainNode",
    "BaseRendererPlugin",
    "BlockTransformer",
    "BlockTree",
    "ChainData",
    "ErrorCode",
    "FileExporter",
    "FrontmatterConfig",
    "MDXRenderer",
    "NotionBlockFetcher",
    "NotionConverter",
    "NotionMDXAPIError",
    "NotionMDXAuthError",
    "NotionMDXConfig",
    "NotionMDXConfigurationError",
    "NotionMDXError",
    "NotionMDXExportError",
    "NotionMDXNetworkError",
    "NotionMDXNotFoundError",
    "NotionMDXPermissionError",
    "NotionMDXRateLimitError",
    "NotionMDXRenderError",
    "NotionMDXTransformationError",
    "ProcessorChainNode",
    "RendererContext",
    "VariableResolver",
    "__version__",
]
