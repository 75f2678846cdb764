"""High-level entry point wiring fetcher, renderer and exporter together.

Usage::

    import asyncio
    from notionmdx import NotionConverter

    async def main():
        async with NotionConverter(token="secret_xxx", output_dir="out") as converter:
            result = await converter.convert("<page_id>")
            print(result.metadata["output_path"])

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionmdx.chain import build_chain
from notionmdx.config import NotionMDXConfig
from notionmdx.errors import NotionMDXConfigurationError
from notionmdx.exporter import FileExporter
from notionmdx.fetcher import NotionBlockFetcher
from notionmdx.models import BlockTree, ChainData
from notionmdx.notion_api import AsyncNotionTransport
from notionmdx.renderer import BaseRendererPlugin
from notionmdx.renderer.mdx import MDXRenderer


class NotionConverter:
    """Convert Notion pages to Markdown/MDX documents.

    Parameters
    ----------
    token:
        Notion integration token.  Only needed by :meth:`convert`.
    renderer:
        Renderer stage.  Defaults to an :class:`MDXRenderer` built from
        the config.
    exporter:
        Optional final stage.  Defaults to a :class:`FileExporter` when
        ``output_dir`` is configured, otherwise documents are only
        returned.
    transport:
        Transport handed to the fetcher, e.g. one built on
        ``httpx.MockTransport``.
    **config:
        Remaining keyword arguments are forwarded to
        :class:`NotionMDXConfig`.

    Raises
    ------
    NotionMDXConfigurationError
        If the config options are invalid.
    """

    def __init__(
        self,
        token: str = "",
        *,
        renderer: BaseRendererPlugin | None = None,
        exporter: Any | None = None,
        transport: AsyncNotionTransport | None = None,
        **config: Any,
    ) -> None:
        try:
            self._config = NotionMDXConfig(token=token, **config)
        except ValueError as exc:
            raise NotionMDXConfigurationError(
                message=f"Invalid configuration: {exc}",
                context={"options": sorted(config)},
                cause=exc,
            ) from exc
        self._fetcher = NotionBlockFetcher(self._config, transport=transport)
        self._renderer = renderer if renderer is not None else MDXRenderer(self._config)
        if exporter is None and self._config.output_dir is not None:
            exporter = FileExporter(self._config.output_dir, self._config.file_extension)
        self._exporter = exporter

        stages: list[Any] = [self._fetcher, self._renderer]
        if self._exporter is not None:
            stages.append(self._exporter)
        self._chain = build_chain(*stages)

    @property
    def config(self) -> NotionMDXConfig:
        return self._config

    @property
    def renderer(self) -> BaseRendererPlugin:
        return self._renderer

    async def convert(
        self, page_id: str, metadata: Mapping[str, Any] | None = None
    ) -> ChainData:
        """Fetch, render and (optionally) export one page."""
        data = ChainData(page_id=page_id, metadata=dict(metadata or {}))
        return await self._chain.process(data)

    async def render_blocks(
        self,
        blocks: list[dict],
        properties: dict[str, Any] | None = None,
        page_id: str = "",
        metadata: Mapping[str, Any] | None = None,
    ) -> ChainData:
        """Render already-loaded blocks, skipping the fetch stage."""
        data = ChainData(
            page_id=page_id,
            block_tree=BlockTree(blocks=list(blocks), properties=dict(properties or {})),
            metadata=dict(metadata or {}),
        )
        return await self._renderer.process(data)

    async def close(self) -> None:
        await self._fetcher.close()

    async def __aenter__(self) -> NotionConverter:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
