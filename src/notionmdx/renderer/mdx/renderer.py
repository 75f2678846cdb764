"""Markdown/MDX renderer.

Usage::

    from notionmdx.config import NotionMDXConfig
    from notionmdx.renderer.mdx import MDXRenderer

    renderer = MDXRenderer(NotionMDXConfig(frontmatter=True))
    result = await renderer.process(ChainData(page_id="p1", block_tree=tree))
"""

from __future__ import annotations

from typing import Any

from notionmdx.config import NotionMDXConfig
from notionmdx.renderer.base import BaseRendererPlugin
from notionmdx.renderer.variables import default_resolver

from .annotations import annotation_transformers
from .blocks import block_transformers
from .helpers import format_as_markdown_table
from .resolvers import create_default_variable_resolvers


class MDXRenderer(BaseRendererPlugin):
    """Renderer producing frontmatter, imports and Markdown content.

    Parameters
    ----------
    config:
        Options read by the transformers and resolvers (``frontmatter``,
        ``html_annotations``, ``metrics``).  Stored in metadata under
        ``"config"``.
    template:
        Overrides the default ``{{{frontmatter}}}{{{imports}}}{{{content}}}``.
        The built-in ``frontmatter`` and ``imports`` resolvers are only
        registered for placeholders the active template contains.
    """

    template = "{{{frontmatter}}}{{{imports}}}{{{content}}}"

    def __init__(
        self,
        config: NotionMDXConfig | None = None,
        *,
        template: str | None = None,
        metrics: Any | None = None,
    ) -> None:
        self.config = config if config is not None else NotionMDXConfig()
        super().__init__(
            template,
            metrics=metrics if metrics is not None else self.config.metrics,
        )

        self.add_metadata("config", self.config)
        self.add_metadata("html", self.config.html_annotations)

        self.create_block_transformers(block_transformers)
        self.create_annotation_transformers(annotation_transformers)
        self.add_util("format_as_markdown_table", format_as_markdown_table)

        self._register_default_resolvers()

    def set_template(self, template: str) -> MDXRenderer:
        super().set_template(template)
        self._register_default_resolvers()
        return self

    def _register_default_resolvers(self) -> None:
        # A resolver set through add_variable is kept.
        names = self.variables.names
        for name, resolver in create_default_variable_resolvers().items():
            if name in names and self.variables.resolver(name) is default_resolver:
                self.add_variable(name, resolver)
