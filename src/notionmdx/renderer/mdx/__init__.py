"""Markdown/MDX renderer plugin.

- :class:`MDXRenderer` -- renderer with every transformer below registered.
- :data:`block_transformers`, :data:`annotation_transformers` -- the
  transformer tables, reusable on other renderers.
- :func:`extract_property_value`, :func:`format_yaml_value`,
  :func:`format_as_markdown_table` -- helpers.
"""

from notionmdx.renderer.mdx.annotations import annotation_transformers
from notionmdx.renderer.mdx.blocks import block_transformers
from notionmdx.renderer.mdx.helpers import (
    extract_property_value,
    format_as_markdown_table,
    format_yaml_value,
)
from notionmdx.renderer.mdx.renderer import MDXRenderer
from notionmdx.renderer.mdx.resolvers import create_default_variable_resolvers

__all__ = [
    "MDXRenderer",
    "annotation_transformers",
    "block_transformers",
    "create_default_variable_resolvers",
    "extract_property_value",
    "format_as_markdown_table",
    "format_yaml_value",
]
