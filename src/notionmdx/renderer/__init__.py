"""Template-driven rendering engine.

Public API:

- :class:`BaseRendererPlugin` -- the engine; subclass it or register
  transformers on an instance.
- :class:`MDXRenderer` -- ready-made Markdown/MDX renderer.
- :class:`RendererContext` -- what transformers and resolvers receive.
- :class:`TransformerRegistry`, :class:`VariableRegistry` -- the engine's
  registries.
"""

from notionmdx.renderer.base import ANNOTATION_ORDER, BaseRendererPlugin
from notionmdx.renderer.context import RendererContext
from notionmdx.renderer.mdx import MDXRenderer
from notionmdx.renderer.registry import TransformerRegistry
from notionmdx.renderer.variables import VariableRegistry, default_resolver

__all__ = [
    "ANNOTATION_ORDER",
    "BaseRendererPlugin",
    "MDXRenderer",
    "RendererContext",
    "TransformerRegistry",
    "VariableRegistry",
    "default_resolver",
]
