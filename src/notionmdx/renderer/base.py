"""Template-driven block renderer.

:class:`BaseRendererPlugin` is the engine every concrete renderer builds
on.  It owns a :class:`~notionmdx.renderer.registry.TransformerRegistry`
and a :class:`~notionmdx.renderer.variables.VariableRegistry` and drives
one render per :meth:`~BaseRendererPlugin.process` call:

1. build a fresh :class:`~notionmdx.renderer.context.RendererContext`;
2. reset every variable collector except ``imports``;
3. render all top-level blocks;
4. resolve the variables and fill the template;
5. forward the updated record to the next chain stage.

Sibling blocks and sibling rich-text spans are started together and
awaited as a group.  Their outputs, and the imports of the blocks that
produced them, reach the variable collectors in input order, whatever
order they finish in.

Usage::

    renderer = BaseRendererPlugin()
    renderer.create_block_transformer(
        "paragraph",
        BlockTransformer(transform=lambda ctx: ctx.process_rich_text(
            ctx.block["paragraph"]["rich_text"])),
    )
    result = await renderer.process(ChainData(page_id="p1", block_tree=tree))
    print(result.content)
"""

from __future__ import annotations

import asyncio
import dataclasses
import time
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from notionmdx.chain import BaseChainNode, gather_ordered
from notionmdx.errors import (
    NotionMDXConfigurationError,
    NotionMDXError,
    NotionMDXRenderError,
    NotionMDXTransformationError,
)
from notionmdx.models import AnnotationInput, ChainData, VariableResolver
from notionmdx.observability import NoopMetricsHook, get_logger

from .context import RendererContext
from .registry import TransformerRegistry
from .variables import VariableRegistry

log = get_logger("notionmdx.renderer")

# Canonical cascade order (innermost first).  Code spans sit innermost so the
# other markers stay outside the backticks.  Flags outside this tuple run
# afterwards, in the order the span declares them.  ``link`` is always last.
ANNOTATION_ORDER: tuple[str, ...] = (
    "code",
    "bold",
    "italic",
    "strikethrough",
    "underline",
)

LINK = "link"
EQUATION = "equation"
DEFAULT_TARGET = "content"


def _is_active(value: Any) -> bool:
    return bool(value) and value != "default"


def _describe(exc: BaseException) -> str:
    if isinstance(exc, NotionMDXError):
        return exc.message
    return str(exc) or type(exc).__name__


@dataclasses.dataclass
class _RenderedBlock:
    """Output of one transformed block, not yet written to the collectors."""

    target: str
    output: str
    imports: tuple[str, ...] = ()
    children: list[_RenderedBlock] = dataclasses.field(default_factory=list)


class BaseRendererPlugin(BaseChainNode):
    """Pluggable renderer turning a Notion block tree into text.

    Parameters
    ----------
    template:
        Document template with ``{{{name}}}`` placeholders.  Defaults to the
        class attribute :attr:`template`.  Must contain ``{{{content}}}``
        and ``{{{imports}}}``.
    metrics:
        Optional :class:`~notionmdx.observability.MetricsHook`.

    Raises
    ------
    NotionMDXConfigurationError
        If the template is missing or lacks a required placeholder.

    Notes
    -----
    ``process`` holds a per-instance lock while rendering, so overlapping
    calls on one renderer run one after the other.  Use one renderer per
    document for real parallelism.
    """

    template: str = "{{{imports}}}\n{{{content}}}"
    annotation_order: tuple[str, ...] = ANNOTATION_ORDER

    def __init__(self, template: str | None = None, *, metrics: Any | None = None) -> None:
        super().__init__()
        self._transformers = TransformerRegistry()
        self._variables = VariableRegistry(
            template if template is not None else self.template
        )
        self._metadata: dict[str, Any] = {}
        self._utils: dict[str, Callable[..., Any]] = {}
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def transformers(self) -> TransformerRegistry:
        return self._transformers

    @property
    def variables(self) -> VariableRegistry:
        return self._variables

    @property
    def metadata(self) -> Mapping[str, Any]:
        return MappingProxyType(self._metadata)

    def add_metadata(self, key: str, value: Any) -> BaseRendererPlugin:
        """Store *value* under *key*; visible to every transformer and resolver."""
        self._metadata[key] = value
        return self

    def add_util(self, name: str, func: Callable[..., Any]) -> BaseRendererPlugin:
        """Expose *func* to transformers as ``context.utils[name]``."""
        self._utils[name] = func
        return self

    def add_variable(
        self, name: str, resolver: VariableResolver | None = None
    ) -> BaseRendererPlugin:
        """Register variable *name*, optionally with a custom resolver."""
        self._variables.add_variable(name, resolver)
        return self

    def add_imports(self, *imports: str) -> BaseRendererPlugin:
        """Add import lines, ignoring exact duplicates."""
        self._variables.add_imports(*imports)
        return self

    def set_template(self, template: str) -> BaseRendererPlugin:
        """Replace the template.

        Raises
        ------
        NotionMDXConfigurationError
            If *template* lacks ``{{{content}}}`` or ``{{{imports}}}``.
        """
        self._variables.set_template(template)
        return self

    def create_block_transformer(self, block_type: str, transformer: Any) -> BaseRendererPlugin:
        """Register *transformer* for *block_type*, replacing any earlier one.

        The transformer's ``imports`` are only added to the ``imports``
        variable when a block of this type is actually rendered.
        """
        self._transformers.set_block(block_type, transformer)
        return self

    def create_block_transformers(self, transformers: Mapping[str, Any]) -> BaseRendererPlugin:
        for block_type, transformer in transformers.items():
            if transformer is not None:
                self.create_block_transformer(block_type, transformer)
        return self

    def create_annotation_transformer(self, name: str, transformer: Any) -> BaseRendererPlugin:
        """Register *transformer* for annotation *name*, replacing any earlier one."""
        self._transformers.set_annotation(name, transformer)
        return self

    def create_annotation_transformers(self, transformers: Mapping[str, Any]) -> BaseRendererPlugin:
        for name, transformer in transformers.items():
            if transformer is not None:
                self.create_annotation_transformer(name, transformer)
        return self

    # ------------------------------------------------------------------
    # Pipeline entry point
    # ------------------------------------------------------------------

    async def process(self, data: ChainData) -> ChainData:
        """Render *data* and forward the result to the next stage.

        Returns
        -------
        ChainData
            A copy of *data* with ``content`` set to the rendered document,
            or whatever the next stage returns.

        Raises
        ------
        NotionMDXRenderError
            If any block, annotation or resolver fails.  Its ``cause`` is
            the original error.
        """
        stage = type(self).__name__
        t0 = time.monotonic()

        async with self._lock:
            try:
                context = self.refresh_context(data)
                self._variables.reset()
                rendered = await gather_ordered(
                    self._render_block(context, block)
                    for block in data.block_tree.blocks
                )
                for result in rendered:
                    if result is not None:
                        self._commit(result)
                content = await self.render_template(context)
            except Exception as exc:
                self._metrics.increment(
                    "notionmdx.render_failures_total", tags={"stage": stage}
                )
                log.warning(
                    "Rendering failed",
                    extra={
                        "extra_fields": {
                            "stage": stage,
                            "page_id": data.page_id,
                            "error": _describe(exc),
                        }
                    },
                )
                raise NotionMDXRenderError(
                    message=f"{stage} failed: {_describe(exc)}",
                    context={"stage": stage, "page_id": data.page_id},
                    cause=exc,
                ) from exc

        elapsed_ms = (time.monotonic() - t0) * 1000
        self._metrics.timing(
            "notionmdx.render_duration_ms", elapsed_ms, tags={"stage": stage}
        )
        log.debug(
            "Rendering complete",
            extra={
                "extra_fields": {
                    "stage": stage,
                    "page_id": data.page_id,
                    "blocks": len(data.block_tree.blocks),
                    "duration_ms": round(elapsed_ms, 3),
                }
            },
        )
        return await self.forward(dataclasses.replace(data, content=content))

    def refresh_context(self, data: ChainData) -> RendererContext:
        """Merge *data*'s metadata into the renderer and build a fresh context.

        Incoming metadata keys overwrite same-named keys from earlier calls
        or :meth:`add_metadata`; other keys are kept.
        """
        self._metadata.update(data.metadata)
        return RendererContext(
            page_id=data.page_id,
            page_properties=MappingProxyType(dict(data.block_tree.properties)),
            metadata=MappingProxyType(dict(self._metadata)),
            block_tree=tuple(data.block_tree.blocks),
            transformers=self._transformers,
            variable_data=self._variables.data,
            utils=MappingProxyType(dict(self._utils)),
            renderer=self,
        )

    async def render_template(self, context: RendererContext | None = None) -> str:
        """Resolve every variable and substitute it into the template."""
        if context is None:
            context = self.refresh_context(ChainData(page_id=""))
        return await self._variables.render(context)

    # ------------------------------------------------------------------
    # Block processing
    # ------------------------------------------------------------------

    async def process_block(
        self,
        context: RendererContext,
        block: Mapping[str, Any],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render one block and write its output to the collectors at once.

        A block type without a transformer renders to ``""`` and leaves
        every collector untouched.  Otherwise the transformer's imports are
        merged into ``imports`` and the output is appended to the
        transformer's target variable.

        Raises
        ------
        NotionMDXTransformationError
            If the transformer raises.
        """
        result = await self._render_block(context, block, metadata)
        if result is None:
            return ""
        self._commit(result)
        return result.output

    async def process_children(
        self,
        context: RendererContext,
        blocks: Sequence[Mapping[str, Any]],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render sibling blocks; non-empty outputs joined by ``"\\n"`` in input order.

        The results are kept on *context* and written to the collectors
        when the enclosing block is committed.  A nested block's output is
        part of its parent's output, so it is appended to its own target
        only when that target is not ``content``.
        """
        results = await gather_ordered(
            self._render_block(context, block, metadata) for block in blocks
        )
        rendered = [result for result in results if result is not None]
        context.rendered_children.extend(rendered)
        return "\n".join(result.output for result in rendered if result.output)

    async def _render_block(
        self,
        context: RendererContext,
        block: Mapping[str, Any],
        metadata: Mapping[str, Any] | None = None,
    ) -> _RenderedBlock | None:
        block_type = block.get("type", "")
        transformer = self._transformers.block(block_type)
        if transformer is None:
            self._metrics.increment(
                "notionmdx.blocks_skipped_total", tags={"block_type": block_type}
            )
            log.debug(
                "No transformer registered; block skipped",
                extra={"extra_fields": {"block_type": block_type}},
            )
            return None

        block_context = context.with_block(block, metadata)
        try:
            output = await transformer.transform(block_context)
        except Exception as exc:
            raise NotionMDXTransformationError(
                message=f"Failed to process block '{block_type}': {_describe(exc)}",
                context={"block_type": block_type, "block_id": block.get("id", "")},
                cause=exc,
            ) from exc

        target = getattr(transformer, "target_variable", None) or DEFAULT_TARGET
        self._metrics.increment(
            "notionmdx.blocks_rendered_total", tags={"block_type": block_type}
        )
        log.debug(
            "Block transformed",
            extra={"extra_fields": {"block_type": block_type, "target": target}},
        )
        return _RenderedBlock(
            target=target,
            output=output if output is not None else "",
            imports=tuple(getattr(transformer, "imports", None) or ()),
            children=block_context.rendered_children,
        )

    def _commit(self, result: _RenderedBlock, *, nested: bool = False) -> None:
        # Children finish before their parent, so their imports come first.
        for child in result.children:
            self._commit(child, nested=True)
        if result.imports:
            self._variables.add_imports(*result.imports)
        self._variables.add_variable(result.target)
        if not nested or result.target != DEFAULT_TARGET:
            self._variables.append(result.target, result.output)

    # ------------------------------------------------------------------
    # Rich text
    # ------------------------------------------------------------------

    async def process_rich_text(
        self,
        context: RendererContext,
        rich_text: Sequence[Mapping[str, Any]],
        metadata: Mapping[str, Any] | None = None,
    ) -> str:
        """Render a Notion ``rich_text`` array.

        Each span runs through the annotation transformers of its active
        flags (see :attr:`annotation_order`), then through the ``link``
        transformer when the span has an ``href``.  Transformers receive the
        context metadata overlaid with *metadata*.  Span outputs are
        concatenated without a separator.

        Raises
        ------
        NotionMDXConfigurationError
            If a span has a link but no ``link`` transformer is registered.
        NotionMDXTransformationError
            If an annotation transformer raises.
        """
        results = await gather_ordered(
            self._compose_span(context, item, metadata) for item in rich_text
        )
        return "".join(results)

    def active_annotations(self, annotations: Mapping[str, Any]) -> list[str]:
        """Names of the active flags in *annotations*, in cascade order."""
        ordered = [
            name for name in self.annotation_order if _is_active(annotations.get(name))
        ]
        ordered.extend(
            name
            for name, value in annotations.items()
            if name not in self.annotation_order
            and name not in (LINK, EQUATION)
            and _is_active(value)
        )
        return ordered

    async def _compose_span(
        self,
        context: RendererContext,
        item: Mapping[str, Any],
        metadata: Mapping[str, Any] | None,
    ) -> str:
        # API responses carry "plain_text"; locally built spans only "text.content".
        text = item.get("plain_text")
        if text is None:
            text = (item.get("text") or {}).get("content", "")
        annotations = item.get("annotations") or {}
        registry = context.transformers
        metadata = MappingProxyType({**context.metadata, **(metadata or {})})

        if item.get("type") == EQUATION:
            text = await self._apply_annotation(
                registry, EQUATION,
                AnnotationInput(text=text, annotations=annotations, metadata=metadata),
            )

        for name in self.active_annotations(annotations):
            text = await self._apply_annotation(
                registry, name,
                AnnotationInput(text=text, annotations=annotations, metadata=metadata),
            )

        href = item.get("href")
        if href:
            if registry.annotation(LINK) is None:
                raise NotionMDXConfigurationError(
                    message="A 'link' annotation transformer is required to render linked text",
                    context={"missing": LINK},
                )
            text = await self._apply_annotation(
                registry, LINK,
                AnnotationInput(
                    text=text,
                    annotations=annotations,
                    link={"url": href},
                    metadata=metadata,
                ),
            )
        return text

    @staticmethod
    async def _apply_annotation(
        registry: TransformerRegistry, name: str, payload: AnnotationInput
    ) -> str:
        transformer = registry.annotation(name)
        if transformer is None:
            return payload.text
        try:
            return await transformer.transform(payload)
        except Exception as exc:
            raise NotionMDXTransformationError(
                message=f"Failed to apply annotation '{name}': {_describe(exc)}",
                context={"annotation": name},
                cause=exc,
            ) from exc
