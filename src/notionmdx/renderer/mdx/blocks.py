"""Block transformers for the MDX renderer.

Every top-level block renders to a fragment ending in a newline, so the
newline-joined ``content`` variable separates blocks with a blank line.
Nested children are indented under list items, wrapped in ``<details>``
for toggles and prefixed with ``> `` inside quotes and callouts.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from notionmdx.models import BlockTransformer
from notionmdx.renderer.context import RendererContext

from .helpers import format_as_markdown_table

# Media block types rendered as ``[Label](url)``.
_MEDIA_LABELS: dict[str, str] = {
    "video": "Video",
    "audio": "Audio",
    "pdf": "PDF",
}


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _data(ctx: RendererContext) -> Mapping[str, Any]:
    """The type-specific payload of the current block."""
    return ctx.block.get(ctx.block.get("type", "")) or {}


def _children(block: Mapping[str, Any]) -> list:
    block_data = block.get(block.get("type", "")) or {}
    return block.get("children") or block_data.get("children") or []


def _file_url(block_data: Mapping[str, Any]) -> str:
    source = block_data.get("type", "")
    if source == "external":
        return (block_data.get("external") or {}).get("url", "")
    if source == "file":
        return (block_data.get("file") or {}).get("url", "")
    return ""


def _notion_url(block_id: str) -> str:
    return f"https://www.notion.so/{block_id.replace('-', '')}"


def _indent(text: str, prefix: str = "  ") -> str:
    return "\n".join(f"{prefix}{line}" if line else line for line in text.split("\n"))


def _quote_lines(text: str) -> str:
    return "\n".join(f"> {line}" if line.strip() else ">" for line in text.split("\n"))


async def _text(ctx: RendererContext, key: str = "rich_text") -> str:
    return await ctx.process_rich_text(_data(ctx).get(key) or [])


async def _nested(ctx: RendererContext) -> str:
    children = _children(ctx.block)
    if not children:
        return ""
    return (await ctx.process_children(children)).strip("\n")


# ------------------------------------------------------------------
# Text blocks
# ------------------------------------------------------------------

async def _paragraph(ctx: RendererContext) -> str:
    text = await _text(ctx)
    children = await _nested(ctx)
    if children:
        return f"{text}\n\n{_indent(children)}\n"
    return f"{text}\n"


def _heading(level: int) -> BlockTransformer:
    async def transform(ctx: RendererContext) -> str:
        text = await _text(ctx)
        result = f"{'#' * level} {text}\n"
        # Toggleable headings carry children.
        children = await _nested(ctx)
        if children:
            result += f"\n{children}\n"
        return result

    return BlockTransformer(transform=transform)


def _list_item(marker: str) -> BlockTransformer:
    async def transform(ctx: RendererContext) -> str:
        text = await _text(ctx)
        result = f"{marker} {text}"
        children = await _nested(ctx)
        if children:
            result += f"\n{_indent(children)}"
        return result + "\n"

    return BlockTransformer(transform=transform)


async def _to_do(ctx: RendererContext) -> str:
    checkbox = "[x]" if _data(ctx).get("checked") else "[ ]"
    text = await _text(ctx)
    result = f"- {checkbox} {text}"
    children = await _nested(ctx)
    if children:
        result += f"\n{_indent(children)}"
    return result + "\n"


async def _toggle(ctx: RendererContext) -> str:
    # JSX content is not parsed as Markdown, so the summary uses HTML tags.
    summary = await ctx.process_rich_text(
        _data(ctx).get("rich_text") or [], {"html": True}
    )
    children = await _nested(ctx)
    return f"<details>\n<summary>{summary}</summary>\n\n{children}\n</details>\n"


async def _quote(ctx: RendererContext) -> str:
    text = await _text(ctx)
    children = await _nested(ctx)
    body = f"{text}\n\n{children}" if children else text
    return _quote_lines(body) + "\n"


async def _callout(ctx: RendererContext) -> str:
    block_data = _data(ctx)
    text = await _text(ctx)

    icon = block_data.get("icon") or {}
    icon_str = ""
    if icon.get("type") == "emoji":
        icon_str = icon.get("emoji", "")
    elif icon.get("type") == "external":
        icon_str = (icon.get("external") or {}).get("url", "")
    if icon_str:
        text = f"{icon_str} {text}"

    children = await _nested(ctx)
    body = f"{text}\n\n{children}" if children else text
    return _quote_lines(body) + "\n"


async def _code(ctx: RendererContext) -> str:
    block_data = _data(ctx)
    language = block_data.get("language", "")
    # Notion uses "plain text" for unspecified language
    if language == "plain text":
        language = ""
    code = "".join(span.get("plain_text", "") for span in block_data.get("rich_text") or [])
    return f"```{language}\n{code}\n```\n"


async def _equation(ctx: RendererContext) -> str:
    expression = _data(ctx).get("expression", "")
    return f"$$\n{expression}\n$$\n"


async def _divider(ctx: RendererContext) -> str:
    return "---\n"


# ------------------------------------------------------------------
# Media and links
# ------------------------------------------------------------------

async def _image(ctx: RendererContext) -> str:
    block_data = _data(ctx)
    caption = await _text(ctx, "caption")
    url = _file_url(block_data).replace("(", "%28").replace(")", "%29")
    return f"![{caption}]({url})\n"


async def _media(ctx: RendererContext) -> str:
    block_type = ctx.block.get("type", "")
    label = _MEDIA_LABELS.get(block_type, block_type.capitalize())
    return f"[{label}]({_file_url(_data(ctx))})\n"


async def _file(ctx: RendererContext) -> str:
    block_data = _data(ctx)
    url = _file_url(block_data)
    name = await _text(ctx, "caption") or block_data.get("name", "")
    if not name:
        name = url.rsplit("/", 1)[-1].split("?")[0] if url else "File"
    return f"[{name}]({url})\n"


async def _bookmark(ctx: RendererContext) -> str:
    url = _data(ctx).get("url", "")
    caption = await _text(ctx, "caption")
    return f"[{caption or url}]({url})\n"


async def _child_page(ctx: RendererContext) -> str:
    title = _data(ctx).get("title") or "Untitled"
    return f"[{title}]({_notion_url(ctx.block.get('id', ''))})\n"


# ------------------------------------------------------------------
# Tables and layout
# ------------------------------------------------------------------

async def _table(ctx: RendererContext) -> str:
    rows = [child for child in _children(ctx.block) if child.get("type") == "table_row"]
    if not rows:
        return ""

    rendered: list[list[str]] = []
    for row in rows:
        cells = (row.get("table_row") or {}).get("cells") or []
        rendered.append([await ctx.process_rich_text(cell) for cell in cells])

    width = _data(ctx).get("table_width") or max(len(row) for row in rendered)
    formatter = ctx.utils.get("format_as_markdown_table", format_as_markdown_table)
    # GFM needs a header row; without a column header the first row serves.
    headers = rendered[0] + [""] * (width - len(rendered[0]))
    return formatter(headers, rendered[1:]) + "\n"


async def _passthrough(ctx: RendererContext) -> str:
    children = await _nested(ctx)
    return f"{children}\n" if children else ""


block_transformers: dict[str, BlockTransformer] = {
    "paragraph": BlockTransformer(transform=_paragraph),
    "heading_1": _heading(1),
    "heading_2": _heading(2),
    "heading_3": _heading(3),
    "bulleted_list_item": _list_item("-"),
    "numbered_list_item": _list_item("1."),
    "to_do": BlockTransformer(transform=_to_do),
    "toggle": BlockTransformer(transform=_toggle),
    "quote": BlockTransformer(transform=_quote),
    "callout": BlockTransformer(transform=_callout),
    "code": BlockTransformer(transform=_code),
    "equation": BlockTransformer(transform=_equation),
    "divider": BlockTransformer(transform=_divider),
    "image": BlockTransformer(transform=_image),
    "video": BlockTransformer(transform=_media),
    "audio": BlockTransformer(transform=_media),
    "pdf": BlockTransformer(transform=_media),
    "file": BlockTransformer(transform=_file),
    "bookmark": BlockTransformer(transform=_bookmark),
    "embed": BlockTransformer(transform=_bookmark),
    "link_preview": BlockTransformer(transform=_bookmark),
    "table": BlockTransformer(transform=_table),
    "column_list": BlockTransformer(transform=_passthrough),
    "column": BlockTransformer(transform=_passthrough),
    "synced_block": BlockTransformer(transform=_passthrough),
    "child_page": BlockTransformer(transform=_child_page),
    "child_database": BlockTransformer(transform=_child_page),
}
