"""Builders for Notion-shaped test data."""

from __future__ import annotations

from typing import Any


def make_span(
    text: str,
    *,
    href: str | None = None,
    span_type: str = "text",
    **annotations: Any,
) -> dict:
    """Build one rich-text span as returned by the Notion API."""
    base = {
        "bold": False,
        "italic": False,
        "strikethrough": False,
        "underline": False,
        "code": False,
        "color": "default",
    }
    base.update(annotations)
    span: dict[str, Any] = {
        "type": span_type,
        "plain_text": text,
        "annotations": base,
        "href": href,
    }
    if span_type == "equation":
        span["equation"] = {"expression": text}
    else:
        span["text"] = {"content": text, "link": {"url": href} if href else None}
    return span


def make_block(block_type: str, block_id: str = "", children: list | None = None, **data: Any) -> dict:
    """Build a block dict; *data* becomes the type-specific payload."""
    block: dict[str, Any] = {
        "object": "block",
        "id": block_id or f"{block_type}-id",
        "type": block_type,
        "has_children": bool(children),
        block_type: data,
    }
    if children is not None:
        block["children"] = children
    return block


def make_paragraph(text: str, children: list | None = None, **annotations: Any) -> dict:
    return make_block("paragraph", rich_text=[make_span(text, **annotations)], children=children)


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [entry["name"] for entry in self.increments]
