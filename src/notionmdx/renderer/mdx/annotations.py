"""Annotation transformers for the MDX renderer.

Each transformer wraps the text it receives.  With ``metadata["html"]``
set they emit HTML tags instead of Markdown syntax, which is what MDX
needs inside JSX elements and table cells.
"""

from __future__ import annotations

from notionmdx.models import AnnotationInput, AnnotationTransformer


def _html(payload: AnnotationInput) -> bool:
    return bool(payload.metadata and payload.metadata.get("html"))


async def _bold(payload: AnnotationInput) -> str:
    if _html(payload):
        return f"<strong>{payload.text}</strong>"
    return f"**{payload.text}**"


async def _italic(payload: AnnotationInput) -> str:
    if _html(payload):
        return f"<i>{payload.text}</i>"
    return f"*{payload.text}*"


async def _strikethrough(payload: AnnotationInput) -> str:
    if _html(payload):
        return f"<s>{payload.text}</s>"
    return f"~~{payload.text}~~"


async def _code(payload: AnnotationInput) -> str:
    if _html(payload):
        return f"<code>{payload.text}</code>"
    return f"`{payload.text}`"


async def _underline(payload: AnnotationInput) -> str:
    # Markdown has no underline syntax.
    return f"<u>{payload.text}</u>"


async def _link(payload: AnnotationInput) -> str:
    url = (payload.link or {}).get("url")
    if not url:
        return payload.text
    if _html(payload):
        return f'<a href="{url}">{payload.text}</a>'
    escaped = url.replace("(", "%28").replace(")", "%29")
    return f"[{payload.text}]({escaped})"


async def _equation(payload: AnnotationInput) -> str:
    if _html(payload):
        return f"<code>{payload.text}</code>"
    return f"${payload.text}$"


annotation_transformers: dict[str, AnnotationTransformer] = {
    "bold": AnnotationTransformer(transform=_bold),
    "italic": AnnotationTransformer(transform=_italic),
    "strikethrough": AnnotationTransformer(transform=_strikethrough),
    "code": AnnotationTransformer(transform=_code),
    "underline": AnnotationTransformer(transform=_underline),
    "link": AnnotationTransformer(transform=_link),
    "equation": AnnotationTransformer(transform=_equation),
}
