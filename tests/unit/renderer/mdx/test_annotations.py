"""Tests for notionmdx.renderer.mdx.annotations."""

from __future__ import annotations

import pytest

from notionmdx.models import AnnotationInput
from notionmdx.renderer.mdx import annotation_transformers


async def apply(name: str, text: str, *, html: bool = False, url: str | None = None) -> str:
    payload = AnnotationInput(
        text=text,
        annotations={name: True},
        link={"url": url} if url is not None else None,
        metadata={"html": html},
    )
    return await annotation_transformers[name].transform(payload)


class TestMarkdownAnnotations:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("bold", "**t**"),
            ("italic", "*t*"),
            ("strikethrough", "~~t~~"),
            ("code", "`t`"),
            ("underline", "<u>t</u>"),
            ("equation", "$t$"),
        ],
    )
    async def test_markdown_syntax(self, name, expected):
        assert await apply(name, "t") == expected

    async def test_link(self):
        assert await apply("link", "docs", url="https://x.dev/a") == "[docs](https://x.dev/a)"

    async def test_link_parentheses_encoded(self):
        result = await apply("link", "wiki", url="https://en.wikipedia.org/wiki/Foo_(bar)")
        assert result == "[wiki](https://en.wikipedia.org/wiki/Foo_%28bar%29)"

    async def test_link_without_url_returns_text(self):
        assert await apply("link", "plain", url="") == "plain"

    async def test_missing_metadata_means_markdown(self):
        payload = AnnotationInput(text="t", annotations={"bold": True})
        assert await annotation_transformers["bold"].transform(payload) == "**t**"


class TestHtmlAnnotations:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("bold", "<strong>t</strong>"),
            ("italic", "<i>t</i>"),
            ("strikethrough", "<s>t</s>"),
            ("code", "<code>t</code>"),
            ("underline", "<u>t</u>"),
            ("equation", "<code>t</code>"),
        ],
    )
    async def test_html_tags(self, name, expected):
        assert await apply(name, "t", html=True) == expected

    async def test_html_link(self):
        assert await apply("link", "t", html=True, url="https://x") == '<a href="https://x">t</a>'
