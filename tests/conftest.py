"""Shared test fixtures for the notionmdx test suite."""

from __future__ import annotations

import pytest

from notionmdx.config import NotionMDXConfig
from notionmdx.renderer.mdx import MDXRenderer


@pytest.fixture
def config() -> NotionMDXConfig:
    """Default test configuration with a dummy token and no retry delay."""
    return NotionMDXConfig(
        token="test_token_1234",
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        retry_jitter=False,
    )



@pytest.fixture
def mdx_renderer(config: NotionMDXConfig) -> MDXRenderer:
    """MDX renderer using the default test config."""
    return MDXRenderer(config)
