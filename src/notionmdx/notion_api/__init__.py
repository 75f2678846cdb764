"""notionmdx.notion_api -- Notion API transport and endpoint wrappers.

* :mod:`.retries` -- Retry decision logic and exponential backoff.
* :mod:`.transport` -- Async HTTP transport with auth, retries and pagination.
* :mod:`.pages` -- Page API wrapper.
* :mod:`.blocks` -- Block API wrapper.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI
from .pages import AsyncPageAPI
from .retries import compute_backoff, should_retry
from .transport import AsyncNotionTransport

__all__ = [
    "AsyncBlockAPI",
    "AsyncNotionTransport",
    "AsyncPageAPI",
    "compute_backoff",
    "should_retry",
]
