"""Configuration for notionmdx.

:class:`NotionMDXConfig` is a dataclass capturing every tuneable knob of
the fetch → render → export pipeline.  The rendering engine itself needs
no configuration; the MDX renderer reads the ``frontmatter`` and
``html_annotations`` options, the fetcher reads the HTTP options and the
exporter reads ``output_dir`` / ``file_extension``.

:class:`FrontmatterConfig` narrows which page properties end up in the
YAML frontmatter block.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Frontmatter options
# ---------------------------------------------------------------------------

@dataclass
class FrontmatterConfig:
    """Selection rules for the frontmatter block.

    Parameters
    ----------
    include:
        If non-empty, only these property names are emitted.
    exclude:
        Property names that are never emitted.  Applied after *include*.
    rename:
        Maps a property name to the key written in the frontmatter.
    defaults:
        Values used for keys that are absent from the page properties
        (keys are frontmatter keys, i.e. after renaming).
    """

    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    rename: dict[str, str] = field(default_factory=dict)
    defaults: dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class NotionMDXConfig:
    """Complete configuration for a notionmdx pipeline.

    Every parameter has a default; ``token`` is only needed when pages are
    fetched from the Notion API.

    Parameters
    ----------
    token:
        Notion integration token.  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    retry_max_attempts:
        Total attempts per request (initial request included) for
        retryable HTTP failures.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on the computed backoff delay.
    retry_jitter:
        Scale backoff intervals randomly to 50–100 % of their value.
    fetch_max_concurrent:
        Maximum number of child-block listings in flight at once.
    fetch_child_pages:
        Descend into ``child_page`` and ``child_database`` blocks.  Off by
        default because their children are separate documents.
    frontmatter:
        ``False`` disables the frontmatter block, ``True`` emits every
        page property, a :class:`FrontmatterConfig` selects and renames.
    html_annotations:
        Make the MDX annotation transformers emit HTML tags
        (``<strong>``, ``<a href>``...) instead of Markdown syntax.
    output_dir:
        Directory used by :class:`~notionmdx.exporter.FileExporter`.
    file_extension:
        Suffix of exported files.
    metrics:
        Optional :class:`~notionmdx.observability.MetricsHook` backend.
    """

    # ── Notion API ──────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Retry ───────────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    # ── Fetching ────────────────────────────────────────────────────────
    fetch_max_concurrent: int = 4

    fetch_child_pages: bool = False

    # ── Rendering ───────────────────────────────────────────────────────
    frontmatter: bool | FrontmatterConfig = False

    html_annotations: bool = False

    # ── Export ──────────────────────────────────────────────────────────
    output_dir: str | None = None

    file_extension: str = ".mdx"

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.fetch_max_concurrent < 1:
            raise ValueError(f"fetch_max_concurrent must be >= 1, got {self.fetch_max_concurrent}")
        if not self.file_extension.startswith("."):
            raise ValueError(f"file_extension must start with '.', got {self.file_extension!r}")
        if not isinstance(self.frontmatter, (bool, FrontmatterConfig)):
            raise ValueError(
                "frontmatter must be a bool or FrontmatterConfig, "
                f"got {type(self.frontmatter).__name__}"
            )

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionMDXConfig({', '.join(parts)})"
