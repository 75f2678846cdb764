"""Metrics hook protocol and no-op default implementation.

The renderer, fetcher and transport report counters and timings through a
:class:`MetricsHook`.  Without a configured backend a
:class:`NoopMetricsHook` swallows every data point.

Emitted metric names:

* ``notionmdx.blocks_rendered_total``  -- counter, tagged ``block_type``
* ``notionmdx.blocks_skipped_total``   -- counter, tagged ``block_type``
* ``notionmdx.render_duration_ms``     -- timing, tagged ``stage``
* ``notionmdx.render_failures_total``  -- counter, tagged ``stage``
* ``notionmdx.requests_total``         -- counter, tagged ``method``/``status``
* ``notionmdx.request_duration_ms``    -- timing, tagged ``method``
* ``notionmdx.retries_total``          -- counter, tagged ``reason``
* ``notionmdx.blocks_fetched_total``   -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    Tags are string-to-string dicts; backends map them onto their own
    tagging scheme (Datadog tags, Prometheus labels...).
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to an absolute value."""
        ...


class NoopMetricsHook:
    """Metrics backend that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
