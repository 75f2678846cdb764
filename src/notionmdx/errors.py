"""Error hierarchy for notionmdx.

Every public error class inherits from :class:`NotionMDXError`.  Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict and an
optional ``cause`` (chained exception).

Rendering failures are never recovered: a transformer error aborts the
whole :meth:`~notionmdx.renderer.BaseRendererPlugin.process` call and
reaches the caller as a :class:`NotionMDXRenderError` whose ``cause``
chain leads back to the original exception.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    TRANSFORMATION_ERROR = "TRANSFORMATION_ERROR"
    RENDER_ERROR = "RENDER_ERROR"
    API_ERROR = "API_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    EXPORT_ERROR = "EXPORT_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionMDXError(Exception):
    """Base exception for all notionmdx errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Rendering errors
# ---------------------------------------------------------------------------

class NotionMDXConfigurationError(NotionMDXError):
    """The renderer or pipeline is misconfigured.

    Raised eagerly: an invalid template is rejected by the constructor or
    :meth:`set_template`, never at render time.  The one configuration
    problem that can only be detected while rendering is a linked text
    span with no ``link`` annotation transformer registered.

    Context keys: ``missing`` (placeholder or transformer name).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXTransformationError(NotionMDXError):
    """A block or annotation transformer raised during ``transform``.

    Context keys: ``block_type`` and ``block_id`` for block transformers,
    ``annotation`` for annotation transformers.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TRANSFORMATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXRenderError(NotionMDXError):
    """A renderer stage failed; no partial result was produced.

    Context keys: ``stage``, ``page_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RENDER_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Notion API errors (fetcher stage)
# ---------------------------------------------------------------------------

class NotionMDXAPIError(NotionMDXError):
    """Base class for Notion API failures.

    Context keys: ``status_code``, ``notion_code``, ``path``.
    """

    def __init__(
        self,
        code: str = ErrorCode.API_ERROR,
        message: str = "Notion API error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXAuthError(NotionMDXAPIError):
    """Notion API returned 401; the integration token is invalid."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.AUTH_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXPermissionError(NotionMDXAPIError):
    """Notion API returned 403; the integration lacks access to the page."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PERMISSION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXNotFoundError(NotionMDXAPIError):
    """Notion API returned 404; the page or block does not exist."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXRateLimitError(NotionMDXAPIError):
    """Notion API kept answering 429 until the retry budget ran out.

    Context keys: ``attempts``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message=message,
            context=context,
            cause=cause,
        )


class NotionMDXNetworkError(NotionMDXAPIError):
    """A transport-level failure (timeout, DNS, connection reset).

    Context keys: ``path``, ``attempts``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Export errors
# ---------------------------------------------------------------------------

class NotionMDXExportError(NotionMDXError):
    """The exporter stage could not write the rendered document.

    Context keys: ``page_id``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.EXPORT_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
