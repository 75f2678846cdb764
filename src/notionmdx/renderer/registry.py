"""Transformer registry.

Two open dictionaries: block-type tag → block transformer and annotation
name → annotation transformer.  Registration happens at any time before
(or between) renders; the last registration for a key wins.  Looking up
an unmapped key returns ``None``; the renderer treats that as "skip".
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any


class TransformerRegistry:
    """Block and annotation transformers known to a renderer."""

    def __init__(self) -> None:
        self._blocks: dict[str, Any] = {}
        self._annotations: dict[str, Any] = {}

    # -- registration ------------------------------------------------------

    def set_block(self, block_type: str, transformer: Any) -> None:
        self._blocks[block_type] = transformer

    def set_annotation(self, name: str, transformer: Any) -> None:
        self._annotations[name] = transformer

    # -- lookup ------------------------------------------------------------

    def block(self, block_type: str) -> Any | None:
        return self._blocks.get(block_type)

    def annotation(self, name: str) -> Any | None:
        return self._annotations.get(name)

    @property
    def blocks(self) -> Mapping[str, Any]:
        """Read-only view of the block transformers."""
        return MappingProxyType(self._blocks)

    @property
    def annotations(self) -> Mapping[str, Any]:
        """Read-only view of the annotation transformers."""
        return MappingProxyType(self._annotations)

    def __repr__(self) -> str:
        return (
            f"TransformerRegistry(blocks={sorted(self._blocks)!r}, "
            f"annotations={sorted(self._annotations)!r})"
        )
