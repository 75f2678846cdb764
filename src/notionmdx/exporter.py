"""Chain stage writing rendered documents to disk."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path

from notionmdx.chain import BaseChainNode
from notionmdx.errors import NotionMDXExportError
from notionmdx.models import ChainData
from notionmdx.observability import get_logger

log = get_logger("notionmdx.exporter")


class FileExporter(BaseChainNode):
    """Write ``data.content`` to ``<output_dir>/<page_id><extension>``.

    The written path is recorded in ``metadata["output_path"]`` of the
    forwarded record.  Missing directories are created.

    Parameters
    ----------
    output_dir:
        Target directory.
    extension:
        File suffix, including the leading dot.
    """

    def __init__(self, output_dir: str | Path, extension: str = ".mdx") -> None:
        super().__init__()
        self.output_dir = Path(output_dir)
        self.extension = extension

    def path_for(self, page_id: str) -> Path:
        return self.output_dir / f"{page_id}{self.extension}"

    async def process(self, data: ChainData) -> ChainData:
        if data.content is None:
            raise NotionMDXExportError(
                message=f"Nothing to export for page {data.page_id!r}: content is missing",
                context={"page_id": data.page_id},
            )
        path = self.path_for(data.page_id)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, path, data.content)
        except OSError as exc:
            raise NotionMDXExportError(
                message=f"Failed to write {path}: {exc}",
                context={"page_id": data.page_id, "path": str(path)},
                cause=exc,
            ) from exc

        log.info(
            "Document exported",
            extra={"extra_fields": {"page_id": data.page_id, "path": str(path)}},
        )
        metadata = {**data.metadata, "output_path": str(path)}
        return await self.forward(dataclasses.replace(data, metadata=metadata))

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
