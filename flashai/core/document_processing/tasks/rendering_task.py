"""
PDF page rendering task.

Rasterizes every page of a PDF into a PNG data URI using Ghostscript.
The page count is read first with pypdf so empty or unreadable documents fail
before a subprocess is spawned. Rendering happens in a scoped temp directory
that is always removed.

Dependencies: pypdf, Ghostscript binary, asyncio (stdlib)
System role: First stage of the ingestion pipeline
"""

import asyncio
import base64
import logging
import tempfile
from pathlib import Path
from typing import Protocol

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from flashai.core.exceptions import RenderError

from ..models import PageImage

logger = logging.getLogger(__name__)


class PageRenderer(Protocol):
    """Anything that turns a document path into ordered page images."""

    async def render(self, file_path: str) -> list[PageImage]: ...


def count_pages(file_path: str) -> int:
    """
    Count the pages of a PDF.

    Args:
        file_path: Path to PDF document

    Returns:
        int: Page count

    Raises:
        RenderError: File missing or not a readable PDF
    """
    path = Path(file_path)
    if not path.exists():
        raise RenderError(f"file not found: {file_path}", file_path)

    try:
        return len(PdfReader(str(path)).pages)
    except (PdfReadError, OSError, ValueError) as e:
        raise RenderError(f"get page count: {e}", file_path) from e


class GhostscriptRenderer:
    """Render PDF pages to PNG with the Ghostscript CLI."""

    def __init__(self, binary: str = "gs", dpi: int = 150) -> None:
        """
        Initialize renderer.

        Args:
            binary: Ghostscript executable name or path
            dpi: Render resolution
        """
        self._binary = binary
        self._dpi = dpi

    async def render(self, file_path: str) -> list[PageImage]:
        """
        Render every page of a PDF.

        Args:
            file_path: Path to PDF document

        Returns:
            list[PageImage]: Pages in document order, numbered from 1

        Raises:
            RenderError: Document has no pages, or Ghostscript failed
        """
        page_count = await asyncio.to_thread(count_pages, file_path)
        if page_count == 0:
            raise RenderError("pdf has no pages", file_path)

        with tempfile.TemporaryDirectory(prefix="flashai_render_") as temp_dir:
            output_pattern = str(Path(temp_dir) / "page-%03d.png")
            await self._run_ghostscript(file_path, output_pattern)

            pages = []
            for page_number in range(1, page_count + 1):
                image_path = Path(temp_dir) / f"page-{page_number:03d}.png"
                try:
                    data = await asyncio.to_thread(image_path.read_bytes)
                except OSError as e:
                    raise RenderError(f"read page {page_number}: {e}", file_path) from e
                encoded = base64.b64encode(data).decode("ascii")
                pages.append(
                    PageImage(page_number=page_number, image_data=f"data:image/png;base64,{encoded}")
                )

        logger.info(f"{__name__}:render - Rendered {len(pages)} pages from {file_path}")
        return pages

    async def _run_ghostscript(self, file_path: str, output_pattern: str) -> None:
        args = [
            "-dQUIET",
            "-dSAFER",
            "-dNOPAUSE",
            "-dBATCH",
            "-sDEVICE=png16m",
            f"-r{self._dpi}",
            f"-sOutputFile={output_pattern}",
            file_path,
        ]
        try:
            process = await asyncio.create_subprocess_exec(
                self._binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RenderError(f"start ghostscript: {e}", file_path) from e

        try:
            _, stderr = await process.communicate()
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        if process.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise RenderError(
                f"ghostscript exited with status {process.returncode}: {detail}",
                file_path,
            )
