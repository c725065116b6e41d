"""
Batch page analysis task.

Splits rendered pages into contiguous batches, analyzes them concurrently
through the vision client under a process-wide concurrency limiter, and
reassembles the results in page order regardless of completion order.

Dependencies: asyncio (stdlib), flashai.core.exceptions
System role: Analysis stage of the ingestion pipeline
"""

import asyncio
import logging
from typing import Callable, Protocol

from flashai.core.exceptions import AnalysisError, FlashAIException

from ..models import PageBatch, PageImage

logger = logging.getLogger(__name__)

BatchProgressCallback = Callable[[int, int], None]


class PageAnalyzer(Protocol):
    """Remote analysis of a group of page images."""

    async def analyze(self, images: list[str], instruction: str) -> str: ...


def partition_pages(pages: list[PageImage], batch_size: int) -> list[PageBatch]:
    """
    Split pages into contiguous batches.

    Args:
        pages: Pages in document order
        batch_size: Maximum pages per batch (>= 1)

    Returns:
        list[PageBatch]: ceil(len(pages) / batch_size) batches; every page
        appears exactly once and only the last batch may be short

    Raises:
        ValueError: batch_size < 1
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    batches = []
    for index, start in enumerate(range(0, len(pages), batch_size)):
        chunk = pages[start:start + batch_size]
        batches.append(
            PageBatch(
                index=index,
                start_page=chunk[0].page_number,
                end_page=chunk[-1].page_number,
                images=[page.image_data for page in chunk],
            )
        )
    return batches


def format_batch_result(batch: PageBatch, text: str) -> str:
    return f"=== Pages {batch.start_page}-{batch.end_page} ===\n{text}"


class BatchAnalysisEngine:
    """
    Bounded-concurrency fan-out of page batches to a PageAnalyzer.

    The limiter is shared by every document in the process, so the number of
    in-flight remote calls never exceeds its capacity.
    """

    def __init__(self, client: PageAnalyzer, limiter: asyncio.Semaphore) -> None:
        """
        Initialize engine.

        Args:
            client: Vision client (or any PageAnalyzer)
            limiter: Process-wide semaphore capping concurrent calls
        """
        self._client = client
        self._limiter = limiter

    async def analyze(
        self,
        pages: list[PageImage],
        instruction: str,
        batch_size: int,
        progress: BatchProgressCallback | None = None,
    ) -> str:
        """
        Analyze all pages and return the ordered, page-marked analysis.

        Every batch is attempted even if another fails; afterwards the first
        failed batch in page order is reported. Cancelling the caller cancels
        all batch tasks.

        Args:
            pages: Pages in document order
            instruction: Prompt sent with every batch
            batch_size: Maximum pages per remote call
            progress: Called as progress(pages_done, total_pages) after each batch

        Returns:
            str: Batch results joined with blank lines, each prefixed
            "=== Pages a-b ==="

        Raises:
            AnalysisError: Any batch failed, or there were no pages
        """
        if not pages:
            raise AnalysisError("no pages to analyze")

        batches = partition_pages(pages, batch_size)
        total_pages = len(pages)
        results: list[str | None] = [None] * len(batches)
        errors: list[Exception | None] = [None] * len(batches)
        pages_done = 0

        logger.info(
            f"{__name__}:analyze - Analyzing {total_pages} pages in {len(batches)} batches",
            extra={"batch_size": batch_size},
        )

        async def run_batch(batch: PageBatch) -> None:
            nonlocal pages_done
            try:
                async with self._limiter:
                    results[batch.index] = await self._client.analyze(batch.images, instruction)
            except Exception as e:
                errors[batch.index] = e
                logger.warning(f"{__name__}:analyze - Batch {batch.label} failed: {e}")

            pages_done += batch.page_count
            if progress is not None:
                progress(pages_done, total_pages)

        tasks = [asyncio.create_task(run_batch(batch)) for batch in batches]
        try:
            await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for batch, error in zip(batches, errors):
            if error is not None:
                cause = error.message if isinstance(error, FlashAIException) else str(error)
                raise AnalysisError(
                    f"analyze pages {batch.label} with vision: {cause}",
                    start_page=batch.start_page,
                    end_page=batch.end_page,
                ) from error

        return "\n\n".join(
            format_batch_result(batch, text or "") for batch, text in zip(batches, results)
        )
