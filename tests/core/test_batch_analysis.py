"""Tests for page partitioning and the bounded-concurrency batch analysis engine."""

import asyncio

import pytest

from conftest import FakeVisionClient, make_pages
from flashai.core.document_processing.tasks.analysis_task import (
    BatchAnalysisEngine,
    partition_pages,
)
from flashai.core.exceptions import AnalysisError


class TestPartitionPages:
    """Test contiguous batch partitioning."""

    def test_ten_pages_batch_four(self) -> None:
        """Should produce 3 batches of 4, 4 and 2 pages."""
        batches = partition_pages(make_pages(10), 4)

        assert [b.page_count for b in batches] == [4, 4, 2]
        assert [(b.start_page, b.end_page) for b in batches] == [(1, 4), (5, 8), (9, 10)]
        assert [b.index for b in batches] == [0, 1, 2]

    def test_every_page_appears_once_in_order(self) -> None:
        """Should cover all pages exactly once, in order."""
        pages = make_pages(7)
        batches = partition_pages(pages, 3)

        flattened = [image for batch in batches for image in batch.images]
        assert flattened == [p.image_data for p in pages]

    def test_batch_larger_than_document(self) -> None:
        """Should produce a single batch when batch_size exceeds page count."""
        batches = partition_pages(make_pages(3), 8)
        assert len(batches) == 1
        assert batches[0].label == "1-3"

    def test_invalid_batch_size(self) -> None:
        """Should reject batch sizes below 1."""
        with pytest.raises(ValueError):
            partition_pages(make_pages(3), 0)


class TestBatchAnalysisEngine:
    """Test concurrent dispatch, ordering, progress and failure handling."""

    @pytest.mark.asyncio
    async def test_results_ordered_despite_out_of_order_completion(self) -> None:
        """Should join results in page order even when early batches finish last."""
        # Arrange: first batch is slowest
        vision = FakeVisionClient(delays={1: 0.05, 3: 0.02, 5: 0.0})
        engine = BatchAnalysisEngine(vision, asyncio.Semaphore(10))

        # Act
        text = await engine.analyze(make_pages(6), "describe", batch_size=2)

        # Assert
        markers = [line for line in text.splitlines() if line.startswith("=== Pages")]
        assert markers == ["=== Pages 1-2 ===", "=== Pages 3-4 ===", "=== Pages 5-6 ==="]
        assert text.startswith("=== Pages 1-2 ===\nanalysis starting at page 1")
        assert "\n\n=== Pages 3-4 ===\n" in text

    @pytest.mark.asyncio
    async def test_progress_reports_pages_done(self) -> None:
        """Should report non-decreasing progress ending at total pages."""
        engine = BatchAnalysisEngine(FakeVisionClient(), asyncio.Semaphore(10))
        reports: list[tuple[int, int]] = []

        await engine.analyze(make_pages(10), "describe", 4, progress=lambda d, t: reports.append((d, t)))

        assert len(reports) == 3
        done_values = [done for done, _ in reports]
        assert done_values == sorted(done_values)
        assert reports[-1] == (10, 10)
        assert all(total == 10 for _, total in reports)

    @pytest.mark.asyncio
    async def test_concurrency_never_exceeds_limiter(self) -> None:
        """Should keep in-flight calls at or below the semaphore capacity."""
        vision = FakeVisionClient(delays={i: 0.01 for i in range(1, 21)})
        engine = BatchAnalysisEngine(vision, asyncio.Semaphore(3))

        await engine.analyze(make_pages(20), "describe", batch_size=1)

        assert len(vision.calls) == 20
        assert vision.peak_in_flight <= 3

    @pytest.mark.asyncio
    async def test_shared_limiter_caps_across_documents(self) -> None:
        """Should cap calls process-wide when two documents share the limiter."""
        vision = FakeVisionClient(delays={i: 0.01 for i in range(1, 9)})
        limiter = asyncio.Semaphore(2)
        engine_a = BatchAnalysisEngine(vision, limiter)
        engine_b = BatchAnalysisEngine(vision, limiter)

        await asyncio.gather(
            engine_a.analyze(make_pages(8), "a", 1),
            engine_b.analyze(make_pages(8), "b", 1),
        )

        assert vision.peak_in_flight <= 2

    @pytest.mark.asyncio
    async def test_failed_batch_reports_page_range(self) -> None:
        """Should raise for the first failed batch after all batches ran."""
        vision = FakeVisionClient(fail_pages={3, 5})
        engine = BatchAnalysisEngine(vision, asyncio.Semaphore(10))

        with pytest.raises(AnalysisError) as exc_info:
            await engine.analyze(make_pages(6), "describe", 2)

        assert "analyze pages 3-4 with vision" in exc_info.value.message
        assert "boom on page 3" in exc_info.value.message
        assert len(vision.calls) == 3

    @pytest.mark.asyncio
    async def test_no_pages(self) -> None:
        """Should refuse to analyze an empty page list."""
        engine = BatchAnalysisEngine(FakeVisionClient(), asyncio.Semaphore(1))
        with pytest.raises(AnalysisError):
            await engine.analyze([], "describe", 2)

    @pytest.mark.asyncio
    async def test_cancellation_cancels_batches(self) -> None:
        """Should stop issuing calls once the caller is cancelled."""
        vision = FakeVisionClient(delays={i: 1.0 for i in range(1, 11)})
        engine = BatchAnalysisEngine(vision, asyncio.Semaphore(2))

        task = asyncio.create_task(engine.analyze(make_pages(10), "describe", 1))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(vision.calls) == 2
        assert vision.in_flight == 0
