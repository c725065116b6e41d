"""
API tests for document upload and job polling endpoints.

Uses httpx.AsyncClient over ASGITransport so background job tasks run on
the test's event loop. Collaborators are injected via dependency_overrides.
"""

import asyncio

import httpx
import pytest

from conftest import fake_pdf
from flashai.api.deps import get_ingestion_service, get_job_tracker, get_settings_dependency
from flashai.api.main import create_app
from flashai.configs import Settings
from flashai.configs.ai import SynthesisSettings, VisionSettings
from flashai.core.job_tracker import JobTracker


@pytest.fixture
def tracker() -> JobTracker:
    return JobTracker()


@pytest.fixture
def make_client(build_service, tracker):
    """Factory creating an API client around a test IngestionService."""
    apps = []

    def make(ai_configured: bool = True) -> httpx.AsyncClient:
        app = create_app()
        service = build_service(ai_configured=ai_configured, job_tracker=tracker)
        app.dependency_overrides[get_ingestion_service] = lambda: service
        app.dependency_overrides[get_job_tracker] = lambda: tracker
        apps.append(app)
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")

    yield make

    for app in apps:
        app.dependency_overrides.clear()


def pdf_part(name: str, pages: int) -> tuple[str, tuple[str, bytes, str]]:
    return ("files", (name, fake_pdf(pages), "application/pdf"))


class TestCreateUploadJob:
    """Test POST /api/v1/documents/jobs."""

    @pytest.mark.asyncio
    async def test_accepts_and_completes_job(self, make_client) -> None:
        """Should return 202 with a pending camelCase snapshot, then complete."""
        async with make_client() as client:
            # Act
            response = await client.post(
                "/api/v1/documents/jobs",
                data={"docType": "exam"},
                files=[pdf_part("midterm.pdf", 2)],
            )

            # Assert
            assert response.status_code == 202
            body = response.json()
            assert body["status"] == "pending"
            assert body["files"][0]["name"] == "midterm.pdf"
            assert body["files"][0]["percent"] == 0
            job_id = body["jobId"]

            for _ in range(500):
                polled = (await client.get(f"/api/v1/documents/jobs/{job_id}")).json()
                if polled["status"] in ("complete", "failed"):
                    break
                await asyncio.sleep(0.01)

            assert polled["status"] == "complete"
            assert polled["files"][0]["status"] == "complete"
            assert polled["results"][0]["documentId"]
            assert polled["results"][0]["pages"] == 2

    @pytest.mark.asyncio
    async def test_rejects_unknown_doc_type(self, make_client, tracker) -> None:
        """Should return 400 and create no job."""
        async with make_client() as client:
            response = await client.post(
                "/api/v1/documents/jobs",
                data={"docType": "notes"},
                files=[pdf_part("a.pdf", 1)],
            )

        assert response.status_code == 400
        assert "docType" in response.json()["detail"]
        assert tracker.job_count == 0

    @pytest.mark.asyncio
    async def test_rejects_missing_files(self, make_client) -> None:
        """Should return 400 when no files are attached."""
        async with make_client() as client:
            response = await client.post("/api/v1/documents/jobs", data={"docType": "exam"})

        assert response.status_code == 400
        assert response.json()["detail"] == "no files uploaded"

    @pytest.mark.asyncio
    async def test_unavailable_without_credentials(self, make_client, tracker) -> None:
        """Should return 503 before creating a job."""
        async with make_client(ai_configured=False) as client:
            response = await client.post(
                "/api/v1/documents/jobs",
                data={"docType": "exam"},
                files=[pdf_part("a.pdf", 1)],
            )

        assert response.status_code == 503
        assert tracker.job_count == 0


class TestUploadDocuments:
    """Test POST /api/v1/documents."""

    @pytest.mark.asyncio
    async def test_processes_inline(self, make_client) -> None:
        """Should return one result per file in upload order."""
        async with make_client() as client:
            response = await client.post(
                "/api/v1/documents",
                data={"docType": "exam"},
                files=[pdf_part("one.pdf", 1), pdf_part("none.pdf", 0)],
            )

        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["name"] for r in results] == ["one.pdf", "none.pdf"]
        assert [r["status"] for r in results] == ["ok", "error"]

    @pytest.mark.asyncio
    async def test_maps_service_errors_to_status_codes(self, make_client) -> None:
        """Should return 400 for a bad docType and 503 without credentials."""
        async with make_client() as client:
            bad_type = await client.post(
                "/api/v1/documents",
                data={"docType": "slides"},
                files=[pdf_part("a.pdf", 1)],
            )
        async with make_client(ai_configured=False) as client:
            unavailable = await client.post(
                "/api/v1/documents",
                data={"docType": "exam"},
                files=[pdf_part("a.pdf", 1)],
            )

        assert bad_type.status_code == 400
        assert bad_type.json()["detail"] == "docType must be 'information' or 'exam'"
        assert unavailable.status_code == 503


class TestGetJob:
    """Test GET /api/v1/documents/jobs/{job_id}."""

    @pytest.mark.asyncio
    async def test_unknown_job(self, make_client) -> None:
        """Should return 404 with 'job not found'."""
        async with make_client() as client:
            response = await client.get("/api/v1/documents/jobs/does-not-exist")

        assert response.status_code == 404
        assert response.json()["detail"] == "job not found"

    @pytest.mark.asyncio
    async def test_returns_snapshot(self, make_client, tracker) -> None:
        """Should serialize the tracked job."""
        job_id, _ = tracker.create_job(["a.pdf", "b.pdf"])
        tracker.mark_processing(job_id)
        tracker.update_file_progress(job_id, 1, "analyze", "Analyzed 2/4 pages", 45, 100)

        async with make_client() as client:
            response = await client.get(f"/api/v1/documents/jobs/{job_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["jobId"] == job_id
        assert body["status"] == "processing"
        assert body["files"][1]["step"] == "analyze"
        assert body["files"][1]["percent"] == 45
        assert "createdAt" in body


class TestHealth:
    """Test health endpoints."""

    @pytest.mark.asyncio
    async def test_health(self, make_client) -> None:
        """Should report healthy."""
        async with make_client() as client:
            response = await client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_ai_health_degraded_without_keys(self) -> None:
        """Should report degraded when credentials are missing."""
        app = create_app()
        settings = Settings(vision=VisionSettings(api_key=""), synthesis=SynthesisSettings(google_api_key=""))
        app.dependency_overrides[get_settings_dependency] = lambda: settings

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/api/v1/health/ai")

        assert response.json()["status"] == "degraded"
