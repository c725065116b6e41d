"""
Upload job API endpoints.

Routes: GET /documents/jobs/{job_id}

Dependencies: flashai.core.job_tracker, flashai.models.job
System role: Job status HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, status

from flashai.api.deps import get_job_tracker
from flashai.core.job_tracker import JobTracker
from flashai.models.job import UploadJob

router = APIRouter(prefix="/documents/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=UploadJob)
async def get_job_status(
    job_id: str,
    job_tracker: JobTracker = Depends(get_job_tracker),
) -> UploadJob:
    """
    Get job status and per-file progress for frontend polling.

    Frontend should poll this endpoint every 1-2 seconds while the job is
    pending or processing.

    Args:
        job_id: Job ID returned by POST /documents/jobs
        job_tracker: Injected JobTracker

    Returns:
        UploadJob: Snapshot with status, files (step, message, percent) and results

    Raises:
        HTTPException(404): Job not found

    Example Response:
        {
            "jobId": "5b0c1b8e-3f2a-4f53-9d5e-0f8e2b1c9a11",
            "status": "processing",
            "files": [
                {"index": 0, "name": "midterm.pdf", "status": "processing",
                 "step": "analyze", "message": "Analyzed 8/12 pages",
                 "current": 56, "total": 100, "percent": 56}
            ],
            "results": []
        }
    """
    job = job_tracker.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="job not found")
    return job
