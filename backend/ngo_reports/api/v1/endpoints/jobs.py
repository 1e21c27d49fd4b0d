from fastapi import APIRouter, Depends, HTTPException, status

from ngo_reports.api.deps import get_job_repository
from ngo_reports.schemas.job import JobOut
from ngo_reports.services.ingest.jobs import JobRepository

router = APIRouter()


@router.get("/job-status/{job_id}", response_model=JobOut)
def get_job_status(
    job_id: str,
    jobs: JobRepository = Depends(get_job_repository),
) -> JobOut:
    job = jobs.get(job_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )
    return JobOut.model_validate(job)
