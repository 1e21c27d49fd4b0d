from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile, status

from ngo_reports.api.deps import get_job_repository, get_report_repository
from ngo_reports.core.config import settings
from ngo_reports.models.job import JobStatus
from ngo_reports.schemas.report import ReportIn, ReportOut, UploadAccepted
from ngo_reports.services.ingest.jobs import JobRepository, generate_job_id
from ngo_reports.services.ingest.pipeline import process_csv
from ngo_reports.services.ingest.reports import ReportRepository
from ngo_reports.services.ingest.uploads import (
    UploadTooLargeError,
    cleanup_file,
    is_csv_filename,
    save_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/report", response_model=ReportOut)
def create_report(
    payload: ReportIn,
    reports: ReportRepository = Depends(get_report_repository),
) -> ReportOut:
    report = reports.upsert(payload.model_dump())
    return ReportOut.model_validate(report)


@router.post("/reports/upload", response_model=UploadAccepted, status_code=status.HTTP_202_ACCEPTED)
def upload_reports_csv(
    background_tasks: BackgroundTasks,
    file: UploadFile | None = File(default=None),
    jobs: JobRepository = Depends(get_job_repository),
    reports: ReportRepository = Depends(get_report_repository),
) -> UploadAccepted:
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if not is_csv_filename(file.filename):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only CSV files allowed")

    job_id = generate_job_id()
    try:
        saved_path = save_upload(job_id, file.file, settings.UPLOAD_DIR, settings.max_upload_bytes)
    except UploadTooLargeError as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc

    try:
        job = jobs.create(job_id)
    except Exception:
        cleanup_file(saved_path)
        raise

    # the task handle is not kept: clients follow the job record instead
    background_tasks.add_task(process_csv, saved_path, job.job_id, jobs=jobs, reports=reports)
    logger.info("upload_accepted job_id=%s filename=%s", job.job_id, file.filename)

    return UploadAccepted(
        job_id=job.job_id,
        status=JobStatus.PENDING.value,
        message="File uploaded successfully. Processing started.",
    )
