from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, sessionmaker

from ngo_reports.models.job import TERMINAL_STATUSES, Job, JobStatus

logger = logging.getLogger(__name__)

_ALLOWED_FIELDS = {"status", "total", "processed", "error_message"}

# target status -> statuses it may be reached from
_TRANSITIONS = {
    JobStatus.PROCESSING: {JobStatus.PENDING},
    JobStatus.SUCCESS: {JobStatus.PROCESSING},
    JobStatus.FAILED: {JobStatus.PENDING, JobStatus.PROCESSING},
}

# matches the jobs.error_message column
MAX_ERROR_LENGTH = 2000


def generate_job_id() -> str:
    return f"JOB_{uuid.uuid4()}"


def _truncate(message: str, limit: int = MAX_ERROR_LENGTH) -> str:
    if len(message) <= limit:
        return message
    return message[: limit - 3] + "..."


class JobRepository:
    """
    Job record store: point lookup and guarded in-place updates.

    Every write is its own short transaction so a polling client sees progress
    as soon as it is recorded. Terminal jobs are never modified and
    ``processed`` never decreases.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create(self, job_id: Optional[str] = None) -> Job:
        job = Job(
            job_id=job_id or generate_job_id(),
            status=JobStatus.PENDING.value,
            total=0,
            processed=0,
        )
        with self._session_factory() as session, session.begin():
            session.add(job)
        logger.info("job_created job_id=%s", job.job_id)
        return self.get(job.job_id)

    def get(self, job_id: str) -> Optional[Job]:
        with self._session_factory() as session:
            return session.scalars(select(Job).where(Job.job_id == job_id)).first()

    def update(self, job_id: str, **fields) -> bool:
        """
        Apply ``fields`` unless the job is terminal, the status change is not
        a legal transition, or ``processed`` would go backwards.
        Returns whether the row was updated.
        """
        values = {k: v for k, v in fields.items() if k in _ALLOWED_FIELDS}
        if not values:
            return False

        stmt = update(Job).where(Job.job_id == job_id)
        if "status" in values:
            target = JobStatus(values["status"])
            values["status"] = target.value
            sources = _TRANSITIONS.get(target, set())
            stmt = stmt.where(Job.status.in_([s.value for s in sources]))
        else:
            stmt = stmt.where(Job.status.not_in([s.value for s in TERMINAL_STATUSES]))
        if "processed" in values:
            stmt = stmt.where(Job.processed <= values["processed"])

        with self._session_factory() as session, session.begin():
            result = session.execute(stmt.values(**values).execution_options(synchronize_session=False))
            updated = result.rowcount > 0

        if not updated:
            logger.warning("job_update_refused job_id=%s fields=%s", job_id, sorted(values))
        return updated

    def mark_processing(self, job_id: str, total: int) -> bool:
        return self.update(job_id, status=JobStatus.PROCESSING, total=total)

    def record_progress(self, job_id: str, processed: int) -> bool:
        return self.update(job_id, processed=processed)

    def mark_success(self, job_id: str) -> bool:
        return self.update(job_id, status=JobStatus.SUCCESS)

    def mark_failed(self, job_id: str, error_message: str) -> bool:
        return self.update(job_id, status=JobStatus.FAILED, error_message=_truncate(error_message))
