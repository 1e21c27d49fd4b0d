from ngo_reports.db.base import Base
from ngo_reports.models.job import Job, JobStatus
from ngo_reports.models.report import Report

__all__ = [
    "Base",
    "Job",
    "JobStatus",
    "Report",
]
