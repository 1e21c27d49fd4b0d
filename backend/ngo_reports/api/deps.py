from fastapi import Depends
from sqlalchemy.orm import sessionmaker

from ngo_reports.db.session import get_session_factory
from ngo_reports.services.ingest.jobs import JobRepository
from ngo_reports.services.ingest.reports import ReportRepository


def get_job_repository(session_factory: sessionmaker = Depends(get_session_factory)) -> JobRepository:
    return JobRepository(session_factory)


def get_report_repository(session_factory: sessionmaker = Depends(get_session_factory)) -> ReportRepository:
    return ReportRepository(session_factory)
