import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENV", "dev")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import ngo_reports.models  # noqa: E402,F401
from ngo_reports.core.config import settings  # noqa: E402
from ngo_reports.db.base import Base  # noqa: E402
from ngo_reports.db.session import SessionLocal, engine  # noqa: E402
from ngo_reports.services.ingest.jobs import JobRepository  # noqa: E402
from ngo_reports.services.ingest.reports import ReportRepository  # noqa: E402

from main import app  # noqa: E402

CSV_HEADER = "ngo_id,month,people_helped,events_conducted,funds_utilized"


@pytest.fixture()
def session_factory():
    Base.metadata.create_all(bind=engine)
    yield SessionLocal
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def jobs(session_factory) -> JobRepository:
    return JobRepository(session_factory)


@pytest.fixture()
def reports(session_factory) -> ReportRepository:
    return ReportRepository(session_factory)


@pytest.fixture()
def upload_dir(tmp_path, monkeypatch) -> Path:
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", target)
    return target


@pytest.fixture()
def client(session_factory, upload_dir):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def write_csv(tmp_path):
    """Write CSV lines (header included) to a temp file and return its path."""

    def _write(lines, name="upload.csv", encoding="utf-8") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding=encoding)
        return path

    return _write


@pytest.fixture()
def make_rows():
    """Valid data lines: NGO0001..NGO<count> for one month."""

    def _rows(count: int, month: str = "2025-10", prefix: str = "NGO") -> list[str]:
        return [f"{prefix}{i:04d},{month},{i},{i % 7},{i * 10}" for i in range(1, count + 1)]

    return _rows
