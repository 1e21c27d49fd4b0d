from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ngo_reports.db.base import Base


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({JobStatus.SUCCESS, JobStatus.FAILED})


class Job(Base):
    __tablename__ = "jobs"

    job_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, server_default=JobStatus.PENDING.value, default=JobStatus.PENDING.value, index=True
    )
    total: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
    processed: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
    error_message: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
