import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from ngo_reports.db.base import Base


class Report(Base):
    __tablename__ = "reports"

    __table_args__ = (
        UniqueConstraint("ngo_id", "month", name="uq_reports_ngo_month"),
        Index("ix_reports_month", "month"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    ngo_id: Mapped[str] = mapped_column(String(128), nullable=False)
    month: Mapped[str] = mapped_column(String(7), nullable=False)  # YYYY-MM
    people_helped: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
    events_conducted: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0", default=0)
    funds_utilized: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default="0", default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
