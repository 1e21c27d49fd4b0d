from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MONTH_PATTERN = r"^[0-9]{4}-[0-9]{2}$"

# largest values the Integer and BigInteger report columns hold
MAX_COUNT = 2**31 - 1
MAX_FUNDS = 2**63 - 1


class ReportIn(BaseModel):
    """One NGO's metrics for one month, as submitted or as read from a CSV row."""

    ngo_id: str = Field(..., min_length=1, max_length=128)
    month: str = Field(..., pattern=MONTH_PATTERN, description="YYYY-MM")
    people_helped: int = Field(..., ge=0, le=MAX_COUNT)
    events_conducted: int = Field(..., ge=0, le=MAX_COUNT)
    funds_utilized: int = Field(..., ge=0, le=MAX_FUNDS)


class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    ngo_id: str
    month: str
    people_helped: int
    events_conducted: int
    funds_utilized: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UploadAccepted(BaseModel):
    job_id: str
    status: str
    message: str
