from fastapi import APIRouter, Depends, Query

from ngo_reports.api.deps import get_report_repository
from ngo_reports.schemas.dashboard import DashboardOut
from ngo_reports.schemas.report import MONTH_PATTERN
from ngo_reports.services.ingest.reports import ReportRepository

router = APIRouter()


@router.get("/dashboard", response_model=DashboardOut)
def get_dashboard(
    month: str = Query(..., pattern=MONTH_PATTERN, description="YYYY-MM"),
    reports: ReportRepository = Depends(get_report_repository),
) -> DashboardOut:
    summary = reports.monthly_summary(month)
    if summary["total_ngos_reporting"] == 0:
        return DashboardOut(month=month, message="No reports available for this month yet")
    return DashboardOut(**summary)
