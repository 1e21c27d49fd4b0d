from fastapi import APIRouter

from ngo_reports.api.v1.endpoints import dashboard, jobs, reports

api_router = APIRouter()

api_router.include_router(reports.router, tags=["reports"])
api_router.include_router(jobs.router, tags=["jobs"])
api_router.include_router(dashboard.router, tags=["dashboard"])
