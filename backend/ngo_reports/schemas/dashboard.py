from typing import Optional

from pydantic import BaseModel


class DashboardOut(BaseModel):
    month: str
    total_ngos_reporting: int = 0
    total_people_helped: int = 0
    total_events_conducted: int = 0
    total_funds_utilized: int = 0
    message: Optional[str] = None
