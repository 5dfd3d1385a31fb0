from typing import List

from pydantic import Field

from schemas.common import CamelModel
from schemas.report import ReportRead
from schemas.sos import SOSRead
from schemas.user import UserRead


class RecentActivities(CamelModel):
    recent_reports: List[ReportRead]
    recent_sos_requests: List[SOSRead] = Field(..., alias="recentSOSRequests")
    recent_users: List[UserRead]
