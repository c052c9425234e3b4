from dataclasses import dataclass
from datetime import date
from typing import Literal

from clinicflow.core.application.cqrs import QueryDTO

OccupancyStatus = Literal["ALL", "OCCUPIED", "AVAILABLE"]


@dataclass(frozen=True)
class GetAdminDashboardQuery(QueryDTO):
    today: date | None = None         # None ⇒ data local de hoje

@dataclass(frozen=True)
class GetOccupancyMatrixQuery(QueryDTO):
    room_id: str | None = None
    day: str | None = None
    shift: str | None = None
    status: OccupancyStatus = "ALL"

@dataclass(frozen=True)
class GetProfessionalOverviewQuery(QueryDTO):
    user_id: str
