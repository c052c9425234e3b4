from pydantic import BaseModel

from clinicflow.core.domain.constants import DayOfWeek, Shift


class AllocationDTO(BaseModel):
    user_id: str
    room_id: str
    day: DayOfWeek
    shift: Shift
