from dataclasses import dataclass

from clinicflow.core.domain.constants import DAYS_OF_WEEK, SHIFTS, DayOfWeek, Shift
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class AllocationEntity(EntityMixin):
    """Reserva fixa de uma sala para um profissional em um dia/turno."""
    id: str
    user_id: str
    room_id: str
    day: DayOfWeek
    shift: Shift

    def __post_init__(self):
        if self.day not in DAYS_OF_WEEK:
            raise ValueError(f"Dia inválido: {self.day}")
        if self.shift not in SHIFTS:
            raise ValueError(f"Turno inválido: {self.shift}")

    @property
    def slot(self) -> tuple[str, str, str]:
        return (self.room_id, self.day, self.shift)
