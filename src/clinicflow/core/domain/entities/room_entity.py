from dataclasses import dataclass

from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class RoomEntity(EntityMixin):
    id: str
    name: str
    description: str = ""
