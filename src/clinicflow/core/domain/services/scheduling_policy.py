from collections.abc import Iterable

from clinicflow.core.domain.entities.allocation_entity import AllocationEntity
from clinicflow.core.domain.exceptions import ScheduleConflictError


def find_conflict(
    allocations: Iterable[AllocationEntity], room_id: str, day: str, shift: str
) -> AllocationEntity | None:
    """Retorna a alocação que já ocupa sala/dia/turno, se houver."""
    return next(
        (a for a in allocations if a.slot == (room_id, day, shift)),
        None,
    )


def ensure_slot_free(
    allocations: Iterable[AllocationEntity], room_id: str, day: str, shift: str
) -> None:
    # o mesmo profissional pode ocupar duas salas no mesmo turno
    if find_conflict(allocations, room_id, day, shift) is not None:
        raise ScheduleConflictError(room_id, day, shift)
