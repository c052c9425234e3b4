from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.room_dto import RoomDTO


@dataclass(frozen=True)
class CreateRoomCommand(CommandDTO):
    payload: RoomDTO

@dataclass(frozen=True)
class UpdateRoomCommand(CommandDTO):
    id: str
    payload: RoomDTO

@dataclass(frozen=True)
class DeleteRoomCommand(CommandDTO):
    """Remove a sala e, em cascata, suas alocações."""
    id: str
