from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.event_dto import ClinicEventDTO, RegistrationDTO


@dataclass(frozen=True)
class CreateEventCommand(CommandDTO):
    payload: ClinicEventDTO

@dataclass(frozen=True)
class UpdateEventCommand(CommandDTO):
    id: str
    payload: ClinicEventDTO

@dataclass(frozen=True)
class DeleteEventCommand(CommandDTO):
    """Remove o evento e, em cascata, suas inscrições."""
    id: str

@dataclass(frozen=True)
class RegisterForEventCommand(CommandDTO):
    event_id: str
    payload: RegistrationDTO

@dataclass(frozen=True)
class ToggleRegistrationStatusCommand(CommandDTO):
    """CONFIRMED ↔ REJECTED."""
    id: str

@dataclass(frozen=True)
class ToggleAttendanceCommand(CommandDTO):
    id: str
