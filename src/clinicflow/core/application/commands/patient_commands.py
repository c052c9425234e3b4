from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.patient_dto import PatientDTO


@dataclass(frozen=True)
class CreatePatientCommand(CommandDTO):
    payload: PatientDTO

@dataclass(frozen=True)
class UpdatePatientCommand(CommandDTO):
    id: str
    payload: PatientDTO

@dataclass(frozen=True)
class DeletePatientCommand(CommandDTO):
    id: str
