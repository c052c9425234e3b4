from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.allocation_dto import AllocationDTO


@dataclass(frozen=True)
class CreateAllocationCommand(CommandDTO):
    payload: AllocationDTO

@dataclass(frozen=True)
class DeleteAllocationCommand(CommandDTO):
    id: str
