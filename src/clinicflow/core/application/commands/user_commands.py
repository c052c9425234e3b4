from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.user_dto import CreateUserDTO, UpdateOwnProfileDTO, UpdateUserDTO


@dataclass(frozen=True)
class ProvisionUserCommand(CommandDTO):
    """Cria a identidade (senha temporária) e o perfil do profissional."""
    payload: CreateUserDTO

@dataclass(frozen=True)
class UpdateUserCommand(CommandDTO):
    id: str
    payload: UpdateUserDTO

@dataclass(frozen=True)
class UpdateOwnProfileCommand(CommandDTO):
    id: str
    payload: UpdateOwnProfileDTO

@dataclass(frozen=True)
class ToggleUserStatusCommand(CommandDTO):
    id: str

@dataclass(frozen=True)
class SeedAdminCommand(CommandDTO):
    """Provisiona (ou promove) explicitamente o primeiro administrador."""
    email: str
    name: str
