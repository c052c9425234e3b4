import secrets
import string
from dataclasses import replace

import structlog

from clinicflow.core.application.commands.user_commands import (
    ProvisionUserCommand,
    SeedAdminCommand,
    ToggleUserStatusCommand,
    UpdateOwnProfileCommand,
    UpdateUserCommand,
)
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.dtos.user_dto import CreateUserDTO, ProvisionedUser
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.entities.user_entity import UserEntity
from clinicflow.core.domain.exceptions import UniqueViolationError
from clinicflow.core.domain.repositories.entity_repositories import UserRepository
from clinicflow.core.domain.services.identity_provider import SignUpProvider

logger = structlog.get_logger(__name__)

_PASSWORD_ALPHABET = string.ascii_letters + string.digits
TEMP_PASSWORD_LENGTH = 12


def generate_temporary_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


class UserProvisioner:
    """
    Cria a identidade pelo cliente de cadastro (privilégio limitado, não
    troca a sessão do administrador) e grava o perfil com o id emitido.
    """

    def __init__(self, repo: UserRepository, signup: SignUpProvider):
        self.repo = repo
        self.signup = signup

    def provision(self, payload: CreateUserDTO) -> ProvisionedUser:
        password = generate_temporary_password()
        # falha aqui ⇒ nada foi escrito
        user_id = self.signup.sign_up(payload.email, password)
        logger.info("user.identity_created", user_id=user_id)

        entity = UserEntity(id=user_id, is_active=True, **payload.model_dump())
        try:
            self.repo.add(entity)
        except UniqueViolationError:
            # um gatilho do backend pode já ter criado o perfil
            logger.info("user.profile_exists", user_id=user_id)
            self.repo.save(entity)
        return ProvisionedUser(user=entity, temporary_password=password)


class ProvisionUserHandler(CommandHandler[ProvisionUserCommand]):
    def __init__(self, provisioner: UserProvisioner):
        self.provisioner = provisioner

    def handle(self, command: ProvisionUserCommand) -> ProvisionedUser:
        return self.provisioner.provision(command.payload)


class SeedAdminHandler(CommandHandler[SeedAdminCommand]):
    """Promove o perfil existente ou provisiona um novo administrador."""

    def __init__(self, repo: UserRepository, provisioner: UserProvisioner):
        self.repo = repo
        self.provisioner = provisioner

    def handle(self, command: SeedAdminCommand) -> ProvisionedUser | UserEntity:
        existing = self.repo.find_by_email(command.email)
        if existing is not None:
            self.repo.update(existing.id, {"role": "ADMIN", "is_active": True})
            logger.info("user.admin_promoted", user_id=existing.id)
            return replace(existing, role="ADMIN", is_active=True)
        payload = CreateUserDTO(name=command.name, email=command.email, role="ADMIN")
        return self.provisioner.provision(payload)


class UpdateUserHandler(CommandHandler[UpdateUserCommand]):
    def __init__(self, repo: UserRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdateUserCommand) -> UserEntity:
        current = self.cache.snapshot.find("users", command.id)
        changes = command.payload.model_dump(exclude_unset=True)
        self.repo.update(command.id, changes)
        return replace(current, **changes)


class UpdateOwnProfileHandler(CommandHandler[UpdateOwnProfileCommand]):
    """Só grava os campos enviados; papel, e-mail e status ficam como estão."""

    def __init__(self, repo: UserRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdateOwnProfileCommand) -> UserEntity:
        current = self.cache.snapshot.find("users", command.id)
        changes = command.payload.model_dump(exclude_unset=True)
        self.repo.update(command.id, changes)
        return replace(current, **changes)


class ToggleUserStatusHandler(CommandHandler[ToggleUserStatusCommand]):
    def __init__(self, repo: UserRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: ToggleUserStatusCommand) -> bool:
        user = self.cache.snapshot.find("users", command.id)
        is_active = not user.is_active
        self.repo.update(user.id, {"is_active": is_active})
        return is_active
