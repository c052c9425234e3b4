import uuid

import structlog

from clinicflow.core.application.commands.allocation_commands import CreateAllocationCommand, DeleteAllocationCommand
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.entities.allocation_entity import AllocationEntity
from clinicflow.core.domain.repositories.entity_repositories import AllocationRepository
from clinicflow.core.domain.services.scheduling_policy import ensure_slot_free

logger = structlog.get_logger(__name__)


class CreateAllocationHandler(CommandHandler[CreateAllocationCommand]):
    """
    Reserva sala/dia/turno. A checagem usa o snapshot em cache; uma
    violação de unicidade no servidor chega como UniqueViolationError.
    """

    def __init__(self, repo: AllocationRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: CreateAllocationCommand) -> AllocationEntity:
        p = command.payload
        ensure_slot_free(self.cache.snapshot.allocations, p.room_id, p.day, p.shift)
        entity = AllocationEntity(
            id=str(uuid.uuid4()),
            user_id=p.user_id,
            room_id=p.room_id,
            day=p.day,
            shift=p.shift,
        )
        logger.info("allocation.create", room_id=p.room_id, day=p.day, shift=p.shift)
        return self.repo.add(entity)


class DeleteAllocationHandler(CommandHandler[DeleteAllocationCommand]):
    def __init__(self, repo: AllocationRepository):
        self.repo = repo

    def handle(self, command: DeleteAllocationCommand) -> None:
        self.repo.delete(command.id)
