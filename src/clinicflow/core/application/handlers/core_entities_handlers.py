import uuid
from dataclasses import replace

# Commands
from clinicflow.core.application.commands.document_commands import CreateDocumentCommand, DeleteDocumentCommand
from clinicflow.core.application.commands.patient_commands import CreatePatientCommand, DeletePatientCommand, UpdatePatientCommand
from clinicflow.core.application.commands.room_commands import CreateRoomCommand, DeleteRoomCommand, UpdateRoomCommand
from clinicflow.core.application.commands.settings_commands import UpdateSystemSettingsCommand
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.services.cascade import run_steps
from clinicflow.core.application.services.state_cache import AggregateStateCache

# Entities
from clinicflow.core.domain.entities.document_entity import DocumentEntity
from clinicflow.core.domain.entities.patient_entity import PatientEntity
from clinicflow.core.domain.entities.room_entity import RoomEntity
from clinicflow.core.domain.entities.system_settings_entity import SystemSettingsEntity

# Repositories
from clinicflow.core.domain.repositories.entity_repositories import (
    AllocationRepository,
    DocumentRepository,
    PatientRepository,
    RoomRepository,
)
from clinicflow.core.domain.repositories.system_settings_repository import SystemSettingsRepository
from clinicflow.core.domain.services.clock import Clock, utc_now

# ——— ROOM ————————————————————————————————————————————————

class CreateRoomHandler(CommandHandler[CreateRoomCommand]):
    def __init__(self, repo: RoomRepository):
        self.repo = repo

    def handle(self, command: CreateRoomCommand) -> RoomEntity:
        data = command.payload.model_dump()
        data['id'] = str(uuid.uuid4())
        entity = RoomEntity.from_dict(data)
        return self.repo.add(entity)

class UpdateRoomHandler(CommandHandler[UpdateRoomCommand]):
    def __init__(self, repo: RoomRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdateRoomCommand) -> RoomEntity:
        current = self.cache.snapshot.find("rooms", command.id)
        changes = command.payload.model_dump(exclude_unset=True)
        self.repo.update(command.id, changes)
        return replace(current, **changes)

class DeleteRoomHandler(CommandHandler[DeleteRoomCommand]):
    def __init__(self, repo: RoomRepository, allocation_repo: AllocationRepository):
        self.repo = repo
        self.allocation_repo = allocation_repo

    def handle(self, command: DeleteRoomCommand) -> None:
        run_steps(
            "delete_room",
            [
                ("delete_allocations", lambda: self.allocation_repo.delete_by_room(command.id)),
                ("delete_room", lambda: self.repo.delete(command.id)),
            ],
        )


# ——— PATIENT ——————————————————————————————————————————————

class CreatePatientHandler(CommandHandler[CreatePatientCommand]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, command: CreatePatientCommand) -> PatientEntity:
        data = command.payload.model_dump()
        data['id'] = str(uuid.uuid4())
        entity = PatientEntity.from_dict(data)
        return self.repo.add(entity)

class UpdatePatientHandler(CommandHandler[UpdatePatientCommand]):
    def __init__(self, repo: PatientRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdatePatientCommand) -> PatientEntity:
        current = self.cache.snapshot.find("patients", command.id)
        changes = command.payload.model_dump(exclude_unset=True)
        self.repo.update(command.id, changes)
        return replace(current, **changes)

class DeletePatientHandler(CommandHandler[DeletePatientCommand]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, command: DeletePatientCommand) -> None:
        self.repo.delete(command.id)


# ——— DOCUMENT —————————————————————————————————————————————

class CreateDocumentHandler(CommandHandler[CreateDocumentCommand]):
    def __init__(self, repo: DocumentRepository, clock: Clock = utc_now):
        self.repo = repo
        self.clock = clock

    def handle(self, command: CreateDocumentCommand) -> DocumentEntity:
        data = command.payload.model_dump()
        data['id'] = str(uuid.uuid4())
        data['created_at'] = self.clock()
        entity = DocumentEntity.from_dict(data)
        return self.repo.add(entity)

class DeleteDocumentHandler(CommandHandler[DeleteDocumentCommand]):
    def __init__(self, repo: DocumentRepository):
        self.repo = repo

    def handle(self, command: DeleteDocumentCommand) -> None:
        self.repo.delete(command.id)


# ——— SYSTEM SETTINGS ———————————————————————————————————————

class UpdateSystemSettingsHandler(CommandHandler[UpdateSystemSettingsCommand]):
    def __init__(self, repo: SystemSettingsRepository):
        self.repo = repo

    def handle(self, command: UpdateSystemSettingsCommand) -> SystemSettingsEntity:
        entity = SystemSettingsEntity(**command.payload.model_dump())
        self.repo.upsert(entity)
        return entity
