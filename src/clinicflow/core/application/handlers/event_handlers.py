import uuid
from dataclasses import replace

import structlog

from clinicflow.core.application.commands.event_commands import (
    CreateEventCommand,
    DeleteEventCommand,
    RegisterForEventCommand,
    ToggleAttendanceCommand,
    ToggleRegistrationStatusCommand,
    UpdateEventCommand,
)
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.services.cascade import run_steps
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.entities.event_entity import ClinicEventEntity, EventRegistrationEntity
from clinicflow.core.domain.exceptions import InvalidTransitionError
from clinicflow.core.domain.repositories.entity_repositories import EventRepository, RegistrationRepository
from clinicflow.core.domain.services.clock import Clock, utc_now
from clinicflow.core.domain.services.registration_policy import ensure_can_register

logger = structlog.get_logger(__name__)

# ——— EVENT ————————————————————————————————————————————————

class CreateEventHandler(CommandHandler[CreateEventCommand]):
    def __init__(self, repo: EventRepository):
        self.repo = repo

    def handle(self, command: CreateEventCommand) -> ClinicEventEntity:
        data = command.payload.model_dump()
        data['id'] = str(uuid.uuid4())
        return self.repo.add(ClinicEventEntity.from_dict(data))

class UpdateEventHandler(CommandHandler[UpdateEventCommand]):
    def __init__(self, repo: EventRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdateEventCommand) -> ClinicEventEntity:
        current = self.cache.snapshot.find("events", command.id)
        payload = command.payload
        changes = payload.model_dump(exclude_unset=True)
        # modalidade, local e link foram validados juntos: vão sempre juntos
        changes.update(modality=payload.modality, location=payload.location, link=payload.link)
        self.repo.update(command.id, changes)
        return replace(current, **changes)

class DeleteEventHandler(CommandHandler[DeleteEventCommand]):
    def __init__(self, repo: EventRepository, registration_repo: RegistrationRepository):
        self.repo = repo
        self.registration_repo = registration_repo

    def handle(self, command: DeleteEventCommand) -> None:
        run_steps(
            "delete_event",
            [
                ("delete_registrations", lambda: self.registration_repo.delete_by_event(command.id)),
                ("delete_event", lambda: self.repo.delete(command.id)),
            ],
        )


# ——— REGISTRATION ——————————————————————————————————————————

class RegisterForEventHandler(CommandHandler[RegisterForEventCommand]):
    """
    Capacidade, prazo e duplicidade são checados contra o snapshot; duas
    inscrições concorrentes podem ultrapassar `spots`.
    """

    def __init__(self, repo: RegistrationRepository, cache: AggregateStateCache, clock: Clock = utc_now):
        self.repo = repo
        self.cache = cache
        self.clock = clock

    def handle(self, command: RegisterForEventCommand) -> EventRegistrationEntity:
        snap = self.cache.snapshot
        event = snap.find("events", command.event_id)
        p = command.payload
        now = self.clock()
        ensure_can_register(event, snap.registrations, p.participant_email, now)

        entity = EventRegistrationEntity(
            id=str(uuid.uuid4()),
            event_id=event.id,
            participant_name=p.participant_name,
            participant_email=p.participant_email,
            registration_date=now,
            status="CONFIRMED",
        )
        logger.info("registration.create", event_id=event.id, email=p.participant_email)
        return self.repo.add(entity)

class ToggleRegistrationStatusHandler(CommandHandler[ToggleRegistrationStatusCommand]):
    def __init__(self, repo: RegistrationRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: ToggleRegistrationStatusCommand) -> str:
        reg = self.cache.snapshot.find("registrations", command.id)
        status = "REJECTED" if reg.is_confirmed else "CONFIRMED"
        self.repo.update(reg.id, {"status": status})
        return status

class ToggleAttendanceHandler(CommandHandler[ToggleAttendanceCommand]):
    def __init__(self, repo: RegistrationRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: ToggleAttendanceCommand) -> bool:
        reg = self.cache.snapshot.find("registrations", command.id)
        if not reg.is_confirmed:
            raise InvalidTransitionError("Presença só pode ser marcada em inscrição confirmada.")
        attended = not bool(reg.attended)
        self.repo.update(reg.id, {"attended": attended})
        return attended
