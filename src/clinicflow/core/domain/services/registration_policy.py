from collections.abc import Iterable
from datetime import datetime, time

from clinicflow.core.domain.entities.event_entity import ClinicEventEntity, EventRegistrationEntity
from clinicflow.core.domain.exceptions import (
    AlreadyRegisteredError,
    EventFullError,
    RegistrationClosedError,
    RegistrationNotRequiredError,
)

DEFAULT_DEADLINE_TIME = time(23, 59)


def registration_deadline(event: ClinicEventEntity) -> datetime | None:
    """
    Prazo de inscrição no fuso local (data + hora, hora padrão 23:59).
    None quando o evento não define data limite.
    """
    if event.registration_deadline_date is None:
        return None
    at = event.registration_deadline_time or DEFAULT_DEADLINE_TIME
    return datetime.combine(event.registration_deadline_date, at).astimezone()


def confirmed_registrations(
    registrations: Iterable[EventRegistrationEntity], event_id: str
) -> list[EventRegistrationEntity]:
    return [r for r in registrations if r.event_id == event_id and r.is_confirmed]


def ensure_can_register(
    event: ClinicEventEntity,
    registrations: Iterable[EventRegistrationEntity],
    email: str,
    now: datetime,
) -> None:
    """
    Verificação consultiva contra o snapshot: duas inscrições simultâneas
    podem ambas passar.
    """
    if not event.requires_registration:
        raise RegistrationNotRequiredError(f"O evento '{event.name}' não exige inscrição.")

    confirmed = confirmed_registrations(registrations, event.id)
    if any(r.participant_email == email for r in confirmed):
        raise AlreadyRegisteredError(f"{email} já está inscrito em '{event.name}'.")

    deadline = registration_deadline(event)
    if deadline is not None and now > deadline:
        raise RegistrationClosedError(f"Inscrições encerradas em {deadline.isoformat()}.")

    # 0 ou None ⇒ vagas ilimitadas
    if event.spots and len(confirmed) >= event.spots:
        raise EventFullError(f"Evento '{event.name}' lotado ({event.spots} vagas).")
