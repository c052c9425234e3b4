from dataclasses import dataclass
from datetime import date, datetime, time

from clinicflow.core.domain.constants import EventModality, RegistrationStatus
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ClinicEventEntity(EntityMixin):
    id: str
    name: str
    date: date
    time: time
    modality: EventModality
    speaker: str = ""
    speaker_bio: str = ""
    summary: str = ""
    location: str | None = None
    link: str | None = None
    spots: int | None = None          # None/0 ⇒ vagas ilimitadas
    requires_registration: bool = False
    registration_deadline_date: date | None = None
    registration_deadline_time: time | None = None


@dataclass(slots=True)
class EventRegistrationEntity(EntityMixin):
    id: str
    event_id: str
    participant_name: str
    participant_email: str
    registration_date: datetime
    status: RegistrationStatus = "CONFIRMED"
    attended: bool | None = None

    @property
    def is_confirmed(self) -> bool:
        return self.status == "CONFIRMED"
