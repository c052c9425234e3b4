from datetime import date, time

from pydantic import BaseModel, EmailStr, Field, model_validator

from clinicflow.core.domain.constants import EventModality


class ClinicEventDTO(BaseModel):
    name: str = Field(min_length=1)
    date: date
    time: time
    modality: EventModality = "PRESENTIAL"
    location: str | None = None
    link: str | None = None
    speaker: str = ""
    speaker_bio: str = ""
    summary: str = ""
    spots: int | None = Field(default=None, ge=0)
    requires_registration: bool = False
    registration_deadline_date: date | None = None
    registration_deadline_time: time | None = None

    @model_validator(mode="after")
    def _location_matches_modality(self) -> "ClinicEventDTO":
        # presencial ⇒ só local; online ⇒ só link
        if self.modality == "PRESENTIAL":
            if not (self.location or "").strip():
                raise ValueError("Evento presencial exige local.")
            self.link = None
        else:
            if not (self.link or "").strip():
                raise ValueError("Evento online exige link.")
            self.location = None
        return self


class RegistrationDTO(BaseModel):
    participant_name: str = Field(min_length=1)
    participant_email: EmailStr
