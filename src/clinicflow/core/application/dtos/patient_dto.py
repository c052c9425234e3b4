from pydantic import BaseModel, Field


class PatientDTO(BaseModel):
    professional_id: str
    name: str = Field(min_length=1)
    email: str = ""
    phone: str = ""
    parent_name: str | None = None
    parent_contact: str | None = None
    allocation_id: str | None = None
