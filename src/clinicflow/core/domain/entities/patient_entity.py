from dataclasses import dataclass

from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class PatientEntity(EntityMixin):
    id: str
    professional_id: str
    name: str
    email: str = ""
    phone: str = ""
    parent_name: str | None = None
    parent_contact: str | None = None
    allocation_id: str | None = None   # slot (sala/dia/turno) do atendimento
