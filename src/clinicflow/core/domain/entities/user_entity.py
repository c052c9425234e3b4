from dataclasses import dataclass

from clinicflow.core.domain.constants import Role
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class UserEntity(EntityMixin):
    id: str
    name: str
    email: str
    role: Role = "PROFESSIONAL"
    is_active: bool = True
    specialty: str | None = None
    photo_url: str | None = None
    address: str | None = None
    phone: str | None = None

    def __post_init__(self):
        if self.role not in ("ADMIN", "PROFESSIONAL"):
            raise ValueError(f"Role inválida: {self.role}")

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"
