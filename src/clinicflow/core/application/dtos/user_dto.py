from dataclasses import dataclass, field

from pydantic import BaseModel, EmailStr

from clinicflow.core.domain.constants import Role
from clinicflow.core.domain.entities.user_entity import UserEntity


class CreateUserDTO(BaseModel):
    name: str
    email: EmailStr
    role: Role = "PROFESSIONAL"
    specialty: str | None = None
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None


class UpdateUserDTO(BaseModel):
    """Edição pelo administrador (pode trocar o papel)."""
    name: str
    email: EmailStr
    role: Role
    is_active: bool = True
    specialty: str | None = None
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None


class UpdateOwnProfileDTO(BaseModel):
    """Edição do próprio perfil: papel e status não são aceitos."""
    name: str
    specialty: str | None = None
    phone: str | None = None
    address: str | None = None
    photo_url: str | None = None


@dataclass(frozen=True)
class ProvisionedUser:
    """Resultado do provisionamento; a senha temporária nunca é gravada."""
    user: UserEntity
    temporary_password: str = field(repr=False)
