from dataclasses import dataclass

from clinicflow.core.domain.constants import SYSTEM_SETTINGS_ID
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class SystemSettingsEntity(EntityMixin):
    """Linha única com nome de exibição e logo do sistema."""
    id: str = SYSTEM_SETTINGS_ID
    system_name: str = "ClinicFlow"
    logo_url: str | None = None
