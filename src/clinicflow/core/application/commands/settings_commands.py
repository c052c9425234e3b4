from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.settings_dto import SystemSettingsDTO


@dataclass(frozen=True)
class UpdateSystemSettingsCommand(CommandDTO):
    payload: SystemSettingsDTO
