from abc import ABC, abstractmethod

from clinicflow.core.domain.entities.system_settings_entity import SystemSettingsEntity


class SystemSettingsRepository(ABC):
    @abstractmethod
    def get(self) -> SystemSettingsEntity | None:
        """Retorna a linha singleton de configurações, ou None se ausente."""
        ...

    @abstractmethod
    def upsert(self, entity: SystemSettingsEntity) -> None:
        """Cria ou atualiza a linha singleton."""
        ...
