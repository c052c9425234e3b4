from clinicflow.adapters.api_clients.store_client import RemoteStoreClient
from clinicflow.core.domain.constants import SYSTEM_SETTINGS_ID
from clinicflow.core.domain.entities.system_settings_entity import SystemSettingsEntity
from clinicflow.core.domain.repositories.system_settings_repository import SystemSettingsRepository


class SystemSettingsRepoImpl(SystemSettingsRepository):
    collection = "system_settings"

    def __init__(self, client: RemoteStoreClient):
        self.client = client

    def get(self) -> SystemSettingsEntity | None:
        rows = self.client.select_eq(self.collection, "id", SYSTEM_SETTINGS_ID)
        return SystemSettingsEntity.from_row(rows[0]) if rows else None

    def upsert(self, entity: SystemSettingsEntity) -> None:
        self.client.upsert(self.collection, entity.to_row())
