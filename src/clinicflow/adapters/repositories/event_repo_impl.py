from clinicflow.adapters.repositories.collection_repo_impl import RemoteCollectionRepoImpl
from clinicflow.core.domain.entities.event_entity import ClinicEventEntity, EventRegistrationEntity
from clinicflow.core.domain.repositories.entity_repositories import EventRepository, RegistrationRepository


class EventRepoImpl(RemoteCollectionRepoImpl[ClinicEventEntity], EventRepository):
    collection = "events"
    entity_cls = ClinicEventEntity


class RegistrationRepoImpl(RemoteCollectionRepoImpl[EventRegistrationEntity], RegistrationRepository):
    collection = "registrations"
    entity_cls = EventRegistrationEntity

    def delete_by_event(self, event_id: str) -> None:
        self.client.delete_where(self.collection, "eventId", event_id)
