from clinicflow.adapters.repositories.collection_repo_impl import RemoteCollectionRepoImpl
from clinicflow.core.domain.entities.allocation_entity import AllocationEntity
from clinicflow.core.domain.repositories.entity_repositories import AllocationRepository


class AllocationRepoImpl(RemoteCollectionRepoImpl[AllocationEntity], AllocationRepository):
    collection = "allocations"
    entity_cls = AllocationEntity

    def delete_by_room(self, room_id: str) -> None:
        self.client.delete_where(self.collection, "roomId", room_id)
