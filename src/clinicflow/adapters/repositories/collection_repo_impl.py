from collections.abc import Mapping
from typing import Any, Generic, TypeVar

import structlog
from pydantic import ValidationError

from clinicflow.adapters.api_clients.store_client import RemoteStoreClient
from clinicflow.core.domain.entities._base import to_wire_row

E = TypeVar("E")

logger = structlog.get_logger(__name__)


class RemoteCollectionRepoImpl(Generic[E]):
    """
    Implementação comum das portas de coleção sobre o RemoteStoreClient.
    Subclasses definem `collection` (nome da tabela) e `entity_cls`.
    """

    collection: str
    entity_cls: type[E]

    def __init__(self, client: RemoteStoreClient):
        self.client = client

    def all(self) -> list[E]:
        items = []
        for row in self.client.select_all(self.collection):
            try:
                items.append(self.entity_cls.from_row(row))
            except (ValidationError, ValueError) as exc:
                logger.warning("repo.invalid_row", collection=self.collection, row_id=row.get("id"), error=str(exc))
        return items

    def add(self, entity: E) -> E:
        row = self.client.insert(self.collection, entity.to_row())
        return self.entity_cls.from_row(row)

    def update(self, entity_id: str, changes: Mapping[str, Any]) -> None:
        self.client.update_by_id(self.collection, entity_id, to_wire_row(dict(changes)))

    def save(self, entity: E) -> None:
        row = entity.to_row()
        row.pop("id", None)
        self.client.update_by_id(self.collection, entity.id, row)

    def delete(self, entity_id: str) -> None:
        self.client.delete_by_id(self.collection, entity_id)
