from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, TypeVar

E = TypeVar("E")


class CollectionRepository(ABC, Generic[E]):
    """
    Porta para uma coleção (tabela) do backend hospedado.
    Leituras sempre trazem a tabela inteira; o cache agregado é quem filtra.
    """

    collection: str

    @abstractmethod
    def all(self) -> list[E]:
        """Retorna todas as linhas da coleção."""
        ...

    @abstractmethod
    def add(self, entity: E) -> E:
        """Insere a entidade com o id já gerado pelo cliente."""
        ...

    @abstractmethod
    def update(self, entity_id: str, changes: Mapping[str, Any]) -> None:
        """Atualiza campos (snake_case) de uma linha pelo id."""
        ...

    @abstractmethod
    def save(self, entity: E) -> None:
        """Atualiza a linha inteira pelo id da entidade."""
        ...

    @abstractmethod
    def delete(self, entity_id: str) -> None:
        """Remove uma linha pelo id."""
        ...
