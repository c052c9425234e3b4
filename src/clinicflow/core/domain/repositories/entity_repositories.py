"""Portas por entidade: cada coleção tem sua interface própria."""
from abc import abstractmethod

from clinicflow.core.domain.entities.allocation_entity import AllocationEntity
from clinicflow.core.domain.entities.document_entity import DocumentEntity
from clinicflow.core.domain.entities.event_entity import ClinicEventEntity, EventRegistrationEntity
from clinicflow.core.domain.entities.financial_entity import FinancialCategoryEntity, FinancialTransactionEntity
from clinicflow.core.domain.entities.inventory_entity import InventoryItemEntity, LoanEntity
from clinicflow.core.domain.entities.patient_entity import PatientEntity
from clinicflow.core.domain.entities.payment_entity import PaymentEntity
from clinicflow.core.domain.entities.room_entity import RoomEntity
from clinicflow.core.domain.entities.user_entity import UserEntity
from clinicflow.core.domain.repositories.collection_repository import CollectionRepository


class UserRepository(CollectionRepository[UserEntity]):
    @abstractmethod
    def find_by_email(self, email: str) -> UserEntity | None:
        """Retorna o usuário com o e-mail exato, ou None."""
        ...


class RoomRepository(CollectionRepository[RoomEntity]):
    pass


class AllocationRepository(CollectionRepository[AllocationEntity]):
    @abstractmethod
    def delete_by_room(self, room_id: str) -> None:
        """Remove todas as alocações da sala (cascata de exclusão)."""
        ...


class InventoryRepository(CollectionRepository[InventoryItemEntity]):
    pass


class LoanRepository(CollectionRepository[LoanEntity]):
    pass


class PaymentRepository(CollectionRepository[PaymentEntity]):
    pass


class PatientRepository(CollectionRepository[PatientEntity]):
    pass


class EventRepository(CollectionRepository[ClinicEventEntity]):
    pass


class RegistrationRepository(CollectionRepository[EventRegistrationEntity]):
    @abstractmethod
    def delete_by_event(self, event_id: str) -> None:
        """Remove as inscrições do evento (cascata de exclusão)."""
        ...


class DocumentRepository(CollectionRepository[DocumentEntity]):
    pass


class FinancialTransactionRepository(CollectionRepository[FinancialTransactionEntity]):
    @abstractmethod
    def relabel_category(self, old_name: str, new_name: str, type_: str | None = None) -> None:
        """
        Troca `category` de old_name para new_name em todas as transações,
        opcionalmente restrito ao tipo (INCOME/EXPENSE).
        """
        ...


class FinancialCategoryRepository(CollectionRepository[FinancialCategoryEntity]):
    pass
