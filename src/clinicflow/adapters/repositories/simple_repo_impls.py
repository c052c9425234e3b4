"""Coleções sem consultas próprias: só o CRUD comum."""
from clinicflow.adapters.repositories.collection_repo_impl import RemoteCollectionRepoImpl
from clinicflow.core.domain.entities.document_entity import DocumentEntity
from clinicflow.core.domain.entities.inventory_entity import InventoryItemEntity, LoanEntity
from clinicflow.core.domain.entities.patient_entity import PatientEntity
from clinicflow.core.domain.entities.payment_entity import PaymentEntity
from clinicflow.core.domain.entities.room_entity import RoomEntity
from clinicflow.core.domain.repositories.entity_repositories import (
    DocumentRepository,
    InventoryRepository,
    LoanRepository,
    PatientRepository,
    PaymentRepository,
    RoomRepository,
)


class RoomRepoImpl(RemoteCollectionRepoImpl[RoomEntity], RoomRepository):
    collection = "rooms"
    entity_cls = RoomEntity


class InventoryRepoImpl(RemoteCollectionRepoImpl[InventoryItemEntity], InventoryRepository):
    collection = "inventory"
    entity_cls = InventoryItemEntity


class LoanRepoImpl(RemoteCollectionRepoImpl[LoanEntity], LoanRepository):
    collection = "loans"
    entity_cls = LoanEntity


class PaymentRepoImpl(RemoteCollectionRepoImpl[PaymentEntity], PaymentRepository):
    collection = "payments"
    entity_cls = PaymentEntity


class PatientRepoImpl(RemoteCollectionRepoImpl[PatientEntity], PatientRepository):
    collection = "patients"
    entity_cls = PatientEntity


class DocumentRepoImpl(RemoteCollectionRepoImpl[DocumentEntity], DocumentRepository):
    collection = "documents"
    entity_cls = DocumentEntity
