"""
Cache agregado: espelho em memória de todas as tabelas remotas.

Cada `load_all()` relê todas as coleções em paralelo e publica um novo
`CacheSnapshot` imutável. Uma coleção cuja leitura falha mantém o valor
anterior; as demais são substituídas normalmente.
"""
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any

import structlog

from clinicflow.adapters.observability.metrics import (
    CACHE_FETCH_FAILURES,
    CACHE_REFRESH_COUNT,
    CACHE_REFRESH_DURATION,
)
from clinicflow.core.domain.entities.allocation_entity import AllocationEntity
from clinicflow.core.domain.entities.document_entity import DocumentEntity
from clinicflow.core.domain.entities.event_entity import ClinicEventEntity, EventRegistrationEntity
from clinicflow.core.domain.entities.financial_entity import FinancialCategoryEntity, FinancialTransactionEntity
from clinicflow.core.domain.entities.inventory_entity import InventoryItemEntity, LoanEntity
from clinicflow.core.domain.entities.patient_entity import PatientEntity
from clinicflow.core.domain.entities.payment_entity import PaymentEntity
from clinicflow.core.domain.entities.room_entity import RoomEntity
from clinicflow.core.domain.entities.system_settings_entity import SystemSettingsEntity
from clinicflow.core.domain.entities.user_entity import UserEntity
from clinicflow.core.domain.events.events import CacheRefreshedEvent
from clinicflow.core.domain.exceptions import NotFoundError
from clinicflow.core.domain.repositories.entity_repositories import (
    AllocationRepository,
    DocumentRepository,
    EventRepository,
    FinancialCategoryRepository,
    FinancialTransactionRepository,
    InventoryRepository,
    LoanRepository,
    PatientRepository,
    PaymentRepository,
    RegistrationRepository,
    RoomRepository,
    UserRepository,
)
from clinicflow.core.domain.repositories.system_settings_repository import SystemSettingsRepository
from clinicflow.core.domain.services.category_policy import default_categories
from clinicflow.core.domain.services.clock import Clock, utc_now
from clinicflow.core.domain.services.event_dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CacheSnapshot:
    users: tuple[UserEntity, ...] = ()
    rooms: tuple[RoomEntity, ...] = ()
    allocations: tuple[AllocationEntity, ...] = ()
    inventory: tuple[InventoryItemEntity, ...] = ()
    loans: tuple[LoanEntity, ...] = ()
    payments: tuple[PaymentEntity, ...] = ()
    patients: tuple[PatientEntity, ...] = ()
    events: tuple[ClinicEventEntity, ...] = ()
    registrations: tuple[EventRegistrationEntity, ...] = ()
    documents: tuple[DocumentEntity, ...] = ()
    financial_transactions: tuple[FinancialTransactionEntity, ...] = ()
    financial_categories: tuple[FinancialCategoryEntity, ...] = field(
        default_factory=lambda: tuple(default_categories())
    )
    system_settings: SystemSettingsEntity = field(default_factory=SystemSettingsEntity)
    loaded_at: datetime | None = None

    @classmethod
    def collection_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "loaded_at")

    def find(self, collection: str, entity_id: str) -> Any:
        """Busca por id em uma coleção; NotFoundError se ausente."""
        for item in getattr(self, collection):
            if item.id == entity_id:
                return item
        raise NotFoundError(collection, entity_id)


class AggregateStateCache:
    def __init__(  # noqa: PLR0913
        self,
        user_repo: UserRepository,
        room_repo: RoomRepository,
        allocation_repo: AllocationRepository,
        inventory_repo: InventoryRepository,
        loan_repo: LoanRepository,
        payment_repo: PaymentRepository,
        patient_repo: PatientRepository,
        event_repo: EventRepository,
        registration_repo: RegistrationRepository,
        document_repo: DocumentRepository,
        transaction_repo: FinancialTransactionRepository,
        category_repo: FinancialCategoryRepository,
        settings_repo: SystemSettingsRepository,
        dispatcher: EventDispatcher,
        system_name: str = "ClinicFlow",
        max_workers: int = 8,
        clock: Clock = utc_now,
    ):
        self._fetchers: dict[str, Callable[[], Any]] = {
            "users": user_repo.all,
            "rooms": room_repo.all,
            "allocations": allocation_repo.all,
            "inventory": inventory_repo.all,
            "loans": loan_repo.all,
            "payments": payment_repo.all,
            "patients": patient_repo.all,
            "events": event_repo.all,
            "registrations": registration_repo.all,
            "documents": document_repo.all,
            "financial_transactions": transaction_repo.all,
            "financial_categories": category_repo.all,
            "system_settings": settings_repo.get,
        }
        self.dispatcher = dispatcher
        self.system_name = system_name
        self.max_workers = max_workers
        self.clock = clock
        self._lock = threading.Lock()
        self._listeners: list[Callable[[CacheSnapshot], None]] = []
        self._snapshot = CacheSnapshot(
            system_settings=SystemSettingsEntity(system_name=system_name)
        )

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def on_refresh(self, callback: Callable[[CacheSnapshot], None]) -> None:
        """Registra um ouvinte chamado com o snapshot novo após cada recarga."""
        self._listeners.append(callback)

    # ------------------------------------------------------------------
    def load_all(self) -> CacheSnapshot:
        start = time.perf_counter()
        fetched: dict[str, Any] = {}
        failed: list[str] = []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="cache-load") as pool:
            futures = {pool.submit(fetch): name for name, fetch in self._fetchers.items()}
            for fut in as_completed(futures):
                name = futures[fut]
                try:
                    fetched[name] = self._normalize(name, fut.result())
                    logger.debug("cache.fetch_ok", collection=name)
                except Exception as exc:
                    failed.append(name)
                    CACHE_FETCH_FAILURES.labels(name).inc()
                    logger.warning("cache.fetch_failed", collection=name, error=str(exc))

        with self._lock:
            self._snapshot = replace(self._snapshot, **fetched, loaded_at=self.clock())
            snapshot = self._snapshot

        elapsed = time.perf_counter() - start
        CACHE_REFRESH_DURATION.observe(elapsed)
        CACHE_REFRESH_COUNT.labels("partial" if failed else "complete").inc()
        logger.info(
            "cache.replaced",
            loaded=len(fetched),
            failed=sorted(failed),
            duration=f"{elapsed:.3f}s",
        )

        self._notify(snapshot, tuple(sorted(failed)))
        return snapshot

    def _notify(self, snapshot: CacheSnapshot, failed: tuple[str, ...]) -> None:
        # o snapshot já foi trocado; erro de ouvinte não desfaz a recarga
        try:
            self.dispatcher.dispatch(CacheRefreshedEvent(failed_collections=failed))
        except Exception as exc:
            logger.error("cache.event_listener_failed", error=str(exc), exc_info=True)
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as exc:
                logger.error("cache.refresh_listener_failed", listener=repr(listener), error=str(exc), exc_info=True)

    def _normalize(self, name: str, value: Any) -> Any:
        if name == "system_settings":
            return value or SystemSettingsEntity(system_name=self.system_name)
        if name == "financial_categories" and not value:
            # fallback apenas em memória; nunca gravado no backend
            return tuple(default_categories())
        return tuple(value)
