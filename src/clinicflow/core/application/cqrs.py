from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Protocol, TypeVar

import structlog

from clinicflow.adapters.observability.metrics import COMMAND_DURATION, COMMAND_FAILURES
from clinicflow.core.domain.events.events import DomainEvent
from clinicflow.core.domain.exceptions import (
    DomainValidationError,
    IdentityError,
    PartialCascadeError,
    RemoteStoreError,
)
from clinicflow.core.domain.services.event_dispatcher import EventDispatcher

# ───────────────────────────────────────────────
# CQRS com recarga do cache após cada mutação
# ───────────────────────────────────────────────

C = TypeVar('C')  # Command type
Q = TypeVar('Q')  # Query type
R = TypeVar('R')  # Query result type

logger = structlog.get_logger(__name__)

# ───────────────────────────────────────────────
# DTOs
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class CommandDTO:
    """Mutação do estado remoto; o resultado é o retorno do handler."""
    # comandos que não tocam o backend (ex.: marcar como lido) não recarregam
    refreshes_cache: ClassVar[bool] = True

@dataclass(frozen=True)
class QueryDTO:
    """Leitura respondida a partir do snapshot, sem I/O."""

# ───────────────────────────────────────────────
# Contratos
# ───────────────────────────────────────────────
class CommandHandler(Protocol, Generic[C]):
    def handle(self, command: C) -> Any:
        ...

class QueryHandler(Protocol, Generic[Q, R]):
    def handle(self, query: Q) -> R:
        ...

class Refreshable(Protocol):
    def load_all(self) -> Any:
        ...

# ───────────────────────────────────────────────
# Buses
# ───────────────────────────────────────────────
class _HandlerRegistry:
    """Um handler por tipo de mensagem; despacho síncrono com log de duração."""
    kind = "message"

    def __init__(self) -> None:
        self._handlers: dict[type, Any] = {}
        self.log = logger.bind(bus=self.kind)

    def register(self, message_type: type, handler: Any) -> None:
        if message_type in self._handlers:
            self.log.warning("handler.replaced", message=message_type.__name__)
        self._handlers[message_type] = handler

    def registered(self) -> list[str]:
        return sorted(t.__name__ for t in self._handlers)

    def _run(self, message: Any) -> Any:
        name = type(message).__name__
        handler = self._handlers.get(type(message))
        if handler is None:
            raise ValueError(f"Nenhum handler para {self.kind}: {name}")
        start = time.perf_counter()
        result = handler.handle(message)
        self.log.debug("handled", message=name, duration=f"{time.perf_counter() - start:.3f}s")
        return result

class CommandBus(_HandlerRegistry):
    kind = "command"

    def dispatch(self, command: CommandDTO) -> Any:
        self.log.info("command.start", command=type(command).__name__)
        return self._run(command)

class QueryBus(_HandlerRegistry):
    kind = "query"

    def dispatch(self, query: QueryDTO) -> Any:
        return self._run(query)

# ───────────────────────────────────────────────
# Service de Alto Nível
# ───────────────────────────────────────────────
class BaseService:
    """Fachada fina sobre os dois buses."""
    def __init__(self, command_bus: CommandBus, query_bus: QueryBus) -> None:
        self.commands = command_bus
        self.queries = query_bus

    def execute(self, command: CommandDTO) -> Any:
        return self.commands.dispatch(command)

    def query(self, query: QueryDTO) -> Any:
        return self.queries.dispatch(query)

class CommandBusImpl(CommandBus):
    """Publica no dispatcher os DomainEvents retornados pelos handlers."""
    def __init__(self, dispatcher: EventDispatcher):
        super().__init__()
        self.dispatcher = dispatcher

    def dispatch(self, command: Any) -> Any:
        result = super().dispatch(command)

        if isinstance(result, DomainEvent):
            self.dispatcher.dispatch(result)
        elif isinstance(result, list | tuple):
            for evt in result:
                if isinstance(evt, DomainEvent):
                    self.dispatcher.dispatch(evt)

        return result

class RefreshingCommandBus(CommandBusImpl):
    """
    Protocolo mutação → recarga:

    • validação local falhou ⇒ nada foi escrito, relança sem recarregar;
    • escrita concluída ⇒ `cache.load_all()` e devolve o resultado do handler;
    • falha remota/cascata/identidade ⇒ o estado remoto é incerto: recarrega
      para ressincronizar e relança o erro original.
    """
    def __init__(self, dispatcher: EventDispatcher, cache: Refreshable):
        super().__init__(dispatcher)
        self.cache = cache

    def dispatch(self, command: Any) -> Any:
        name = type(command).__name__
        start = time.perf_counter()
        try:
            result = super().dispatch(command)
        except DomainValidationError as exc:
            COMMAND_FAILURES.labels(name, "validation").inc()
            self.log.warning("Comando rejeitado", command=name, reason=str(exc))
            raise
        except (RemoteStoreError, PartialCascadeError, IdentityError) as exc:
            COMMAND_FAILURES.labels(name, _failure_kind(exc)).inc()
            self.log.error("Comando falhou; ressincronizando cache", command=name, error=str(exc))
            if command.refreshes_cache:
                self.cache.load_all()
            raise
        finally:
            COMMAND_DURATION.labels(name).observe(time.perf_counter() - start)

        if command.refreshes_cache:
            self.cache.load_all()
        return result

class QueryBusImpl(QueryBus):
    """Queries não publicam eventos nem recarregam o cache."""


def _failure_kind(exc: Exception) -> str:
    if isinstance(exc, PartialCascadeError):
        return "cascade"
    if isinstance(exc, IdentityError):
        return "identity"
    return "remote"
