from collections import defaultdict
from collections.abc import Callable

import structlog

from clinicflow.core.domain.events.events import DomainEvent

logger = structlog.get_logger(__name__)

Listener = Callable[[DomainEvent], None]


def _name(listener: Listener) -> str:
    return getattr(listener, "__qualname__", type(listener).__name__)


class EventDispatcher:
    """
    Dispatcher síncrono de eventos de domínio (sessão, cache).

    Um listener inscrito num tipo base também recebe as subclasses
    (`DomainEvent` recebe tudo). Todos os listeners rodam; se algum falhar,
    o primeiro erro é relançado depois do último.
    """
    def __init__(self) -> None:
        self._subs: dict[type[DomainEvent], list[Listener]] = defaultdict(list)

    def subscribe(self, event_type: type[DomainEvent], listener: Listener) -> None:
        self._subs[event_type].append(listener)
        logger.debug("event.subscribed", event_type=event_type.__name__, listener=_name(listener))

    def unsubscribe(self, event_type: type[DomainEvent], listener: Listener) -> None:
        if listener in self._subs.get(event_type, ()):
            self._subs[event_type].remove(listener)

    def listeners_for(self, event_type: type[DomainEvent]) -> list[Listener]:
        return [l for klass in event_type.__mro__ for l in self._subs.get(klass, ())]

    def dispatch(self, event: DomainEvent) -> None:
        listeners = self.listeners_for(type(event))
        logger.debug("event.dispatch", event_name=type(event).__name__, listeners=len(listeners))

        errors: list[Exception] = []
        for listener in listeners:
            try:
                listener(event)
            except Exception as exc:
                logger.error(
                    "event.listener_error",
                    event_name=type(event).__name__,
                    listener=_name(listener),
                    error=str(exc),
                    exc_info=True,
                )
                errors.append(exc)
        if errors:
            raise errors[0]
