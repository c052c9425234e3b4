from collections.abc import Callable
from datetime import datetime

import structlog

from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.constants import NotificationKind
from clinicflow.core.domain.repositories.watermark_store import WatermarkStore
from clinicflow.core.domain.services.clock import Clock, utc_now
from clinicflow.core.domain.services.notification_policy import (
    count_unread,
    documents_in_scope,
    payments_in_scope,
)

logger = structlog.get_logger(__name__)


class NotificationService:
    """Contagem de não lidos por marca d'água local ("lido até")."""

    def __init__(self, cache: AggregateStateCache, store: WatermarkStore, clock: Clock = utc_now):
        self.cache = cache
        self.store = store
        self.clock = clock
        self._scopes: dict[str, Callable[..., list]] = {
            "documents": lambda snap, user: documents_in_scope(snap.documents, user),
            "payments": lambda snap, user: payments_in_scope(snap.payments, user),
        }

    def unread_count(self, kind: NotificationKind, user_id: str) -> int:
        snap = self.cache.snapshot
        user = snap.find("users", user_id)
        if user.is_admin:
            return 0
        records = self._scopes[kind](snap, user)
        return count_unread((r.created_at for r in records), self.store.get(kind, user_id))

    def mark_as_read(self, kind: NotificationKind, user_id: str) -> datetime:
        if kind not in self._scopes:
            raise ValueError(f"Tipo de notificação inválido: {kind}")
        now = self.clock()
        self.store.set(kind, user_id, now)
        logger.info("notification.marked_read", kind=kind, user_id=user_id)
        return now
