from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


# ───────────────────────────────────────────────
# Event Base e Domain Events
# ───────────────────────────────────────────────
@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

# ╭──────────────────────────────────────────────╮
# │ 1. Identidade (mudanças de estado da sessão) │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class SignedInEvent(DomainEvent):
    email: str
    user_id: str
    access_token: str

@dataclass(frozen=True)
class SignedOutEvent(DomainEvent):
    email: str | None = None

@dataclass(frozen=True)
class PasswordRecoveryEvent(DomainEvent):
    email: str
    access_token: str

# ╭──────────────────────────────────────────────╮
# │ 2. Cache agregado                            │
# ╰──────────────────────────────────────────────╯
@dataclass(frozen=True)
class CacheRefreshedEvent(DomainEvent):
    failed_collections: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.failed_collections
