from collections.abc import Iterable
from datetime import date, datetime, time, timezone

from clinicflow.core.domain.entities.document_entity import DocumentEntity
from clinicflow.core.domain.entities.payment_entity import PaymentEntity
from clinicflow.core.domain.entities.user_entity import UserEntity


def as_utc(moment: datetime | date) -> datetime:
    """Normaliza para datetime aware em UTC (naive é tratado como UTC)."""
    if not isinstance(moment, datetime):
        moment = datetime.combine(moment, time.min)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def documents_in_scope(documents: Iterable[DocumentEntity], user: UserEntity) -> list[DocumentEntity]:
    return [d for d in documents if d.is_visible_to(user.id)]


def payments_in_scope(payments: Iterable[PaymentEntity], user: UserEntity) -> list[PaymentEntity]:
    return [p for p in payments if p.user_id == user.id]


def count_unread(created: Iterable[datetime], watermark: datetime | None) -> int:
    """
    Registros estritamente mais novos que a marca. Sem marca, tudo é não lido.
    """
    if watermark is None:
        return sum(1 for _ in created)
    mark = as_utc(watermark)
    return sum(1 for c in created if as_utc(c) > mark)
