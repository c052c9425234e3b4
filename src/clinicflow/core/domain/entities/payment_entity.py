from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from clinicflow.core.domain.constants import PaymentStatus
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class PaymentEntity(EntityMixin):
    id: str
    user_id: str
    amount: Decimal
    due_date: date
    created_at: datetime
    status: PaymentStatus = "PENDING"
    paid_date: date | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == "PAID"
