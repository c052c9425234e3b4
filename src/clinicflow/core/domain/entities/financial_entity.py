from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from clinicflow.core.domain.constants import TransactionType
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class FinancialCategoryEntity(EntityMixin):
    id: str
    name: str
    type: TransactionType


@dataclass(slots=True)
class FinancialTransactionEntity(EntityMixin):
    """`category` guarda o NOME da categoria (chave desnormalizada)."""
    id: str
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    date: date
    created_at: datetime
