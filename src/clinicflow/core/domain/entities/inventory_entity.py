from dataclasses import dataclass
from datetime import datetime

from clinicflow.core.domain.constants import LoanStatus
from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class InventoryItemEntity(EntityMixin):
    id: str
    name: str
    total_quantity: int
    available_quantity: int


@dataclass(slots=True)
class LoanEntity(EntityMixin):
    """
    Empréstimo de equipamento. Referencia o item pelo NOME, não pelo id:
    renomear o item desvincula empréstimos antigos.
    """
    id: str
    user_id: str
    item_name: str
    quantity: int
    request_date: datetime
    status: LoanStatus = "ACTIVE"
    return_date: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"
