from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.inventory_dto import InventoryItemDTO


@dataclass(frozen=True)
class CreateInventoryItemCommand(CommandDTO):
    payload: InventoryItemDTO

@dataclass(frozen=True)
class UpdateInventoryItemCommand(CommandDTO):
    id: str
    payload: InventoryItemDTO

@dataclass(frozen=True)
class DeleteInventoryItemCommand(CommandDTO):
    id: str

@dataclass(frozen=True)
class RequestLoanCommand(CommandDTO):
    user_id: str
    item_id: str

@dataclass(frozen=True)
class ReturnLoanCommand(CommandDTO):
    loan_id: str
