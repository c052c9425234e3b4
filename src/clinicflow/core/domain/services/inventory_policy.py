"""
Regras de reconciliação de quantidades do inventário.

Empréstimos referenciam o item pelo nome, então todas as somas abaixo
casam `loan.item_name` com `item.name`.
"""
from collections.abc import Iterable

from clinicflow.core.domain.entities.inventory_entity import InventoryItemEntity, LoanEntity
from clinicflow.core.domain.exceptions import InvalidTransitionError, ItemUnavailableError, NotFoundError


def active_loaned_quantity(loans: Iterable[LoanEntity], item_name: str) -> int:
    return sum(l.quantity for l in loans if l.is_active and l.item_name == item_name)


def available_after_edit(loans: Iterable[LoanEntity], name: str, total_quantity: int) -> int:
    """Disponível = total − emprestado (pelo NOVO nome), nunca negativo."""
    return max(0, total_quantity - active_loaned_quantity(loans, name))


def ensure_loanable(
    items: Iterable[InventoryItemEntity], item_id: str
) -> InventoryItemEntity:
    item = next((i for i in items if i.id == item_id), None)
    if item is None:
        raise ItemUnavailableError(f"Item inexistente: {item_id}")
    if item.available_quantity <= 0:
        raise ItemUnavailableError(f"Item indisponível: {item.name}")
    return item


def ensure_returnable(loans: Iterable[LoanEntity], loan_id: str) -> LoanEntity:
    loan = next((l for l in loans if l.id == loan_id), None)
    if loan is None:
        raise NotFoundError("loans", loan_id)
    if not loan.is_active:
        raise InvalidTransitionError(f"Empréstimo {loan_id} já foi devolvido")
    return loan


def find_item_by_name(
    items: Iterable[InventoryItemEntity], name: str
) -> InventoryItemEntity | None:
    return next((i for i in items if i.name == name), None)
