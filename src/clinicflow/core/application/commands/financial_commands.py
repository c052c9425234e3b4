from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.financial_dto import FinancialCategoryDTO, FinancialTransactionDTO


@dataclass(frozen=True)
class CreateTransactionCommand(CommandDTO):
    payload: FinancialTransactionDTO

@dataclass(frozen=True)
class UpdateTransactionCommand(CommandDTO):
    id: str
    payload: FinancialTransactionDTO

@dataclass(frozen=True)
class DeleteTransactionCommand(CommandDTO):
    id: str

@dataclass(frozen=True)
class CreateCategoryCommand(CommandDTO):
    payload: FinancialCategoryDTO

@dataclass(frozen=True)
class RenameCategoryCommand(CommandDTO):
    """Renomeia e reetiqueta as transações do mesmo tipo."""
    id: str
    new_name: str

@dataclass(frozen=True)
class DeleteCategoryCommand(CommandDTO):
    """Reetiqueta as transações para "Pendente" e remove a categoria."""
    id: str
