from collections.abc import Iterable

from clinicflow.core.domain.constants import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    PENDING_CATEGORY,
)
from clinicflow.core.domain.entities.financial_entity import FinancialCategoryEntity


def default_categories() -> list[FinancialCategoryEntity]:
    """Categorias exibidas enquanto a tabela remota estiver vazia."""
    income = [
        FinancialCategoryEntity(id=f"default-income-{i}", name=name, type="INCOME")
        for i, name in enumerate(DEFAULT_INCOME_CATEGORIES)
    ]
    expense = [
        FinancialCategoryEntity(id=f"default-expense-{i}", name=name, type="EXPENSE")
        for i, name in enumerate(DEFAULT_EXPENSE_CATEGORIES)
    ]
    return income + expense


def is_default_category(category_id: str) -> bool:
    return category_id.startswith("default-")


def normalize_category(name: str | None) -> str:
    return (name or "").strip() or PENDING_CATEGORY


def known_category_names(categories: Iterable[FinancialCategoryEntity]) -> list[str]:
    names = [PENDING_CATEGORY]
    for c in categories:
        if c.name not in names:
            names.append(c.name)
    return names
