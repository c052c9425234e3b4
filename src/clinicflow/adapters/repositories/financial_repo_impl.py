from clinicflow.adapters.repositories.collection_repo_impl import RemoteCollectionRepoImpl
from clinicflow.core.domain.entities.financial_entity import FinancialCategoryEntity, FinancialTransactionEntity
from clinicflow.core.domain.repositories.entity_repositories import (
    FinancialCategoryRepository,
    FinancialTransactionRepository,
)


class FinancialTransactionRepoImpl(
    RemoteCollectionRepoImpl[FinancialTransactionEntity], FinancialTransactionRepository
):
    collection = "financial_transactions"
    entity_cls = FinancialTransactionEntity

    def relabel_category(self, old_name: str, new_name: str, type_: str | None = None) -> None:
        filters = {"category": old_name}
        if type_ is not None:
            filters["type"] = type_
        self.client.update_where(self.collection, filters, {"category": new_name})


class FinancialCategoryRepoImpl(RemoteCollectionRepoImpl[FinancialCategoryEntity], FinancialCategoryRepository):
    collection = "financial_categories"
    entity_cls = FinancialCategoryEntity
