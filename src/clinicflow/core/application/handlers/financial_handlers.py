import uuid

import structlog

from clinicflow.core.application.commands.financial_commands import (
    CreateCategoryCommand,
    CreateTransactionCommand,
    DeleteCategoryCommand,
    DeleteTransactionCommand,
    RenameCategoryCommand,
    UpdateTransactionCommand,
)
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.services.cascade import run_steps
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.constants import PENDING_CATEGORY
from clinicflow.core.domain.entities.financial_entity import FinancialCategoryEntity, FinancialTransactionEntity
from clinicflow.core.domain.exceptions import InvalidTransitionError
from clinicflow.core.domain.repositories.entity_repositories import (
    FinancialCategoryRepository,
    FinancialTransactionRepository,
)
from clinicflow.core.domain.services.category_policy import is_default_category, normalize_category
from clinicflow.core.domain.services.clock import Clock, utc_now

logger = structlog.get_logger(__name__)

# ——— TRANSACTION ——————————————————————————————————————————

class CreateTransactionHandler(CommandHandler[CreateTransactionCommand]):
    def __init__(self, repo: FinancialTransactionRepository, clock: Clock = utc_now):
        self.repo = repo
        self.clock = clock

    def handle(self, command: CreateTransactionCommand) -> FinancialTransactionEntity:
        data = command.payload.model_dump()
        data['id'] = str(uuid.uuid4())
        data['category'] = normalize_category(data['category'])
        data['created_at'] = self.clock()
        return self.repo.add(FinancialTransactionEntity.from_dict(data))

class UpdateTransactionHandler(CommandHandler[UpdateTransactionCommand]):
    def __init__(self, repo: FinancialTransactionRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdateTransactionCommand) -> FinancialTransactionEntity:
        current = self.cache.snapshot.find("financial_transactions", command.id)
        data = command.payload.model_dump(exclude_unset=True)
        if 'category' in data:
            data['category'] = normalize_category(data['category'])
        self.repo.update(command.id, data)
        return FinancialTransactionEntity.from_dict({**current.to_dict(), **data})

class DeleteTransactionHandler(CommandHandler[DeleteTransactionCommand]):
    def __init__(self, repo: FinancialTransactionRepository):
        self.repo = repo

    def handle(self, command: DeleteTransactionCommand) -> None:
        self.repo.delete(command.id)


# ——— CATEGORY —————————————————————————————————————————————

def _persisted_category(cache: AggregateStateCache, category_id: str) -> FinancialCategoryEntity:
    if is_default_category(category_id):
        # categorias padrão existem só em memória
        raise InvalidTransitionError("Categoria padrão não pode ser alterada; cadastre uma categoria própria.")
    return cache.snapshot.find("financial_categories", category_id)

class CreateCategoryHandler(CommandHandler[CreateCategoryCommand]):
    def __init__(self, repo: FinancialCategoryRepository):
        self.repo = repo

    def handle(self, command: CreateCategoryCommand) -> FinancialCategoryEntity:
        p = command.payload
        entity = FinancialCategoryEntity(id=str(uuid.uuid4()), name=p.name.strip(), type=p.type)
        return self.repo.add(entity)

class RenameCategoryHandler(CommandHandler[RenameCategoryCommand]):
    """Atualiza o nome e reetiqueta as transações do mesmo tipo."""

    def __init__(
        self,
        repo: FinancialCategoryRepository,
        transaction_repo: FinancialTransactionRepository,
        cache: AggregateStateCache,
    ):
        self.repo = repo
        self.transaction_repo = transaction_repo
        self.cache = cache

    def handle(self, command: RenameCategoryCommand) -> FinancialCategoryEntity:
        category = _persisted_category(self.cache, command.id)
        old_name, new_name = category.name, command.new_name.strip()
        if not new_name:
            raise InvalidTransitionError("Nome de categoria vazio.")
        if new_name == old_name:
            return category

        run_steps(
            "rename_category",
            [
                ("update_category", lambda: self.repo.update(category.id, {"name": new_name})),
                ("relabel_transactions",
                 lambda: self.transaction_repo.relabel_category(old_name, new_name, category.type)),
            ],
        )
        logger.info("category.renamed", old=old_name, new=new_name, type=category.type)
        return FinancialCategoryEntity(id=category.id, name=new_name, type=category.type)

class DeleteCategoryHandler(CommandHandler[DeleteCategoryCommand]):
    """Transações nunca são apagadas: vão para a categoria "Pendente"."""

    def __init__(
        self,
        repo: FinancialCategoryRepository,
        transaction_repo: FinancialTransactionRepository,
        cache: AggregateStateCache,
    ):
        self.repo = repo
        self.transaction_repo = transaction_repo
        self.cache = cache

    def handle(self, command: DeleteCategoryCommand) -> None:
        category = _persisted_category(self.cache, command.id)
        run_steps(
            "delete_category",
            [
                ("relabel_transactions",
                 lambda: self.transaction_repo.relabel_category(category.name, PENDING_CATEGORY)),
                ("delete_category", lambda: self.repo.delete(category.id)),
            ],
        )
        logger.info("category.deleted", name=category.name)
