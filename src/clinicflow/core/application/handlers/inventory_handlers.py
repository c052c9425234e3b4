"""
Itens de inventário e empréstimos.

Empréstimo/devolução são duas escritas independentes (item + empréstimo),
sem transação: uma falha na segunda vira PartialCascadeError.
"""
import uuid
from dataclasses import replace

import structlog

from clinicflow.core.application.commands.inventory_commands import (
    CreateInventoryItemCommand,
    DeleteInventoryItemCommand,
    RequestLoanCommand,
    ReturnLoanCommand,
    UpdateInventoryItemCommand,
)
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.services.cascade import run_steps
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.entities.inventory_entity import InventoryItemEntity, LoanEntity
from clinicflow.core.domain.repositories.entity_repositories import InventoryRepository, LoanRepository
from clinicflow.core.domain.services.clock import Clock, utc_now
from clinicflow.core.domain.services.inventory_policy import (
    available_after_edit,
    ensure_loanable,
    ensure_returnable,
    find_item_by_name,
)

logger = structlog.get_logger(__name__)


class CreateInventoryItemHandler(CommandHandler[CreateInventoryItemCommand]):
    def __init__(self, repo: InventoryRepository):
        self.repo = repo

    def handle(self, command: CreateInventoryItemCommand) -> InventoryItemEntity:
        p = command.payload
        entity = InventoryItemEntity(
            id=str(uuid.uuid4()),
            name=p.name,
            total_quantity=p.total_quantity,
            available_quantity=p.total_quantity,
        )
        return self.repo.add(entity)


class UpdateInventoryItemHandler(CommandHandler[UpdateInventoryItemCommand]):
    def __init__(self, repo: InventoryRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdateInventoryItemCommand) -> InventoryItemEntity:
        snap = self.cache.snapshot
        current = snap.find("inventory", command.id)
        p = command.payload
        # empréstimos antigos continuam com o nome anterior
        available = available_after_edit(snap.loans, p.name, p.total_quantity)
        self.repo.update(
            command.id,
            {"name": p.name, "total_quantity": p.total_quantity, "available_quantity": available},
        )
        return replace(current, name=p.name, total_quantity=p.total_quantity, available_quantity=available)


class DeleteInventoryItemHandler(CommandHandler[DeleteInventoryItemCommand]):
    def __init__(self, repo: InventoryRepository):
        self.repo = repo

    def handle(self, command: DeleteInventoryItemCommand) -> None:
        self.repo.delete(command.id)


class RequestLoanHandler(CommandHandler[RequestLoanCommand]):
    def __init__(
        self,
        repo: InventoryRepository,
        loan_repo: LoanRepository,
        cache: AggregateStateCache,
        clock: Clock = utc_now,
    ):
        self.repo = repo
        self.loan_repo = loan_repo
        self.cache = cache
        self.clock = clock

    def handle(self, command: RequestLoanCommand) -> LoanEntity:
        item = ensure_loanable(self.cache.snapshot.inventory, command.item_id)
        loan = LoanEntity(
            id=str(uuid.uuid4()),
            user_id=command.user_id,
            item_name=item.name,
            quantity=1,
            request_date=self.clock(),
            status="ACTIVE",
        )
        run_steps(
            "request_loan",
            [
                ("decrement_available",
                 lambda: self.repo.update(item.id, {"available_quantity": item.available_quantity - 1})),
                ("insert_loan", lambda: self.loan_repo.add(loan)),
            ],
        )
        logger.info("loan.requested", loan_id=loan.id, item=item.name, user_id=command.user_id)
        return loan


class ReturnLoanHandler(CommandHandler[ReturnLoanCommand]):
    def __init__(
        self,
        repo: InventoryRepository,
        loan_repo: LoanRepository,
        cache: AggregateStateCache,
        clock: Clock = utc_now,
    ):
        self.repo = repo
        self.loan_repo = loan_repo
        self.cache = cache
        self.clock = clock

    def handle(self, command: ReturnLoanCommand) -> LoanEntity:
        snap = self.cache.snapshot
        loan = ensure_returnable(snap.loans, command.loan_id)
        returned = replace(loan, status="RETURNED", return_date=self.clock())

        steps = [
            ("mark_returned",
             lambda: self.loan_repo.update(loan.id, {"status": "RETURNED", "return_date": returned.return_date})),
        ]
        item = find_item_by_name(snap.inventory, loan.item_name)
        if item is not None:
            steps.append(
                ("increment_available",
                 lambda: self.repo.update(item.id, {"available_quantity": item.available_quantity + loan.quantity})),
            )
        else:
            logger.warning("loan.item_not_found", loan_id=loan.id, item_name=loan.item_name)

        run_steps("return_loan", steps)
        logger.info("loan.returned", loan_id=loan.id)
        return returned
