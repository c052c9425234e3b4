import uuid
from dataclasses import replace
from datetime import date

from clinicflow.core.application.commands.payment_commands import (
    ConfirmPaymentCommand,
    CreatePaymentCommand,
    DeletePaymentCommand,
    UpdatePaymentCommand,
)
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.entities.payment_entity import PaymentEntity
from clinicflow.core.domain.exceptions import InvalidTransitionError
from clinicflow.core.domain.repositories.entity_repositories import PaymentRepository
from clinicflow.core.domain.services.clock import Clock, utc_now


class CreatePaymentHandler(CommandHandler[CreatePaymentCommand]):
    def __init__(self, repo: PaymentRepository, clock: Clock = utc_now):
        self.repo = repo
        self.clock = clock

    def handle(self, command: CreatePaymentCommand) -> PaymentEntity:
        data = command.payload.model_dump()
        data['id'] = str(uuid.uuid4())
        data['created_at'] = self.clock()
        data['status'] = "PENDING"
        return self.repo.add(PaymentEntity.from_dict(data))

class UpdatePaymentHandler(CommandHandler[UpdatePaymentCommand]):
    """Edita valor/vencimento/profissional; status e pagamento não mudam aqui."""
    def __init__(self, repo: PaymentRepository, cache: AggregateStateCache):
        self.repo = repo
        self.cache = cache

    def handle(self, command: UpdatePaymentCommand) -> PaymentEntity:
        current = self.cache.snapshot.find("payments", command.id)
        changes = command.payload.model_dump(exclude_unset=True)
        self.repo.update(command.id, changes)
        return replace(current, **changes)

class DeletePaymentHandler(CommandHandler[DeletePaymentCommand]):
    def __init__(self, repo: PaymentRepository):
        self.repo = repo

    def handle(self, command: DeletePaymentCommand) -> None:
        self.repo.delete(command.id)

class ConfirmPaymentHandler(CommandHandler[ConfirmPaymentCommand]):
    def __init__(self, repo: PaymentRepository, cache: AggregateStateCache, clock: Clock = utc_now):
        self.repo = repo
        self.cache = cache
        self.clock = clock

    def handle(self, command: ConfirmPaymentCommand) -> PaymentEntity:
        current = self.cache.snapshot.find("payments", command.id)
        if current.is_paid:
            raise InvalidTransitionError(f"Pagamento {command.id} já está PAID")
        paid_date: date = command.paid_date or self.clock().astimezone().date()
        self.repo.update(command.id, {"status": "PAID", "paid_date": paid_date})
        return replace(current, status="PAID", paid_date=paid_date)
