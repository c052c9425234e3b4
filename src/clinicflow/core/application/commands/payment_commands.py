from dataclasses import dataclass
from datetime import date

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.application.dtos.payment_dto import PaymentDTO


@dataclass(frozen=True)
class CreatePaymentCommand(CommandDTO):
    payload: PaymentDTO

@dataclass(frozen=True)
class UpdatePaymentCommand(CommandDTO):
    id: str
    payload: PaymentDTO

@dataclass(frozen=True)
class DeletePaymentCommand(CommandDTO):
    id: str

@dataclass(frozen=True)
class ConfirmPaymentCommand(CommandDTO):
    id: str
    paid_date: date | None = None     # None ⇒ hoje
