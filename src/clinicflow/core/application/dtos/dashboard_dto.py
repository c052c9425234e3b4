from dataclasses import dataclass, field
from decimal import Decimal

from clinicflow.core.domain.entities.allocation_entity import AllocationEntity
from clinicflow.core.domain.entities.inventory_entity import LoanEntity
from clinicflow.core.domain.entities.patient_entity import PatientEntity
from clinicflow.core.domain.entities.payment_entity import PaymentEntity


@dataclass(frozen=True)
class AdminDashboardDTO:
    month_revenue: Decimal
    month_pending: Decimal
    active_loans: int
    active_professionals: int
    occupation_rate: int          # percentual inteiro (0-100)

@dataclass(frozen=True)
class OccupancyCellDTO:
    room_id: str
    room_name: str
    day: str
    shift: str
    allocation_id: str | None = None
    professional_name: str | None = None

    @property
    def occupied(self) -> bool:
        return self.allocation_id is not None

@dataclass(frozen=True)
class UserMonthTotalDTO:
    user_id: str
    user_name: str
    expected: Decimal
    realized: Decimal

@dataclass(frozen=True)
class MonthlyPaymentsDTO:
    month: str                    # YYYY-MM
    expected: Decimal
    realized: Decimal
    by_user: list[UserMonthTotalDTO] = field(default_factory=list)

@dataclass(frozen=True)
class CategoryTotalDTO:
    category: str
    income: Decimal
    expense: Decimal

    @property
    def total(self) -> Decimal:
        return self.income + self.expense

@dataclass(frozen=True)
class FinancialSummaryDTO:
    month: str
    income: Decimal
    expense: Decimal
    balance: Decimal
    by_category: list[CategoryTotalDTO] = field(default_factory=list)

@dataclass(frozen=True)
class ProfessionalOverviewDTO:
    allocations: list[AllocationEntity]
    active_loans: list[LoanEntity]
    payments: list[PaymentEntity]
    patients: list[PatientEntity]
    unread_documents: int = 0
    unread_payments: int = 0
