from collections import defaultdict
from decimal import Decimal

from clinicflow.core.application.dtos.dashboard_dto import (
    CategoryTotalDTO,
    FinancialSummaryDTO,
    MonthlyPaymentsDTO,
    UserMonthTotalDTO,
)
from clinicflow.core.application.services.state_cache import AggregateStateCache
from clinicflow.core.domain.constants import UNKNOWN_PROFESSIONAL
from clinicflow.core.domain.services.category_policy import known_category_names, normalize_category

ZERO = Decimal("0")


class FinancialReportService:
    def __init__(self, cache: AggregateStateCache):
        self.cache = cache

    def payments_by_month(self) -> list[MonthlyPaymentsDTO]:
        """
        Previsto: todos os pagamentos pelo mês de vencimento.
        Realizado: apenas PAID, pelo mês de pagamento.
        """
        snap = self.cache.snapshot
        names = {u.id: u.name for u in snap.users}
        expected: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
        realized: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))

        for p in snap.payments:
            expected[p.due_date.strftime("%Y-%m")][p.user_id] += p.amount
            if p.is_paid and p.paid_date is not None:
                realized[p.paid_date.strftime("%Y-%m")][p.user_id] += p.amount

        report = []
        for month in sorted(set(expected) | set(realized), reverse=True):
            users = sorted(set(expected[month]) | set(realized[month]))
            by_user = [
                UserMonthTotalDTO(
                    user_id=uid,
                    user_name=names.get(uid, UNKNOWN_PROFESSIONAL),
                    expected=expected[month][uid],
                    realized=realized[month][uid],
                )
                for uid in users
            ]
            by_user.sort(key=lambda t: t.user_name)
            report.append(
                MonthlyPaymentsDTO(
                    month=month,
                    expected=sum(expected[month].values(), ZERO),
                    realized=sum(realized[month].values(), ZERO),
                    by_user=by_user,
                )
            )
        return report

    def monthly_summary(self, month: str) -> FinancialSummaryDTO:
        snap = self.cache.snapshot
        rows = [t for t in snap.financial_transactions if t.date.strftime("%Y-%m") == month]

        # "Pendente" e categorias conhecidas entram zeradas; linhas vazias saem no fim
        totals: dict[str, list[Decimal]] = {
            name: [ZERO, ZERO] for name in known_category_names(snap.financial_categories)
        }
        income = expense = ZERO
        for t in rows:
            bucket = totals.setdefault(normalize_category(t.category), [ZERO, ZERO])
            if t.type == "INCOME":
                bucket[0] += t.amount
                income += t.amount
            else:
                bucket[1] += t.amount
                expense += t.amount

        breakdown = [
            CategoryTotalDTO(category=name, income=inc, expense=exp)
            for name, (inc, exp) in totals.items()
            if inc or exp
        ]
        breakdown.sort(key=lambda c: c.total, reverse=True)
        return FinancialSummaryDTO(
            month=month,
            income=income,
            expense=expense,
            balance=income - expense,
            by_category=breakdown,
        )
