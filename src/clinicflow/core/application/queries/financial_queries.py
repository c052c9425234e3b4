from dataclasses import dataclass

from clinicflow.core.application.cqrs import QueryDTO


@dataclass(frozen=True)
class GetPaymentsReportQuery(QueryDTO):
    """Totais mensais previsto × realizado, do mês mais recente ao mais antigo."""
    pass

@dataclass(frozen=True)
class GetFinancialSummaryQuery(QueryDTO):
    month: str                        # "YYYY-MM"
