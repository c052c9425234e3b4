from datetime import date

from clinicflow.core.application.dtos.dashboard_dto import (
    AdminDashboardDTO,
    FinancialSummaryDTO,
    MonthlyPaymentsDTO,
    OccupancyCellDTO,
    ProfessionalOverviewDTO,
)
from clinicflow.core.application.queries.dashboard_queries import (
    GetAdminDashboardQuery,
    GetOccupancyMatrixQuery,
    GetProfessionalOverviewQuery,
)
from clinicflow.core.application.queries.financial_queries import GetFinancialSummaryQuery, GetPaymentsReportQuery
from clinicflow.core.application.services.dashboard_service import DashboardService
from clinicflow.core.application.services.financial_report_service import FinancialReportService
from clinicflow.core.application.services.notification_service import NotificationService


class GetAdminDashboardHandler:
    def __init__(self, dashboard_service: DashboardService):
        self.service = dashboard_service

    def handle(self, query: GetAdminDashboardQuery) -> AdminDashboardDTO:
        return self.service.admin_summary(query.today or date.today())


class GetOccupancyMatrixHandler:
    def __init__(self, dashboard_service: DashboardService):
        self.service = dashboard_service

    def handle(self, query: GetOccupancyMatrixQuery) -> list[OccupancyCellDTO]:
        return self.service.occupancy_matrix(
            room_id=query.room_id,
            day=query.day,
            shift=query.shift,
            status=query.status,
        )


class GetProfessionalOverviewHandler:
    def __init__(self, dashboard_service: DashboardService, notification_service: NotificationService):
        self.service = dashboard_service
        self.notifications = notification_service

    def handle(self, query: GetProfessionalOverviewQuery) -> ProfessionalOverviewDTO:
        overview = self.service.professional_overview(query.user_id)
        return ProfessionalOverviewDTO(
            allocations=overview.allocations,
            active_loans=overview.active_loans,
            payments=overview.payments,
            patients=overview.patients,
            unread_documents=self.notifications.unread_count("documents", query.user_id),
            unread_payments=self.notifications.unread_count("payments", query.user_id),
        )


class GetPaymentsReportHandler:
    def __init__(self, report_service: FinancialReportService):
        self.service = report_service

    def handle(self, query: GetPaymentsReportQuery) -> list[MonthlyPaymentsDTO]:
        return self.service.payments_by_month()


class GetFinancialSummaryHandler:
    def __init__(self, report_service: FinancialReportService):
        self.service = report_service

    def handle(self, query: GetFinancialSummaryQuery) -> FinancialSummaryDTO:
        return self.service.monthly_summary(query.month)
