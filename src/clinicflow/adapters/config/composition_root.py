import redis
import structlog
from dependency_injector import containers, providers

# Adapters
from clinicflow.adapters.api_clients.identity_client import IdentityClient, SignUpClient
from clinicflow.adapters.api_clients.store_client import RemoteStoreClient
from clinicflow.adapters.repositories.allocation_repo_impl import AllocationRepoImpl
from clinicflow.adapters.repositories.event_repo_impl import EventRepoImpl, RegistrationRepoImpl
from clinicflow.adapters.repositories.financial_repo_impl import FinancialCategoryRepoImpl, FinancialTransactionRepoImpl
from clinicflow.adapters.repositories.simple_repo_impls import (
    DocumentRepoImpl,
    InventoryRepoImpl,
    LoanRepoImpl,
    PatientRepoImpl,
    PaymentRepoImpl,
    RoomRepoImpl,
)
from clinicflow.adapters.repositories.system_settings_repo_impl import SystemSettingsRepoImpl
from clinicflow.adapters.repositories.user_repo_impl import UserRepoImpl
from clinicflow.adapters.storage.redis_watermark_store import RedisWatermarkStore

# Commands
from clinicflow.core.application.commands.allocation_commands import CreateAllocationCommand, DeleteAllocationCommand
from clinicflow.core.application.commands.document_commands import CreateDocumentCommand, DeleteDocumentCommand
from clinicflow.core.application.commands.event_commands import (
    CreateEventCommand,
    DeleteEventCommand,
    RegisterForEventCommand,
    ToggleAttendanceCommand,
    ToggleRegistrationStatusCommand,
    UpdateEventCommand,
)
from clinicflow.core.application.commands.financial_commands import (
    CreateCategoryCommand,
    CreateTransactionCommand,
    DeleteCategoryCommand,
    DeleteTransactionCommand,
    RenameCategoryCommand,
    UpdateTransactionCommand,
)
from clinicflow.core.application.commands.inventory_commands import (
    CreateInventoryItemCommand,
    DeleteInventoryItemCommand,
    RequestLoanCommand,
    ReturnLoanCommand,
    UpdateInventoryItemCommand,
)
from clinicflow.core.application.commands.notification_commands import MarkAsReadCommand
from clinicflow.core.application.commands.patient_commands import CreatePatientCommand, DeletePatientCommand, UpdatePatientCommand
from clinicflow.core.application.commands.payment_commands import (
    ConfirmPaymentCommand,
    CreatePaymentCommand,
    DeletePaymentCommand,
    UpdatePaymentCommand,
)
from clinicflow.core.application.commands.room_commands import CreateRoomCommand, DeleteRoomCommand, UpdateRoomCommand
from clinicflow.core.application.commands.settings_commands import UpdateSystemSettingsCommand
from clinicflow.core.application.commands.user_commands import (
    ProvisionUserCommand,
    SeedAdminCommand,
    ToggleUserStatusCommand,
    UpdateOwnProfileCommand,
    UpdateUserCommand,
)

# CQRS
from clinicflow.core.application.cqrs import QueryBusImpl, RefreshingCommandBus

# Handlers
from clinicflow.core.application.handlers.allocation_handlers import CreateAllocationHandler, DeleteAllocationHandler
from clinicflow.core.application.handlers.core_entities_handlers import (
    CreateDocumentHandler,
    CreatePatientHandler,
    CreateRoomHandler,
    DeleteDocumentHandler,
    DeletePatientHandler,
    DeleteRoomHandler,
    UpdatePatientHandler,
    UpdateRoomHandler,
    UpdateSystemSettingsHandler,
)
from clinicflow.core.application.handlers.dashboard_handlers import (
    GetAdminDashboardHandler,
    GetFinancialSummaryHandler,
    GetOccupancyMatrixHandler,
    GetPaymentsReportHandler,
    GetProfessionalOverviewHandler,
)
from clinicflow.core.application.handlers.document_handlers import GetVisibleDocumentsHandler
from clinicflow.core.application.handlers.event_handlers import (
    CreateEventHandler,
    DeleteEventHandler,
    RegisterForEventHandler,
    ToggleAttendanceHandler,
    ToggleRegistrationStatusHandler,
    UpdateEventHandler,
)
from clinicflow.core.application.handlers.financial_handlers import (
    CreateCategoryHandler,
    CreateTransactionHandler,
    DeleteCategoryHandler,
    DeleteTransactionHandler,
    RenameCategoryHandler,
    UpdateTransactionHandler,
)
from clinicflow.core.application.handlers.inventory_handlers import (
    CreateInventoryItemHandler,
    DeleteInventoryItemHandler,
    RequestLoanHandler,
    ReturnLoanHandler,
    UpdateInventoryItemHandler,
)
from clinicflow.core.application.handlers.notification_handlers import GetUnreadCountHandler, MarkAsReadHandler
from clinicflow.core.application.handlers.payment_handlers import (
    ConfirmPaymentHandler,
    CreatePaymentHandler,
    DeletePaymentHandler,
    UpdatePaymentHandler,
)
from clinicflow.core.application.handlers.user_handlers import (
    ProvisionUserHandler,
    SeedAdminHandler,
    ToggleUserStatusHandler,
    UpdateOwnProfileHandler,
    UpdateUserHandler,
    UserProvisioner,
)

# Queries
from clinicflow.core.application.queries.dashboard_queries import (
    GetAdminDashboardQuery,
    GetOccupancyMatrixQuery,
    GetProfessionalOverviewQuery,
)
from clinicflow.core.application.queries.document_queries import GetVisibleDocumentsQuery
from clinicflow.core.application.queries.financial_queries import GetFinancialSummaryQuery, GetPaymentsReportQuery
from clinicflow.core.application.queries.notification_queries import GetUnreadCountQuery

# Serviços de aplicação
from clinicflow.core.application.services.clinic_facade_service import ClinicFacadeService
from clinicflow.core.application.services.dashboard_service import DashboardService
from clinicflow.core.application.services.financial_report_service import FinancialReportService
from clinicflow.core.application.services.notification_service import NotificationService
from clinicflow.core.application.services.session_binder import SessionBinder
from clinicflow.core.application.services.state_cache import AggregateStateCache

# Domínio
from clinicflow.core.domain.events.events import SignedInEvent, SignedOutEvent
from clinicflow.core.domain.services.event_dispatcher import EventDispatcher

container = None


def _store_token_handlers(store: RemoteStoreClient):
    """Mantém o token do usuário logado no cliente de dados (RLS)."""
    def use_session_token(event: SignedInEvent) -> None:
        store.set_access_token(event.access_token)

    def drop_session_token(event: SignedOutEvent) -> None:
        store.set_access_token(None)

    return use_session_token, drop_session_token


# ------- DECLARAÇÃO DO CONTAINER -------
class Container(containers.DeclarativeContainer):
    config = providers.Configuration()

    # Infra & integração
    event_dispatcher = providers.Singleton(EventDispatcher)

    store_client = providers.Singleton(
        RemoteStoreClient,
        base_url=config.store.url,
        api_key=config.store.api_key,
        timeout=config.store.timeout,
        retries=config.store.retries,
    )
    identity_client = providers.Singleton(
        IdentityClient,
        base_url=config.store.url,
        api_key=config.store.anon_key,
        dispatcher=event_dispatcher,
        timeout=config.store.timeout,
    )
    # cadastro sempre com a chave anônima (não troca a sessão do admin)
    signup_client = providers.Singleton(
        SignUpClient,
        base_url=config.store.url,
        api_key=config.store.anon_key,
        timeout=config.store.timeout,
    )
    redis_client = providers.Singleton(
        redis.Redis,
        host=config.redis.host,
        port=config.redis.port,
        db=config.redis.db,
        password=config.redis.password,
    )
    watermark_store = providers.Singleton(RedisWatermarkStore, client=redis_client)

    # Implementações de Repositórios (Ports → Adapters)
    user_repo = providers.Singleton(UserRepoImpl, client=store_client)
    room_repo = providers.Singleton(RoomRepoImpl, client=store_client)
    allocation_repo = providers.Singleton(AllocationRepoImpl, client=store_client)
    inventory_repo = providers.Singleton(InventoryRepoImpl, client=store_client)
    loan_repo = providers.Singleton(LoanRepoImpl, client=store_client)
    payment_repo = providers.Singleton(PaymentRepoImpl, client=store_client)
    patient_repo = providers.Singleton(PatientRepoImpl, client=store_client)
    event_repo = providers.Singleton(EventRepoImpl, client=store_client)
    registration_repo = providers.Singleton(RegistrationRepoImpl, client=store_client)
    document_repo = providers.Singleton(DocumentRepoImpl, client=store_client)
    transaction_repo = providers.Singleton(FinancialTransactionRepoImpl, client=store_client)
    category_repo = providers.Singleton(FinancialCategoryRepoImpl, client=store_client)
    settings_repo = providers.Singleton(SystemSettingsRepoImpl, client=store_client)

    # Cache agregado + CQRS
    state_cache = providers.Singleton(
        AggregateStateCache,
        user_repo=user_repo,
        room_repo=room_repo,
        allocation_repo=allocation_repo,
        inventory_repo=inventory_repo,
        loan_repo=loan_repo,
        payment_repo=payment_repo,
        patient_repo=patient_repo,
        event_repo=event_repo,
        registration_repo=registration_repo,
        document_repo=document_repo,
        transaction_repo=transaction_repo,
        category_repo=category_repo,
        settings_repo=settings_repo,
        dispatcher=event_dispatcher,
        system_name=config.system_name,
        max_workers=config.refresh_workers,
    )
    command_bus = providers.Singleton(RefreshingCommandBus, dispatcher=event_dispatcher, cache=state_cache)
    query_bus = providers.Singleton(QueryBusImpl)

    # Serviços de negócio
    session_binder = providers.Singleton(
        SessionBinder,
        identity=identity_client,
        user_repo=user_repo,
        cache=state_cache,
        dispatcher=event_dispatcher,
        bootstrap_admin_email=config.bootstrap_admin_email,
    )
    user_provisioner = providers.Singleton(UserProvisioner, repo=user_repo, signup=signup_client)
    dashboard_service = providers.Singleton(DashboardService, cache=state_cache)
    financial_report_service = providers.Singleton(FinancialReportService, cache=state_cache)
    notification_service = providers.Singleton(NotificationService, cache=state_cache, store=watermark_store)

    # Facade exposto à CLI
    clinic_service = providers.Singleton(
        ClinicFacadeService,
        command_bus=command_bus,
        query_bus=query_bus,
        cache=state_cache,
        session=session_binder,
        identity=identity_client,
    )

    # Handlers: usuários
    provision_user_handler = providers.Factory(ProvisionUserHandler, provisioner=user_provisioner)
    seed_admin_handler = providers.Factory(SeedAdminHandler, repo=user_repo, provisioner=user_provisioner)
    update_user_handler = providers.Factory(UpdateUserHandler, repo=user_repo, cache=state_cache)
    update_own_profile_handler = providers.Factory(UpdateOwnProfileHandler, repo=user_repo, cache=state_cache)
    toggle_user_status_handler = providers.Factory(ToggleUserStatusHandler, repo=user_repo, cache=state_cache)

    # Handlers: salas e alocações
    create_room_handler = providers.Factory(CreateRoomHandler, repo=room_repo)
    update_room_handler = providers.Factory(UpdateRoomHandler, repo=room_repo, cache=state_cache)
    delete_room_handler = providers.Factory(DeleteRoomHandler, repo=room_repo, allocation_repo=allocation_repo)
    create_allocation_handler = providers.Factory(CreateAllocationHandler, repo=allocation_repo, cache=state_cache)
    delete_allocation_handler = providers.Factory(DeleteAllocationHandler, repo=allocation_repo)

    # Handlers: inventário e empréstimos
    create_inventory_item_handler = providers.Factory(CreateInventoryItemHandler, repo=inventory_repo)
    update_inventory_item_handler = providers.Factory(UpdateInventoryItemHandler, repo=inventory_repo, cache=state_cache)
    delete_inventory_item_handler = providers.Factory(DeleteInventoryItemHandler, repo=inventory_repo)
    request_loan_handler = providers.Factory(
        RequestLoanHandler, repo=inventory_repo, loan_repo=loan_repo, cache=state_cache
    )
    return_loan_handler = providers.Factory(
        ReturnLoanHandler, repo=inventory_repo, loan_repo=loan_repo, cache=state_cache
    )

    # Handlers: pagamentos, pacientes, documentos
    create_payment_handler = providers.Factory(CreatePaymentHandler, repo=payment_repo)
    update_payment_handler = providers.Factory(UpdatePaymentHandler, repo=payment_repo, cache=state_cache)
    delete_payment_handler = providers.Factory(DeletePaymentHandler, repo=payment_repo)
    confirm_payment_handler = providers.Factory(ConfirmPaymentHandler, repo=payment_repo, cache=state_cache)
    create_patient_handler = providers.Factory(CreatePatientHandler, repo=patient_repo)
    update_patient_handler = providers.Factory(UpdatePatientHandler, repo=patient_repo, cache=state_cache)
    delete_patient_handler = providers.Factory(DeletePatientHandler, repo=patient_repo)
    create_document_handler = providers.Factory(CreateDocumentHandler, repo=document_repo)
    delete_document_handler = providers.Factory(DeleteDocumentHandler, repo=document_repo)

    # Handlers: eventos e inscrições
    create_event_handler = providers.Factory(CreateEventHandler, repo=event_repo)
    update_event_handler = providers.Factory(UpdateEventHandler, repo=event_repo, cache=state_cache)
    delete_event_handler = providers.Factory(DeleteEventHandler, repo=event_repo, registration_repo=registration_repo)
    register_for_event_handler = providers.Factory(RegisterForEventHandler, repo=registration_repo, cache=state_cache)
    toggle_registration_status_handler = providers.Factory(
        ToggleRegistrationStatusHandler, repo=registration_repo, cache=state_cache
    )
    toggle_attendance_handler = providers.Factory(ToggleAttendanceHandler, repo=registration_repo, cache=state_cache)

    # Handlers: financeiro e configurações
    create_transaction_handler = providers.Factory(CreateTransactionHandler, repo=transaction_repo)
    update_transaction_handler = providers.Factory(UpdateTransactionHandler, repo=transaction_repo, cache=state_cache)
    delete_transaction_handler = providers.Factory(DeleteTransactionHandler, repo=transaction_repo)
    create_category_handler = providers.Factory(CreateCategoryHandler, repo=category_repo)
    rename_category_handler = providers.Factory(
        RenameCategoryHandler, repo=category_repo, transaction_repo=transaction_repo, cache=state_cache
    )
    delete_category_handler = providers.Factory(
        DeleteCategoryHandler, repo=category_repo, transaction_repo=transaction_repo, cache=state_cache
    )
    update_system_settings_handler = providers.Factory(UpdateSystemSettingsHandler, repo=settings_repo)

    # Handlers: notificações e leituras
    mark_as_read_handler = providers.Factory(MarkAsReadHandler, notification_service=notification_service)
    get_unread_count_handler = providers.Factory(GetUnreadCountHandler, notification_service=notification_service)
    get_admin_dashboard_handler = providers.Factory(GetAdminDashboardHandler, dashboard_service=dashboard_service)
    get_occupancy_matrix_handler = providers.Factory(GetOccupancyMatrixHandler, dashboard_service=dashboard_service)
    get_professional_overview_handler = providers.Factory(
        GetProfessionalOverviewHandler,
        dashboard_service=dashboard_service,
        notification_service=notification_service,
    )
    get_payments_report_handler = providers.Factory(GetPaymentsReportHandler, report_service=financial_report_service)
    get_financial_summary_handler = providers.Factory(GetFinancialSummaryHandler, report_service=financial_report_service)
    get_visible_documents_handler = providers.Factory(GetVisibleDocumentsHandler, cache=state_cache)

    def init(self):
        # Token do cliente de dados antes do bind da sessão (que já lê `users`)
        dispatcher = self.event_dispatcher()
        on_signed_in, on_signed_out = _store_token_handlers(self.store_client())
        dispatcher.subscribe(SignedInEvent, on_signed_in)
        dispatcher.subscribe(SignedOutEvent, on_signed_out)
        self.session_binder().subscribe()

        # Registrar comandos no CommandBus
        bus = self.command_bus()

        # Usuários
        bus.register(ProvisionUserCommand, self.provision_user_handler())
        bus.register(SeedAdminCommand, self.seed_admin_handler())
        bus.register(UpdateUserCommand, self.update_user_handler())
        bus.register(UpdateOwnProfileCommand, self.update_own_profile_handler())
        bus.register(ToggleUserStatusCommand, self.toggle_user_status_handler())

        # Salas / alocações
        bus.register(CreateRoomCommand, self.create_room_handler())
        bus.register(UpdateRoomCommand, self.update_room_handler())
        bus.register(DeleteRoomCommand, self.delete_room_handler())
        bus.register(CreateAllocationCommand, self.create_allocation_handler())
        bus.register(DeleteAllocationCommand, self.delete_allocation_handler())

        # Inventário / empréstimos
        bus.register(CreateInventoryItemCommand, self.create_inventory_item_handler())
        bus.register(UpdateInventoryItemCommand, self.update_inventory_item_handler())
        bus.register(DeleteInventoryItemCommand, self.delete_inventory_item_handler())
        bus.register(RequestLoanCommand, self.request_loan_handler())
        bus.register(ReturnLoanCommand, self.return_loan_handler())

        # Pagamentos / pacientes / documentos
        bus.register(CreatePaymentCommand, self.create_payment_handler())
        bus.register(UpdatePaymentCommand, self.update_payment_handler())
        bus.register(DeletePaymentCommand, self.delete_payment_handler())
        bus.register(ConfirmPaymentCommand, self.confirm_payment_handler())
        bus.register(CreatePatientCommand, self.create_patient_handler())
        bus.register(UpdatePatientCommand, self.update_patient_handler())
        bus.register(DeletePatientCommand, self.delete_patient_handler())
        bus.register(CreateDocumentCommand, self.create_document_handler())
        bus.register(DeleteDocumentCommand, self.delete_document_handler())

        # Eventos / inscrições
        bus.register(CreateEventCommand, self.create_event_handler())
        bus.register(UpdateEventCommand, self.update_event_handler())
        bus.register(DeleteEventCommand, self.delete_event_handler())
        bus.register(RegisterForEventCommand, self.register_for_event_handler())
        bus.register(ToggleRegistrationStatusCommand, self.toggle_registration_status_handler())
        bus.register(ToggleAttendanceCommand, self.toggle_attendance_handler())

        # Financeiro / configurações / notificações
        bus.register(CreateTransactionCommand, self.create_transaction_handler())
        bus.register(UpdateTransactionCommand, self.update_transaction_handler())
        bus.register(DeleteTransactionCommand, self.delete_transaction_handler())
        bus.register(CreateCategoryCommand, self.create_category_handler())
        bus.register(RenameCategoryCommand, self.rename_category_handler())
        bus.register(DeleteCategoryCommand, self.delete_category_handler())
        bus.register(UpdateSystemSettingsCommand, self.update_system_settings_handler())
        bus.register(MarkAsReadCommand, self.mark_as_read_handler())

        # Registrar queries no QueryBus
        qb = self.query_bus()
        qb.register(GetAdminDashboardQuery, self.get_admin_dashboard_handler())
        qb.register(GetOccupancyMatrixQuery, self.get_occupancy_matrix_handler())
        qb.register(GetProfessionalOverviewQuery, self.get_professional_overview_handler())
        qb.register(GetPaymentsReportQuery, self.get_payments_report_handler())
        qb.register(GetFinancialSummaryQuery, self.get_financial_summary_handler())
        qb.register(GetVisibleDocumentsQuery, self.get_visible_documents_handler())
        qb.register(GetUnreadCountQuery, self.get_unread_count_handler())


def setup_di_container_from_settings(settings):
    """Monta o container a partir de `config.settings` (idempotente)."""
    global container  # noqa: PLW0603
    if container is not None:
        structlog.get_logger().debug("DI container já inicializado.")
        return container

    # ------- INSTANCIAÇÃO E CONFIG -------
    c = Container()
    c.config.store.url.from_value(settings.CLINICFLOW_STORE_URL)
    c.config.store.anon_key.from_value(settings.CLINICFLOW_ANON_KEY)
    c.config.store.api_key.from_value(settings.CLINICFLOW_SERVICE_KEY or settings.CLINICFLOW_ANON_KEY)
    c.config.store.timeout.from_value(settings.CLINICFLOW_TIMEOUT)
    c.config.store.retries.from_value(settings.CLINICFLOW_RETRIES)
    c.config.redis.host.from_value(settings.REDIS_HOST)
    c.config.redis.port.from_value(settings.REDIS_PORT)
    c.config.redis.db.from_value(settings.REDIS_DB)
    c.config.redis.password.from_value(settings.REDIS_PASSWORD)
    c.config.system_name.from_value(settings.CLINICFLOW_SYSTEM_NAME)
    c.config.refresh_workers.from_value(settings.CLINICFLOW_REFRESH_WORKERS)
    c.config.bootstrap_admin_email.from_value(settings.CLINICFLOW_BOOTSTRAP_ADMIN_EMAIL)

    # Inicializa o CommandBus com todos os handlers
    Container.init(c)
    container = c
    return container
