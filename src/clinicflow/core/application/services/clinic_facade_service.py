import structlog

from clinicflow.core.application.cqrs import BaseService, CommandBus, QueryBus
from clinicflow.core.application.services.session_binder import SessionBinder
from clinicflow.core.application.services.state_cache import AggregateStateCache, CacheSnapshot
from clinicflow.core.domain.entities.user_entity import UserEntity
from clinicflow.core.domain.services.identity_provider import IdentityProvider

logger = structlog.get_logger(__name__)


class ClinicFacadeService(BaseService):
    """
    Fachada usada pela CLI (e por qualquer interface futura).

    - `execute()` / `query()` via buses
    - sessão: `sign_in`, `sign_out`, recuperação e troca de senha
    - leitura direta do snapshot atual
    """

    def __init__(  # noqa: PLR0913
        self,
        command_bus: CommandBus,
        query_bus: QueryBus,
        cache: AggregateStateCache,
        session: SessionBinder,
        identity: IdentityProvider,
    ) -> None:
        super().__init__(command_bus, query_bus)
        self.cache = cache
        self.session = session
        self.identity = identity

    @property
    def snapshot(self) -> CacheSnapshot:
        return self.cache.snapshot

    @property
    def current_user(self) -> UserEntity | None:
        return self.session.current_user

    def refresh(self) -> CacheSnapshot:
        return self.cache.load_all()

    # ------------------------------------------------ sessão
    def sign_in(self, email: str, password: str) -> UserEntity | None:
        # o SignedInEvent publicado pelo provedor faz o bind
        self.identity.sign_in_with_password(email, password)
        return self.session.current_user

    def sign_out(self) -> None:
        self.identity.sign_out()

    def request_password_reset(self, email: str) -> None:
        self.identity.reset_password_for_email(email)

    def update_password(self, new_password: str) -> None:
        self.identity.update_password(new_password)
        self.session.password_recovery = False
        logger.info("session.password_updated")
