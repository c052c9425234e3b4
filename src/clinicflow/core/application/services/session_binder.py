import structlog

from clinicflow.core.domain.constants import Role
from clinicflow.core.domain.entities.user_entity import UserEntity
from clinicflow.core.domain.events.events import PasswordRecoveryEvent, SignedInEvent, SignedOutEvent
from clinicflow.core.domain.exceptions import PermissionDeniedError
from clinicflow.core.domain.repositories.entity_repositories import UserRepository
from clinicflow.core.domain.services.event_dispatcher import EventDispatcher
from clinicflow.core.domain.services.identity_provider import IdentityProvider

from clinicflow.core.application.services.state_cache import AggregateStateCache

logger = structlog.get_logger(__name__)


class SessionBinder:
    """
    Liga a sessão do provedor de identidade a um perfil da tabela `users`.

    Sessão sem perfil correspondente ⇒ `current_user` fica None (sem acesso).
    """

    def __init__(  # noqa: PLR0913
        self,
        identity: IdentityProvider,
        user_repo: UserRepository,
        cache: AggregateStateCache,
        dispatcher: EventDispatcher,
        bootstrap_admin_email: str = "",
    ):
        self.identity = identity
        self.user_repo = user_repo
        self.cache = cache
        self.dispatcher = dispatcher
        self.bootstrap_admin_email = (bootstrap_admin_email or "").strip().lower()
        self.current_user: UserEntity | None = None
        self.password_recovery = False

    def subscribe(self) -> None:
        self.dispatcher.subscribe(SignedInEvent, self._on_signed_in)
        self.dispatcher.subscribe(SignedOutEvent, self._on_signed_out)
        self.dispatcher.subscribe(PasswordRecoveryEvent, self._on_password_recovery)

    def start(self) -> UserEntity | None:
        """Retoma uma sessão persistida, se houver."""
        session = self.identity.get_session()
        if session is None or not session.email:
            logger.info("session.none")
            return None
        return self.bind(session.email)

    def bind(self, email: str) -> UserEntity | None:
        user = self.user_repo.find_by_email(email)
        if user is None:
            logger.warning("session.no_profile", email=email)
            self.current_user = None
            return None

        if self.bootstrap_admin_email and email.lower() == self.bootstrap_admin_email and not user.is_admin:
            self.user_repo.update(user.id, {"role": "ADMIN"})
            user.role = "ADMIN"
            logger.warning("session.bootstrap_admin_promoted", user_id=user.id)

        self.current_user = user
        structlog.contextvars.bind_contextvars(user_id=user.id)
        logger.info("session.bound", user_id=user.id, role=user.role)
        self.cache.load_all()
        return user

    def unbind(self) -> None:
        if self.current_user is not None:
            logger.info("session.unbound", user_id=self.current_user.id)
        self.current_user = None
        self.password_recovery = False
        structlog.contextvars.unbind_contextvars("user_id")

    def require_role(self, role: Role | None = None) -> UserEntity:
        """
        Retorna o usuário da sessão ou PermissionDeniedError se não houver
        perfil, se estiver inativo ou se o papel não bater.
        """
        user = self.current_user
        if user is None:
            raise PermissionDeniedError("Nenhum perfil vinculado à sessão.")
        if not user.is_active:
            raise PermissionDeniedError("Usuário inativo.")
        if role is not None and user.role != role:
            raise PermissionDeniedError(f"Operação restrita a {role}.")
        return user

    # ------------------------------------------------------------------ events
    def _on_signed_in(self, event: SignedInEvent) -> None:
        self.bind(event.email)

    def _on_signed_out(self, event: SignedOutEvent) -> None:
        self.unbind()

    def _on_password_recovery(self, event: PasswordRecoveryEvent) -> None:
        # o link de recuperação abre uma sessão válida; a troca de senha vem depois
        self.password_recovery = True
        self.bind(event.email)
