from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class AuthSession:
    """Sessão emitida pelo provedor de identidade."""
    access_token: str
    user_id: str
    email: str
    expires_at: datetime | None = None
    refresh_token: str | None = None


class IdentityProvider(ABC):
    """Porta para o provedor de identidade hospedado."""

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    @abstractmethod
    def sign_out(self) -> None:
        ...

    @abstractmethod
    def get_session(self) -> AuthSession | None:
        """Sessão atual (None quando deslogado ou expirada)."""
        ...

    @abstractmethod
    def reset_password_for_email(self, email: str) -> None:
        ...

    @abstractmethod
    def update_password(self, new_password: str) -> None:
        """Troca a senha do usuário da sessão atual."""
        ...


class SignUpProvider(ABC):
    """
    Cliente de cadastro com privilégio limitado: cria a identidade sem
    substituir a sessão do administrador que está provisionando.
    """

    @abstractmethod
    def sign_up(self, email: str, password: str) -> str:
        """Cria a identidade e retorna o id emitido pelo provedor."""
        ...
