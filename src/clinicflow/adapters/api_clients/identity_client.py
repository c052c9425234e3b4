import time
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

import backoff
import httpx
import jwt
import structlog

from clinicflow.adapters.observability.metrics import IDENTITY_FAILURE, IDENTITY_LATENCY, IDENTITY_SUCCESS
from clinicflow.core.domain.events.events import PasswordRecoveryEvent, SignedInEvent, SignedOutEvent
from clinicflow.core.domain.exceptions import AuthenticationError, IdentityError
from clinicflow.core.domain.services.event_dispatcher import EventDispatcher
from clinicflow.core.domain.services.identity_provider import AuthSession, IdentityProvider, SignUpProvider

logger = structlog.get_logger(__name__)


def _is_client_error(exc: Exception) -> bool:
    # 4xx não melhora com retry
    return (
        isinstance(exc, httpx.HTTPStatusError)
        and exc.response.status_code < HTTPStatus.INTERNAL_SERVER_ERROR
    )


def decode_claims(token: str) -> dict[str, Any]:
    """Lê as claims do access token sem verificar assinatura (quem valida é o backend)."""
    return jwt.decode(token, options={"verify_signature": False})


class BaseIdentityClient:
    """
    HTTP para o provedor de identidade (`/auth/v1`), com métricas.

    Só métodos idempotentes têm retry; POST (`signup`, `token`, `logout`,
    `recover`) é enviado uma única vez, mesmo após timeout.
    """

    DEFAULT_TIMEOUT = 10
    RETRY_METHODS = frozenset({"GET", "PUT", "DELETE"})

    def __init__(self, base_url: str, api_key: str, timeout: float | None = None) -> None:
        self.base_url = base_url.rstrip("/") + "/auth/v1"
        self.api_key = api_key
        self.timeout = timeout or self.DEFAULT_TIMEOUT

    def _request(self, operation: str, method: str, path: str, token: str | None = None, **kw) -> httpx.Response:
        headers = {"apikey": self.api_key, "Authorization": f"Bearer {token or self.api_key}"}
        start = time.perf_counter()
        try:
            resp = httpx.request(
                method, f"{self.base_url}/{path.lstrip('/')}", headers=headers, timeout=self.timeout, **kw
            )
            if resp.status_code >= HTTPStatus.BAD_REQUEST:
                raise httpx.HTTPStatusError("Bad status", request=resp.request, response=resp)
            IDENTITY_SUCCESS.labels(operation).inc()
            return resp
        except Exception:
            IDENTITY_FAILURE.labels(operation).inc()
            raise
        finally:
            IDENTITY_LATENCY.labels(operation).observe(time.perf_counter() - start)

    _retrying_request = backoff.on_exception(
        backoff.expo, httpx.HTTPError, max_tries=3, jitter=None, giveup=_is_client_error
    )(_request)

    def _call(self, operation: str, method: str, path: str, **kw) -> httpx.Response:
        """Traduz falhas HTTP para IdentityError/AuthenticationError."""
        send = self._retrying_request if method in self.RETRY_METHODS else self._request
        try:
            return send(operation, method, path, **kw)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = _error_message(exc.response)
            logger.warning("identity.rejected", operation=operation, status_code=status, message=message)
            cls = (
                AuthenticationError
                if status in (HTTPStatus.BAD_REQUEST, HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN)
                else IdentityError
            )
            raise cls(f"{operation}: {message}", status_code=status) from exc
        except httpx.HTTPError as exc:
            logger.error("identity.unreachable", operation=operation, error=str(exc))
            raise IdentityError(f"{operation}: {exc}") from exc


class IdentityClient(BaseIdentityClient, IdentityProvider):
    """
    Sessão do usuário logado. Mudanças de estado são publicadas no
    EventDispatcher (SignedIn / SignedOut / PasswordRecovery).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        dispatcher: EventDispatcher,
        timeout: float | None = None,
    ) -> None:
        super().__init__(base_url, api_key, timeout)
        self.dispatcher = dispatcher
        self._session: AuthSession | None = None

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        resp = self._call(
            "sign_in", "POST", "token", params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = _session_from_payload(resp.json())
        self._session = session
        logger.info("identity.signed_in", user_id=session.user_id)
        self.dispatcher.dispatch(
            SignedInEvent(email=session.email, user_id=session.user_id, access_token=session.access_token)
        )
        return session

    def sign_out(self) -> None:
        session, self._session = self._session, None
        try:
            if session is not None:
                self._call("sign_out", "POST", "logout", token=session.access_token)
        finally:
            logger.info("identity.signed_out")
            self.dispatcher.dispatch(SignedOutEvent(email=session.email if session else None))

    def get_session(self) -> AuthSession | None:
        session = self._session
        if session is None:
            return None
        if session.expires_at is None or session.expires_at > datetime.now(timezone.utc):
            return session
        if not session.refresh_token:
            self._session = None
            return None
        return self._refresh(session)

    def reset_password_for_email(self, email: str) -> None:
        self._call("recover", "POST", "recover", json={"email": email})
        logger.info("identity.recovery_sent")

    def update_password(self, new_password: str) -> None:
        session = self.get_session()
        if session is None:
            raise AuthenticationError("Nenhuma sessão ativa para trocar a senha.")
        self._call("update_user", "PUT", "user", token=session.access_token, json={"password": new_password})

    def recover_session(self, access_token: str, refresh_token: str | None = None) -> AuthSession:
        """Abre a sessão a partir do token do link de recuperação de senha."""
        claims = decode_claims(access_token)
        session = AuthSession(
            access_token=access_token,
            user_id=claims.get("sub", ""),
            email=claims.get("email", ""),
            expires_at=_exp(claims),
            refresh_token=refresh_token,
        )
        self._session = session
        self.dispatcher.dispatch(PasswordRecoveryEvent(email=session.email, access_token=access_token))
        return session

    def _refresh(self, session: AuthSession) -> AuthSession | None:
        try:
            resp = self._call(
                "refresh", "POST", "token", params={"grant_type": "refresh_token"},
                json={"refresh_token": session.refresh_token},
            )
        except AuthenticationError:
            logger.info("identity.session_expired", user_id=session.user_id)
            self._session = None
            return None
        self._session = _session_from_payload(resp.json())
        return self._session


class SignUpClient(BaseIdentityClient, SignUpProvider):
    """Cadastro com a chave anônima; nunca guarda nem troca a sessão atual."""

    def sign_up(self, email: str, password: str) -> str:
        resp = self._call("sign_up", "POST", "signup", json={"email": email, "password": password})
        payload = resp.json()
        user = payload.get("user") or payload
        user_id = user.get("id")
        if not user_id:
            raise IdentityError("Cadastro sem id de usuário na resposta.")
        return user_id


# ---------------------------------------------------------------------------
def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(body, dict):
        return body.get("error_description") or body.get("msg") or body.get("message") or str(body)
    return str(body)


def _exp(claims: dict[str, Any]) -> datetime | None:
    exp = claims.get("exp")
    return datetime.fromtimestamp(exp, timezone.utc) if exp else None


def _session_from_payload(payload: dict[str, Any]) -> AuthSession:
    token = payload["access_token"]
    claims = decode_claims(token)
    user = payload.get("user") or {}
    return AuthSession(
        access_token=token,
        user_id=user.get("id") or claims.get("sub", ""),
        email=user.get("email") or claims.get("email", ""),
        expires_at=_exp(claims),
        refresh_token=payload.get("refresh_token"),
    )
