from datetime import datetime, timedelta, timezone
from unittest import TestCase
from unittest.mock import patch

import httpx
import jwt

from clinicflow.adapters.api_clients.identity_client import IdentityClient, SignUpClient
from clinicflow.core.domain.events.events import PasswordRecoveryEvent, SignedInEvent, SignedOutEvent
from clinicflow.core.domain.exceptions import AuthenticationError, IdentityError
from clinicflow.core.domain.services.event_dispatcher import EventDispatcher

HTTPX_REQUEST = "clinicflow.adapters.api_clients.identity_client.httpx.request"


def _token(sub: str = "u1", email: str = "ana@example.com", ttl: timedelta = timedelta(hours=1)) -> str:
    exp = int((datetime.now(timezone.utc) + ttl).timestamp())
    return jwt.encode({"sub": sub, "email": email, "exp": exp}, "segredo-de-teste-com-32-bytes-ok!", algorithm="HS256")


def _response(status: int, body: dict) -> httpx.Response:
    return httpx.Response(status, json=body, request=httpx.Request("POST", "http://id.example.com"))


class IdentityClientTests(TestCase):
    def setUp(self) -> None:
        self.dispatcher = EventDispatcher()
        self.events = []
        for evt in (SignedInEvent, SignedOutEvent, PasswordRecoveryEvent):
            self.dispatcher.subscribe(evt, self.events.append)
        self.client = IdentityClient("http://id.example.com", "anon", self.dispatcher, timeout=1)

    def test_sign_in_publishes_event_and_keeps_session(self) -> None:
        token = _token()
        body = {"access_token": token, "refresh_token": "rt", "user": {"id": "u1", "email": "ana@example.com"}}
        with patch(HTTPX_REQUEST, return_value=_response(200, body)) as req:
            session = self.client.sign_in_with_password("ana@example.com", "s3nha")

        method, url = req.call_args.args
        self.assertEqual((method, url), ("POST", "http://id.example.com/auth/v1/token"))
        self.assertEqual(req.call_args.kwargs["params"], {"grant_type": "password"})
        self.assertEqual(req.call_args.kwargs["headers"]["apikey"], "anon")

        self.assertEqual((session.user_id, session.email, session.refresh_token), ("u1", "ana@example.com", "rt"))
        self.assertIs(self.client.get_session(), session)
        self.assertIsInstance(self.events[-1], SignedInEvent)
        self.assertEqual(self.events[-1].access_token, token)

    def test_invalid_credentials_are_not_retried(self) -> None:
        with patch(HTTPX_REQUEST, return_value=_response(400, {"error_description": "Invalid login credentials"})) as req:
            with self.assertRaises(AuthenticationError) as ctx:
                self.client.sign_in_with_password("ana@example.com", "errada")
        self.assertEqual(req.call_count, 1)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("Invalid login credentials", str(ctx.exception))
        self.assertEqual(self.events, [])

    def test_sign_out_always_publishes(self) -> None:
        with patch(HTTPX_REQUEST, return_value=_response(200, {"access_token": _token()})):
            self.client.sign_in_with_password("ana@example.com", "s3nha")
        with patch(HTTPX_REQUEST, return_value=_response(401, {"msg": "expired"})):
            with self.assertRaises(AuthenticationError):
                self.client.sign_out()
        self.assertIsInstance(self.events[-1], SignedOutEvent)
        self.assertIsNone(self.client.get_session())

    def test_expired_session_without_refresh_token_is_dropped(self) -> None:
        with patch(HTTPX_REQUEST, return_value=_response(200, {"access_token": _token(ttl=timedelta(seconds=-5))})):
            self.client.sign_in_with_password("ana@example.com", "s3nha")
        self.assertIsNone(self.client.get_session())

    def test_expired_session_is_refreshed(self) -> None:
        expired = {"access_token": _token(ttl=timedelta(seconds=-5)), "refresh_token": "rt"}
        with patch(HTTPX_REQUEST, return_value=_response(200, expired)):
            self.client.sign_in_with_password("ana@example.com", "s3nha")
        fresh = _token()
        with patch(HTTPX_REQUEST, return_value=_response(200, {"access_token": fresh, "refresh_token": "rt2"})) as req:
            session = self.client.get_session()
        self.assertEqual(session.access_token, fresh)
        self.assertEqual(req.call_args.kwargs["params"], {"grant_type": "refresh_token"})

    def test_update_password_requires_session(self) -> None:
        with self.assertRaises(AuthenticationError):
            self.client.update_password("nova")

    def test_recover_session_publishes_recovery(self) -> None:
        session = self.client.recover_session(_token())
        self.assertEqual(session.email, "ana@example.com")
        self.assertIsInstance(self.events[-1], PasswordRecoveryEvent)
        with patch(HTTPX_REQUEST, return_value=_response(200, {"id": "u1"})) as req:
            self.client.update_password("nova")
        self.assertEqual(req.call_args.args[0], "PUT")
        self.assertEqual(req.call_args.kwargs["json"], {"password": "nova"})


class SignUpClientTests(TestCase):
    def setUp(self) -> None:
        self.client = SignUpClient("http://id.example.com", "anon", timeout=1)

    def test_returns_issued_id(self) -> None:
        with patch(HTTPX_REQUEST, return_value=_response(200, {"user": {"id": "new-id"}})):
            self.assertEqual(self.client.sign_up("bia@example.com", "x"), "new-id")
        with patch(HTTPX_REQUEST, return_value=_response(200, {"id": "flat-id"})):
            self.assertEqual(self.client.sign_up("bia@example.com", "x"), "flat-id")

    def test_already_registered(self) -> None:
        with patch(HTTPX_REQUEST, return_value=_response(422, {"msg": "User already registered"})) as req:
            with self.assertRaises(IdentityError) as ctx:
                self.client.sign_up("bia@example.com", "x")
        self.assertNotIsInstance(ctx.exception, AuthenticationError)
        self.assertEqual(req.call_count, 1)


class RetryPolicyTests(TestCase):
    def test_sign_up_timeout_is_not_resent(self) -> None:
        client = SignUpClient("http://id.example.com", "anon", timeout=1)
        outcomes = [httpx.ReadTimeout("timeout"), _response(200, {"id": "u9"})]
        with patch(HTTPX_REQUEST, side_effect=outcomes) as req:
            with self.assertRaises(IdentityError):
                client.sign_up("bia@example.com", "x")
        self.assertEqual(req.call_count, 1)

    def test_sign_in_timeout_is_not_resent(self) -> None:
        client = IdentityClient("http://id.example.com", "anon", EventDispatcher(), timeout=1)
        with patch(HTTPX_REQUEST, side_effect=httpx.ConnectTimeout("timeout")) as req:
            with self.assertRaises(IdentityError):
                client.sign_in_with_password("ana@example.com", "s3nha")
        self.assertEqual(req.call_count, 1)

    def test_password_update_is_retried_after_timeout(self) -> None:
        client = IdentityClient("http://id.example.com", "anon", EventDispatcher(), timeout=1)
        client.recover_session(_token())
        outcomes = [httpx.ReadTimeout("timeout"), _response(200, {"id": "u1"})]
        with patch(HTTPX_REQUEST, side_effect=outcomes) as req, patch("time.sleep"):
            client.update_password("nova")
        self.assertEqual(req.call_count, 2)
        self.assertEqual(req.call_args.args[0], "PUT")
