from io import StringIO
from types import SimpleNamespace
from unittest import TestCase
from unittest.mock import patch

from django.core.management import call_command, execute_from_command_line, get_commands
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from clinicflow.adapters.cli.management.commands import refresh_cache, seed_admin
from clinicflow.adapters.config import composition_root
from clinicflow.adapters.observability.metrics import render_metrics
from tests.helpers.container import build_container
from tests.helpers.fake_store import FakeIdentity, FakeRemoteStore
from tests.helpers.rows import room_row, user_row

SETTINGS = SimpleNamespace(
    CLINICFLOW_STORE_URL="http://store.example.com",
    CLINICFLOW_ANON_KEY="anon",
    CLINICFLOW_SERVICE_KEY="",
    CLINICFLOW_TIMEOUT=1.0,
    CLINICFLOW_RETRIES=0,
    CLINICFLOW_SYSTEM_NAME="ClinicFlow",
    CLINICFLOW_REFRESH_WORKERS=2,
    CLINICFLOW_BOOTSTRAP_ADMIN_EMAIL="",
    REDIS_HOST="localhost",
    REDIS_PORT=6379,
    REDIS_DB=0,
    REDIS_PASSWORD=None,
)


class SeedAdminCommandTests(SimpleTestCase):
    def _call(self, container, **opts) -> str:
        out = StringIO()
        with patch.object(seed_admin, "setup_di_container_from_settings", return_value=container):
            call_command("seed_admin", stdout=out, **opts)
        return out.getvalue()

    def test_provisions_and_prints_temporary_password(self) -> None:
        store = FakeRemoteStore()
        output = self._call(build_container(store), email="chefe@example.com", name="Chefe")
        self.assertIn("Senha temporária", output)
        self.assertEqual(store.rows("users")[0]["role"], "ADMIN")

    def test_promotes_existing(self) -> None:
        store = FakeRemoteStore()
        store.seed("users", user_row("u1", email="chefe@example.com"))
        output = self._call(build_container(store), email="chefe@example.com")
        self.assertIn("promovido a ADMIN", output)

    def test_failure_raises_command_error(self) -> None:
        identity = FakeIdentity()
        identity.fail_sign_up = True
        with self.assertRaisesMessage(CommandError, "chefe@example.com"):
            self._call(build_container(FakeRemoteStore(), identity), email="chefe@example.com")

    def test_failure_exits_with_code_one_from_command_line(self) -> None:
        identity = FakeIdentity()
        identity.fail_sign_up = True
        container = build_container(FakeRemoteStore(), identity)
        with patch.object(seed_admin, "setup_di_container_from_settings", return_value=container), \
                patch("sys.stdout", new_callable=StringIO), \
                patch("sys.stderr", new_callable=StringIO) as err, \
                self.assertRaises(SystemExit) as exit_info:
            execute_from_command_line(["manage.py", "seed_admin", "--email", "chefe@example.com"])
        self.assertEqual(exit_info.exception.code, 1)
        self.assertIn("chefe@example.com", err.getvalue())


class RefreshCacheCommandTests(SimpleTestCase):
    def _run(self, store: FakeRemoteStore, *args: str) -> str:
        out = StringIO()
        with patch.object(refresh_cache, "setup_di_container_from_settings", return_value=build_container(store)):
            call_command("refresh_cache", *args, stdout=out)
        return out.getvalue()

    def test_prints_count_per_collection(self) -> None:
        store = FakeRemoteStore()
        store.seed("rooms", room_row("r1"), room_row("r2"))
        output = self._run(store)
        self.assertRegex(output, r"rooms\s+2")
        self.assertNotIn("⚠️", output)

    def test_strict_fails_on_partial_refresh(self) -> None:
        store = FakeRemoteStore()
        store.fail_on("loans", "select")
        with self.assertRaises(CommandError):
            self._run(store, "--strict")
        self.assertIn("⚠️", self._run(store))

    def test_metrics_output(self) -> None:
        output = self._run(FakeRemoteStore(), "--metrics")
        self.assertIn("clinicflow_cache_refresh_total", output)


class DiscoveryTests(TestCase):
    def test_commands_belong_to_cli_app(self) -> None:
        commands = get_commands()
        self.assertEqual(commands["seed_admin"], "clinicflow.adapters.cli")
        self.assertEqual(commands["refresh_cache"], "clinicflow.adapters.cli")

    def test_render_metrics_content_type(self) -> None:
        payload, content_type = render_metrics()
        self.assertIsInstance(payload, bytes)
        self.assertTrue(content_type.startswith("text/plain"))


class CompositionRootTests(TestCase):
    def tearDown(self) -> None:
        composition_root.container = None

    def test_setup_is_idempotent_and_wires_keys(self) -> None:
        composition_root.container = None
        settings = SimpleNamespace(**{**vars(SETTINGS), "CLINICFLOW_SERVICE_KEY": "service"})
        first = composition_root.setup_di_container_from_settings(settings)
        second = composition_root.setup_di_container_from_settings(settings)
        self.assertIs(first, second)

        self.assertEqual(first.store_client().api_key, "service")
        self.assertEqual(first.store_client().base_url, "http://store.example.com/rest/v1/")
        self.assertEqual(first.signup_client().api_key, "anon")
        self.assertEqual(first.identity_client().base_url, "http://store.example.com/auth/v1")
