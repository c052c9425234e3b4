from datetime import datetime, timezone
from unittest import TestCase

from clinicflow.core.application.commands.notification_commands import MarkAsReadCommand
from clinicflow.core.application.queries.notification_queries import GetUnreadCountQuery
from clinicflow.core.application.services.notification_service import NotificationService
from clinicflow.core.domain.services.notification_policy import as_utc, count_unread
from tests.helpers.container import build_container
from tests.helpers.fake_store import FakeRemoteStore, InMemoryWatermarkStore
from tests.helpers.rows import document_row, payment_row, user_row


class UnreadCountTests(TestCase):
    def setUp(self) -> None:
        self.store = FakeRemoteStore()
        self.store.seed("users", user_row("u1"), user_row("u2"), user_row("adm", role="ADMIN"))
        self.store.seed(
            "documents",
            document_row("d1", "Regimento", "2024-03-01T10:00:00+00:00"),
            document_row("d2", "Contrato", "2024-03-02T10:00:00+00:00", target="u1"),
            document_row("d3", "Contrato", "2024-03-03T10:00:00+00:00", target="u2"),
        )
        self.store.seed(
            "payments",
            payment_row("p1", "u1", 100.0, "2024-03-05", created="2024-03-01T08:00:00+00:00"),
            payment_row("p2", "u2", 100.0, "2024-03-05", created="2024-03-01T08:00:00+00:00"),
        )
        self.watermarks = InMemoryWatermarkStore()
        self.container = build_container(self.store, watermarks=self.watermarks)
        self.cache = self.container.state_cache()
        self.cache.load_all()
        self.bus = self.container.command_bus()
        self.queries = self.container.query_bus()

    def _unread(self, kind: str, user_id: str) -> int:
        return self.queries.dispatch(GetUnreadCountQuery(kind=kind, user_id=user_id))

    def test_without_watermark_everything_in_scope_is_unread(self) -> None:
        self.assertEqual(self._unread("documents", "u1"), 2)
        self.assertEqual(self._unread("payments", "u1"), 1)

    def test_admin_never_has_unread(self) -> None:
        self.assertEqual(self._unread("documents", "adm"), 0)
        self.assertEqual(self._unread("payments", "adm"), 0)

    def test_mark_as_read_then_newer_record(self) -> None:
        self.bus.dispatch(MarkAsReadCommand(kind="documents", user_id="u1"))
        self.assertEqual(self._unread("documents", "u1"), 0)
        self.assertEqual(self._unread("payments", "u1"), 1)
        # marca de outro usuário não muda
        self.assertEqual(self._unread("documents", "u2"), 2)

        self.store.seed("documents", document_row("d4", "Aviso", "2099-01-01T00:00:00+00:00"))
        self.cache.load_all()
        self.assertEqual(self._unread("documents", "u1"), 1)

    def test_record_at_watermark_is_read(self) -> None:
        self.watermarks.set("documents", "u1", datetime(2024, 3, 2, 10, tzinfo=timezone.utc))
        self.assertEqual(self._unread("documents", "u1"), 0)
        self.watermarks.set("documents", "u1", datetime(2024, 3, 1, 10, tzinfo=timezone.utc))
        self.assertEqual(self._unread("documents", "u1"), 1)

    def test_watermark_count_is_monotonic(self) -> None:
        ticks = iter(
            [
                datetime(2024, 3, 1, 9, tzinfo=timezone.utc),
                datetime(2024, 3, 1, 12, tzinfo=timezone.utc),
                datetime(2024, 3, 2, 12, tzinfo=timezone.utc),
            ]
        )
        service = NotificationService(self.cache, InMemoryWatermarkStore(), clock=lambda: next(ticks))
        counts = []
        for _ in range(3):
            service.mark_as_read("documents", "u1")
            counts.append(service.unread_count("documents", "u1"))
        self.assertEqual(counts, [2, 1, 0])
        self.assertEqual(sorted(counts, reverse=True), counts)

    def test_invalid_kind(self) -> None:
        service = NotificationService(self.cache, InMemoryWatermarkStore())
        with self.assertRaises(ValueError):
            service.mark_as_read("chat", "u1")


class NotificationPolicyTests(TestCase):
    def test_naive_timestamps_are_utc(self) -> None:
        self.assertEqual(as_utc(datetime(2024, 3, 1, 10)), datetime(2024, 3, 1, 10, tzinfo=timezone.utc))

    def test_count_unread_is_strict(self) -> None:
        mark = datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
        created = [datetime(2024, 3, 1, 10), datetime(2024, 3, 1, 10, 0, 1, tzinfo=timezone.utc)]
        self.assertEqual(count_unread(created, mark), 1)
        self.assertEqual(count_unread(created, None), 2)
