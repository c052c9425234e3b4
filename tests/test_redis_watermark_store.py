from datetime import datetime, timezone
from unittest import TestCase
from unittest.mock import MagicMock

from clinicflow.adapters.storage.redis_watermark_store import RedisWatermarkStore


class RedisWatermarkStoreTests(TestCase):
    def setUp(self) -> None:
        self.redis = MagicMock()
        self.store = RedisWatermarkStore(self.redis, prefix="clinicflow:")

    def test_set_uses_kind_and_user_key(self) -> None:
        moment = datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
        self.store.set("documents", "u1", moment)
        self.redis.set.assert_called_once_with("clinicflow:documents_u1", "2024-03-01T10:00:00+00:00")

    def test_get_parses_iso_value(self) -> None:
        self.redis.get.return_value = b"2024-03-01T10:00:00+00:00"
        self.assertEqual(self.store.get("payments", "u1"), datetime(2024, 3, 1, 10, tzinfo=timezone.utc))
        self.redis.get.assert_called_once_with("clinicflow:payments_u1")

    def test_missing_or_corrupt_value_is_none(self) -> None:
        self.redis.get.return_value = None
        self.assertIsNone(self.store.get("documents", "u1"))
        self.redis.get.return_value = "ontem"
        self.assertIsNone(self.store.get("documents", "u1"))
