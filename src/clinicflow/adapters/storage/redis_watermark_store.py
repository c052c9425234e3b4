from datetime import datetime

import structlog
from redis import Redis

from clinicflow.core.domain.repositories.watermark_store import WatermarkStore

logger = structlog.get_logger(__name__)


class RedisWatermarkStore(WatermarkStore):
    """Marcas "lido até" no Redis: chave `<kind>_<userId>`, valor ISO-8601."""

    def __init__(self, client: Redis, prefix: str = ""):
        self.client = client
        self.prefix = prefix

    def _key(self, kind: str, user_id: str) -> str:
        return f"{self.prefix}{self.key(kind, user_id)}"

    def get(self, kind: str, user_id: str) -> datetime | None:
        raw = self.client.get(self._key(kind, user_id))
        if raw is None:
            return None
        value = raw.decode() if isinstance(raw, bytes) else raw
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            # marca corrompida conta como ausente (tudo não lido)
            logger.warning("watermark.invalid", kind=kind, user_id=user_id, value=value)
            return None

    def set(self, kind: str, user_id: str, moment: datetime) -> None:
        self.client.set(self._key(kind, user_id), moment.isoformat())
