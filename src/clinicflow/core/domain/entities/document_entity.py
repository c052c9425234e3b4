from dataclasses import dataclass
from datetime import datetime

from clinicflow.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class DocumentEntity(EntityMixin):
    id: str
    title: str
    link_url: str
    created_at: datetime
    target_user_id: str | None = None   # None ⇒ todos os profissionais

    @property
    def is_private(self) -> bool:
        return self.target_user_id is not None

    def is_visible_to(self, user_id: str) -> bool:
        return self.target_user_id is None or self.target_user_id == user_id
