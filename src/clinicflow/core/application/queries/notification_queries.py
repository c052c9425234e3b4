from dataclasses import dataclass

from clinicflow.core.application.cqrs import QueryDTO
from clinicflow.core.domain.constants import NotificationKind


@dataclass(frozen=True)
class GetUnreadCountQuery(QueryDTO):
    kind: NotificationKind
    user_id: str
