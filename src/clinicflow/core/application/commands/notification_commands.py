from dataclasses import dataclass

from clinicflow.core.application.cqrs import CommandDTO
from clinicflow.core.domain.constants import NotificationKind


@dataclass(frozen=True)
class MarkAsReadCommand(CommandDTO):
    """Grava a marca "lido até agora"; não toca o backend remoto."""
    refreshes_cache = False

    kind: NotificationKind
    user_id: str
