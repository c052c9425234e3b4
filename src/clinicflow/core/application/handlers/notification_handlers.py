from datetime import datetime

from clinicflow.core.application.commands.notification_commands import MarkAsReadCommand
from clinicflow.core.application.cqrs import CommandHandler
from clinicflow.core.application.queries.notification_queries import GetUnreadCountQuery
from clinicflow.core.application.services.notification_service import NotificationService


class MarkAsReadHandler(CommandHandler[MarkAsReadCommand]):
    def __init__(self, notification_service: NotificationService):
        self.service = notification_service

    def handle(self, command: MarkAsReadCommand) -> datetime:
        return self.service.mark_as_read(command.kind, command.user_id)


class GetUnreadCountHandler:
    def __init__(self, notification_service: NotificationService):
        self.service = notification_service

    def handle(self, query: GetUnreadCountQuery) -> int:
        return self.service.unread_count(query.kind, query.user_id)
