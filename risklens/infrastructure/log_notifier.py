"""
Logging Notification Gateway

Writes notifications to the application log and keeps them in memory.
Stands in for the email/LINE transports, which are deployed separately.
"""
import logging
from typing import List

from risklens.ports.notification_gateway import Notification, NotificationGateway


logger = logging.getLogger(__name__)


class LoggingNotificationGateway(NotificationGateway):

    def __init__(self, max_history: int = 100):
        self._max_history = max_history
        self.sent: List[Notification] = []

    def send(self, notification: Notification) -> None:
        logger.info(f"📣 [{notification.kind}] {notification.title}: {notification.message}")
        self.sent.append(notification)
        if len(self.sent) > self._max_history:
            self.sent = self.sent[-self._max_history:]

    def __repr__(self) -> str:
        return f"<LoggingNotificationGateway sent={len(self.sent)}>"
