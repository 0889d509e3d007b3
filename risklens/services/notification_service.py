"""
Notification triggers.

Decides when a risk warrants a message and hands it to the gateway.
A failed delivery is logged and reported as ``False``; it never breaks the
operation that triggered it.
"""
import logging

from risklens.config import Settings
from risklens.ports.notification_gateway import Notification, NotificationError, NotificationGateway
from risklens.schemas.risk import Risk


logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, gateway: NotificationGateway, settings: Settings):
        self._gateway = gateway
        self._settings = settings

    def is_critical(self, risk: Risk) -> bool:
        return risk.score >= self._settings.critical_risk_threshold

    def on_risk_created(self, risk: Risk) -> bool:
        """Sends a critical-risk alert when the new risk reaches the threshold."""
        if not (self._settings.notifications_enabled and self._settings.notify_on_critical_risk):
            return False
        if not self.is_critical(risk):
            return False
        return self._send(Notification(
            kind="critical_risk",
            title=f"CRITICAL: {risk.title}",
            message=f"Score {risk.score}/25 | {risk.business_unit.value} | reported by {risk.reported_by or 'unknown'}",
            metadata={"risk_id": risk.id, "score": risk.score},
        ))

    def on_escalated(self, risk: Risk) -> bool:
        if not (self._settings.notifications_enabled and self._settings.notify_on_escalation):
            return False
        return self._send(Notification(
            kind="escalation",
            title=f"Escalated: {risk.title}",
            message=f"Score {risk.score}/25 | {risk.business_unit.value} | Risk ID: {risk.id}",
            metadata={"risk_id": risk.id, "score": risk.score},
        ))

    def _send(self, notification: Notification) -> bool:
        try:
            self._gateway.send(notification)
        except NotificationError as e:
            logger.error(f"❌ Notification delivery failed ({notification.kind}): {e}")
            return False
        logger.info(f"✅ Notification sent: {notification.kind} - {notification.title}")
        return True
