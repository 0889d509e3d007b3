"""
Notification Gateway Port (Interface)

Delivery (email, LINE, ...) lives behind this port; the services only
decide when something must be sent.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, Field


class Notification(BaseModel):
    kind: str = Field(..., description='"critical_risk" or "escalation"')
    title: str
    message: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationGateway(ABC):

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """
        Deliver one notification.

        Raises:
            NotificationError: delivery failed
        """
        pass


class NotificationError(Exception):
    """Notification delivery failed"""
    pass
