from risklens.services.risk_store import InMemoryRiskStore, RiskNotFoundError
from risklens.services.notification_service import NotificationService

__all__ = ["InMemoryRiskStore", "RiskNotFoundError", "NotificationService"]
