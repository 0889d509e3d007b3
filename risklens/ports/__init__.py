"""
Ports (Interfaces)

Abstractions that keep the analytics and services independent of any
concrete LLM provider or notification transport.
"""
from risklens.ports.llm_gateway import LLMAPIError, LLMError, LLMGateway, LLMTimeoutError
from risklens.ports.notification_gateway import Notification, NotificationError, NotificationGateway

__all__ = [
    "LLMGateway",
    "LLMAPIError",
    "LLMError",
    "LLMTimeoutError",
    "Notification",
    "NotificationError",
    "NotificationGateway",
]
