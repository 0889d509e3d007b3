"""
Infrastructure (Adapters)

Concrete implementations of the port interfaces.
"""
from risklens.infrastructure.upstage_llm import UpstageLLMGateway
from risklens.infrastructure.log_notifier import LoggingNotificationGateway

__all__ = ["UpstageLLMGateway", "LoggingNotificationGateway"]
