"""
FastAPI Dependency Injection

Provides the store, gateways and services to the API endpoints.
"""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from risklens.agents.risk_advisor import RiskAdvisor
from risklens.config import Settings, get_settings
from risklens.infrastructure import LoggingNotificationGateway, UpstageLLMGateway
from risklens.ports import LLMAPIError, LLMGateway, NotificationGateway
from risklens.services import InMemoryRiskStore, NotificationService


logger = logging.getLogger(__name__)


@lru_cache()
def get_risk_store() -> InMemoryRiskStore:
    """Process-wide risk register"""
    logger.info("Risk store created")
    return InMemoryRiskStore()


@lru_cache()
def get_notification_gateway() -> NotificationGateway:
    return LoggingNotificationGateway()


@lru_cache()
def get_llm_gateway() -> Optional[LLMGateway]:
    """
    Upstage gateway, or None when no API key is configured
    (the advisor then runs on keyword analysis only).
    """
    settings = get_settings()
    if not settings.upstage_api_key:
        logger.warning("⚠️ UPSTAGE_API_KEY is not set. Risk advisor will use keyword analysis.")
        return None
    try:
        return UpstageLLMGateway.from_settings(settings)
    except LLMAPIError as e:
        logger.error(f"❌ LLM gateway unavailable, risk advisor will use keyword analysis: {e}")
        return None


def get_notification_service(
    gateway: NotificationGateway = Depends(get_notification_gateway),
    settings: Settings = Depends(get_settings),
) -> NotificationService:
    return NotificationService(gateway, settings)


def get_risk_advisor(llm: Optional[LLMGateway] = Depends(get_llm_gateway)) -> RiskAdvisor:
    return RiskAdvisor(llm)
