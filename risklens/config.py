"""
Configuration management using .env file
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file"""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Application
    app_name: str = "risklens"
    environment: str = "development"  # development | test | production
    debug: bool = True
    log_dir: str = "logs"

    # CORS
    cors_origins: list = ["http://localhost:5173", "http://localhost:3000"]

    # Upstage API (AI risk advisor)
    upstage_api_key: str = ""
    llm_model: str = "solar-pro"
    llm_timeout: int = 30

    # LangSmith
    langsmith_api_key: str = ""
    langsmith_project: str = "risklens"
    langsmith_tracing: bool = False

    # Notifications
    notifications_enabled: bool = True
    notify_on_critical_risk: bool = True
    notify_on_escalation: bool = True
    critical_risk_threshold: int = Field(20, ge=1, le=25)  # score >= threshold is critical

    # Pairwise analytics are O(n^2); corpora above this are truncated with a warning
    max_network_records: Optional[int] = 200

    # Force layout canvas
    layout_width: float = 800.0
    layout_height: float = 500.0
    layout_frame_interval: float = 1 / 60  # seconds per tick


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
