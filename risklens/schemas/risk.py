# risklens/schemas/risk.py

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RiskType(str, Enum):
    """risk = anticipated future event, issue = already happening"""
    RISK = "risk"
    ISSUE = "issue"


class BusinessUnit(str, Enum):
    SALES = "Sales"
    IT = "IT"
    FINANCE = "Finance"
    OPERATIONS = "Operations"
    HR = "HR"


class RiskStatus(str, Enum):
    ACTIVE = "active"
    MITIGATED = "mitigated"
    CLOSED = "closed"


# --- Register record ---
class Risk(BaseModel):
    """
    A single entry of the risk register.

    ``score`` is always ``likelihood * impact``; it is computed, never stored,
    so no edit can put it out of step with its two factors.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Stable unique id, never reused")
    kind: RiskType = Field(RiskType.RISK, description="risk (future) or issue (occurring)")
    title: str = Field(..., min_length=1, description="Short label")
    description: str = Field("", description="Free text")
    business_unit: BusinessUnit
    likelihood: int = Field(..., ge=1, le=5, description="Likelihood (1-5)")
    impact: int = Field(..., ge=1, le=5, description="Impact (1-5)")
    expected_date: Optional[date] = Field(None, description="Expected date of occurrence, no time component")
    financial_impact: Optional[float] = Field(None, ge=0, description="Estimated financial impact (USD)")
    status: RiskStatus = RiskStatus.ACTIVE
    reported_by: Optional[str] = None
    assigned_to: Optional[str] = None
    ai_suggested_type: Optional[RiskType] = None
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @computed_field
    @property
    def score(self) -> int:
        return self.likelihood * self.impact

    @property
    def text(self) -> str:
        """Title and description joined, the input of every text comparison"""
        return f"{self.title} {self.description}"


# --- API inputs ---
class RiskCreate(BaseModel):
    kind: RiskType = RiskType.RISK
    title: str = Field(..., min_length=1)
    description: str = ""
    business_unit: BusinessUnit
    likelihood: int = Field(..., ge=1, le=5)
    impact: int = Field(..., ge=1, le=5)
    expected_date: Optional[date] = None
    financial_impact: Optional[float] = Field(None, ge=0)
    reported_by: Optional[str] = None
    assigned_to: Optional[str] = None
    ai_suggested_type: Optional[RiskType] = None
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)


class RiskUpdate(BaseModel):
    """Partial update; only fields explicitly set are applied"""
    kind: Optional[RiskType] = None
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    business_unit: Optional[BusinessUnit] = None
    likelihood: Optional[int] = Field(None, ge=1, le=5)
    impact: Optional[int] = Field(None, ge=1, le=5)
    expected_date: Optional[date] = None
    financial_impact: Optional[float] = Field(None, ge=0)
    status: Optional[RiskStatus] = None
    assigned_to: Optional[str] = None

    @field_validator("kind", "title", "description", "business_unit", "likelihood", "impact", "status")
    @classmethod
    def not_null(cls, value):
        # omit a field to leave it unchanged; null is only valid where the risk allows it
        if value is None:
            raise ValueError("may be omitted but not null")
        return value
