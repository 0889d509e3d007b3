# risklens/analytics/schemas.py

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from risklens.schemas.risk import BusinessUnit, Risk, RiskType


# --- Near-duplicate detection ---
class SimilarRiskMatch(BaseModel):
    risk: Risk
    similarity: float = Field(..., ge=0.0, le=1.0, description="Jaccard similarity to the candidate text")


# --- Correlation network ---
class DominantFactor(str, Enum):
    SAME_BUSINESS_UNIT = "same-business-unit"
    SIMILAR_SEVERITY = "similar-severity"
    TEXT_OVERLAP = "text-overlap"


class CorrelationEdge(BaseModel):
    """Derived on every analysis pass, never persisted"""
    source_id: str
    target_id: str
    strength: float = Field(..., ge=0.0, le=1.0)
    dominant_factor: DominantFactor


class NetworkNode(BaseModel):
    """
    Display projection of a risk plus simulation state.

    ``x``/``y``/``vx``/``vy`` only live for one rendering session and are
    never written back to the risk.
    """
    id: str
    title: str
    business_unit: BusinessUnit
    score: int
    kind: RiskType
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0

    @classmethod
    def from_risk(cls, risk: Risk) -> "NetworkNode":
        return cls(
            id=risk.id,
            title=risk.title,
            business_unit=risk.business_unit,
            score=risk.score,
            kind=risk.kind,
        )


class CorrelationNetwork(BaseModel):
    nodes: List[NetworkNode] = Field(default_factory=list)
    edges: List[CorrelationEdge] = Field(default_factory=list)


class NetworkStats(BaseModel):
    node_count: int
    edge_count: int
    critical_count: int
    average_strength: float


class RiskVelocity(str, Enum):
    INCREASING = "increasing"
    STABLE = "stable"
    DECREASING = "decreasing"


# --- Tone analysis ---
class SentimentCategory(str, Enum):
    PANIC = "panic"
    URGENT = "urgent"
    CONCERNED = "concerned"
    NEUTRAL = "neutral"
    CONFIDENT = "confident"


class SentimentResult(BaseModel):
    category: SentimentCategory
    score: float = Field(..., ge=-1.0, le=1.0)
    keywords: List[str] = Field(default_factory=list, description="Matched keywords, deduplicated, at most 5")
    explanation: str = ""
    recommended_action: str


class OrganizationStatus(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    STABLE = "stable"
    HEALTHY = "healthy"


class SentimentSummary(BaseModel):
    distribution: Dict[SentimentCategory, int]
    average_score: float
    overall_status: OrganizationStatus
    total_risks: int


# --- Classification and dashboard ---
class RiskClassification(BaseModel):
    kind: RiskType
    confidence: float = Field(..., ge=0.0, le=1.0)


class RiskStats(BaseModel):
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


class BusinessUnitSummary(BaseModel):
    business_unit: BusinessUnit
    count: int
    average_score: float


class UrgencyLevel(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    NORMAL = "normal"


class DecisionItem(BaseModel):
    """One entry of the executive decision queue"""
    risk: Risk
    urgency: UrgencyLevel
    recommended_action: str
    deadline: str
    rationale: str
    cascade_count: int = Field(0, description="Risks likely to follow if this one materializes")


class WeeklySummary(BaseModel):
    total: int
    critical_count: int = Field(..., description="Risks with score >= 15")
    issue_count: int
    top_critical: List[Risk] = Field(default_factory=list, description="Highest scores first, at most 5")


class DashboardSummary(BaseModel):
    stats: RiskStats
    heat_map: List[List[int]] = Field(..., description="Counts, row = likelihood - 1, column = impact - 1")
    business_units: List[BusinessUnitSummary]
    financial_exposure: float
    issue_count: int
    decisions: List[DecisionItem] = Field(default_factory=list)
    weekly: Optional[WeeklySummary] = None
