# risklens/analytics/risk_classifier.py

from risklens.analytics.config import ISSUE_KEYWORDS, RISK_KEYWORDS, RISK_LEVEL_THRESHOLDS
from risklens.analytics.schemas import RiskClassification
from risklens.schemas.risk import RiskType


def classify_risk_text(text: str) -> RiskClassification:
    """
    Guesses whether text describes a future risk or an issue already happening,
    by counting keywords of each kind. Ambiguous text defaults to a low
    confidence risk.
    """
    lower = (text or "").lower()
    issue_count = sum(1 for kw in ISSUE_KEYWORDS if kw in lower)
    risk_count = sum(1 for kw in RISK_KEYWORDS if kw in lower)

    if issue_count > risk_count:
        return RiskClassification(kind=RiskType.ISSUE, confidence=min(0.95, 0.75 + issue_count * 0.05))
    if risk_count > issue_count:
        return RiskClassification(kind=RiskType.RISK, confidence=min(0.95, 0.70 + risk_count * 0.05))
    return RiskClassification(kind=RiskType.RISK, confidence=0.5)


def risk_level(score: int) -> str:
    """Determines the risk level label from a likelihood * impact score."""
    if score >= RISK_LEVEL_THRESHOLDS["Critical"]:
        return "Critical"
    elif score >= RISK_LEVEL_THRESHOLDS["High"]:
        return "High"
    elif score >= RISK_LEVEL_THRESHOLDS["Medium"]:
        return "Medium"
    else:
        return "Low"
