# risklens/analytics/dashboard.py

from typing import Dict, List, Optional, Sequence

import numpy as np

from risklens.analytics.config import (
    DECISION_CRITICAL_SCORE,
    DECISION_DEADLINES,
    DECISION_MAX_NORMAL_ISSUES,
    DECISION_WARNING_SCORE,
    WEEKLY_CRITICAL_SCORE,
    WEEKLY_TOP_CRITICAL,
)
from risklens.analytics.correlation_engine import find_cascade_risks
from risklens.analytics.risk_classifier import risk_level
from risklens.analytics.schemas import (
    BusinessUnitSummary,
    DashboardSummary,
    DecisionItem,
    RiskStats,
    UrgencyLevel,
    WeeklySummary,
)
from risklens.schemas.risk import BusinessUnit, Risk, RiskStatus, RiskType


def risk_stats(risks: Sequence[Risk]) -> RiskStats:
    stats = RiskStats(total=len(risks))
    for risk in risks:
        level = risk_level(risk.score).lower()
        setattr(stats, level, getattr(stats, level) + 1)
    return stats


def heat_map(risks: Sequence[Risk]) -> np.ndarray:
    """5x5 count matrix; row = likelihood - 1, column = impact - 1."""
    grid = np.zeros((5, 5), dtype=int)
    for risk in risks:
        grid[risk.likelihood - 1, risk.impact - 1] += 1
    return grid


def heat_map_cells(risks: Sequence[Risk]) -> Dict[tuple, List[str]]:
    """Risk ids per (likelihood, impact) cell, only for occupied cells."""
    cells: Dict[tuple, List[str]] = {}
    for risk in risks:
        cells.setdefault((risk.likelihood, risk.impact), []).append(risk.id)
    return cells


def business_unit_breakdown(risks: Sequence[Risk]) -> List[BusinessUnitSummary]:
    summaries = []
    for unit in BusinessUnit:
        scores = np.array([r.score for r in risks if r.business_unit == unit], dtype=float)
        if scores.size == 0:
            continue
        summaries.append(BusinessUnitSummary(
            business_unit=unit,
            count=int(scores.size),
            average_score=float(scores.mean()),
        ))
    return summaries


def financial_exposure(risks: Sequence[Risk]) -> float:
    return float(sum(risk.financial_impact or 0.0 for risk in risks))


def decision_queue(
    risks: Sequence[Risk],
    critical_threshold: int = DECISION_CRITICAL_SCORE,
    max_records: Optional[int] = None,
) -> List[DecisionItem]:
    """
    Items awaiting an executive decision, most urgent first.

    Only active risks qualify. Critical: score >= critical_threshold, with the
    number of cascade risks it could set off. Warning: score from 15 up to the
    threshold. Normal: the first three active issues scoring below 15.
    Within one urgency the input order is kept.
    """
    active = [risk for risk in risks if risk.status == RiskStatus.ACTIVE]
    items: List[DecisionItem] = []

    for risk in active:
        if risk.score < critical_threshold:
            continue
        cascade_count = len(find_cascade_risks(risks, risk, max_records=max_records))
        items.append(DecisionItem(
            risk=risk,
            urgency=UrgencyLevel.CRITICAL,
            recommended_action=(
                f"Activate contingency plan (may trigger {cascade_count} cascade risks)"
                if cascade_count else "Immediate mitigation required"
            ),
            deadline=DECISION_DEADLINES["critical"],
            rationale=f"Score {risk.score}/25 with {'cascade potential' if cascade_count else 'isolated impact'}",
            cascade_count=cascade_count,
        ))

    for risk in active:
        if DECISION_WARNING_SCORE <= risk.score < critical_threshold:
            items.append(DecisionItem(
                risk=risk,
                urgency=UrgencyLevel.WARNING,
                recommended_action="Schedule mitigation review",
                deadline=DECISION_DEADLINES["warning"],
                rationale="Elevated risk level requires executive awareness",
            ))

    issues = [r for r in active if r.kind == RiskType.ISSUE and r.score < DECISION_WARNING_SCORE]
    for risk in issues[:DECISION_MAX_NORMAL_ISSUES]:
        items.append(DecisionItem(
            risk=risk,
            urgency=UrgencyLevel.NORMAL,
            recommended_action="Monitor and document",
            deadline=DECISION_DEADLINES["normal"],
            rationale="Active issue within acceptable thresholds",
        ))

    return items


def weekly_summary(risks: Sequence[Risk]) -> WeeklySummary:
    critical = [risk for risk in risks if risk.score >= WEEKLY_CRITICAL_SCORE]
    return WeeklySummary(
        total=len(risks),
        critical_count=len(critical),
        issue_count=sum(1 for risk in risks if risk.kind == RiskType.ISSUE),
        top_critical=sorted(critical, key=lambda r: r.score, reverse=True)[:WEEKLY_TOP_CRITICAL],
    )


def dashboard_summary(
    risks: Sequence[Risk],
    critical_threshold: int = DECISION_CRITICAL_SCORE,
    max_records: Optional[int] = None,
) -> DashboardSummary:
    return DashboardSummary(
        stats=risk_stats(risks),
        heat_map=heat_map(risks).tolist(),
        business_units=business_unit_breakdown(risks),
        financial_exposure=financial_exposure(risks),
        issue_count=sum(1 for risk in risks if risk.kind == RiskType.ISSUE),
        decisions=decision_queue(risks, critical_threshold, max_records),
        weekly=weekly_summary(risks),
    )
