# risklens/analytics/correlation_engine.py
"""
Pairwise risk correlation, correlation networks and cascade discovery.

Every pairwise operation here is O(n^2) in the number of risks and is meant
for interactive use on tens to low hundreds of records. Callers pass
``max_records`` to cap the input; records past the cap are dropped (with a
warning) rather than silently slowing the caller down.
"""
import logging
from typing import Dict, List, Optional, Sequence

from risklens.analytics.config import (
    CASCADE_CORRELATION_THRESHOLD,
    CASCADE_MIN_SCORE,
    CORRELATION_WEIGHTS,
    MAX_SCORE_SPREAD,
    NETWORK_CRITICAL_SCORE,
    NETWORK_EDGE_THRESHOLD,
    SIMILAR_SEVERITY_SPREAD,
    TEMPORAL_WINDOW_DAYS,
    VELOCITY_INCREASING_SCORE,
    VELOCITY_STABLE_SCORE,
)
from risklens.analytics.schemas import (
    CorrelationEdge,
    CorrelationNetwork,
    DominantFactor,
    NetworkNode,
    NetworkStats,
    RiskVelocity,
)
from risklens.analytics.similarity_engine import jaccard_similarity
from risklens.schemas.risk import Risk

logger = logging.getLogger(__name__)


def _cap(risks: Sequence[Risk], max_records: Optional[int], operation: str) -> Sequence[Risk]:
    if max_records is not None and len(risks) > max_records:
        logger.warning(
            f"⚠️ {operation}: {len(risks)} risks exceed the soft cap of {max_records}; "
            f"only the first {max_records} are analysed"
        )
        return risks[:max_records]
    return risks


def correlation_signals(risk1: Risk, risk2: Risk) -> Dict[str, float]:
    """
    The four raw signals behind a correlation, each in [0, 1] and unweighted.

    ``temporal`` is 0.0 when either risk has no expected date.
    """
    score_diff = abs(risk1.score - risk2.score)
    temporal = 0.0
    if risk1.expected_date and risk2.expected_date:
        days_apart = abs((risk1.expected_date - risk2.expected_date).days)
        if days_apart < TEMPORAL_WINDOW_DAYS:
            temporal = 1 - days_apart / TEMPORAL_WINDOW_DAYS

    return {
        "same_business_unit": 1.0 if risk1.business_unit == risk2.business_unit else 0.0,
        "score_similarity": 1 - min(score_diff / MAX_SCORE_SPREAD, 1),
        "text_similarity": jaccard_similarity(risk1.text, risk2.text),
        "temporal": temporal,
    }


def calculate_correlation(risk1: Risk, risk2: Risk) -> float:
    """
    Weighted sum of the correlation signals, in [0, 1].

    The sum is not renormalized: without expected dates on both risks the
    temporal weight is simply lost and the best possible result is 0.8.
    """
    signals = correlation_signals(risk1, risk2)
    score = 0.0
    for name in ("same_business_unit", "score_similarity", "text_similarity", "temporal"):
        score += CORRELATION_WEIGHTS[name] * signals[name]
    return score


def classify_dominant_factor(risk1: Risk, risk2: Risk) -> DominantFactor:
    """
    Display label for an edge: same business unit, then similar severity,
    else text overlap. It is a priority cascade over raw attributes, not a
    reading of which weighted term contributed most.
    """
    if risk1.business_unit == risk2.business_unit:
        return DominantFactor.SAME_BUSINESS_UNIT
    if abs(risk1.score - risk2.score) < SIMILAR_SEVERITY_SPREAD:
        return DominantFactor.SIMILAR_SEVERITY
    return DominantFactor.TEXT_OVERLAP


def build_network(
    risks: Sequence[Risk],
    threshold: float = NETWORK_EDGE_THRESHOLD,
    max_records: Optional[int] = None,
) -> CorrelationNetwork:
    """
    Builds the correlation graph of a set of risks.

    Args:
        risks: Risks in input order; one node per risk.
        threshold: Edges need a strength strictly above this.
        max_records: Optional soft cap on the number of risks analysed.

    Returns:
        CorrelationNetwork: nodes in input order, one edge per qualifying
        unordered pair (i < j).
    """
    risks = _cap(risks, max_records, "build_network")
    nodes = [NetworkNode.from_risk(risk) for risk in risks]
    edges: List[CorrelationEdge] = []

    for i in range(len(risks)):
        for j in range(i + 1, len(risks)):
            strength = calculate_correlation(risks[i], risks[j])
            if strength > threshold:
                edges.append(CorrelationEdge(
                    source_id=risks[i].id,
                    target_id=risks[j].id,
                    strength=min(strength, 1.0),
                    dominant_factor=classify_dominant_factor(risks[i], risks[j]),
                ))

    logger.debug(f"Correlation network built: nodes={len(nodes)}, edges={len(edges)}, threshold={threshold}")
    return CorrelationNetwork(nodes=nodes, edges=edges)


def find_cascade_risks(
    risks: Sequence[Risk],
    target: Risk,
    correlation_threshold: float = CASCADE_CORRELATION_THRESHOLD,
    min_score: int = CASCADE_MIN_SCORE,
    max_records: Optional[int] = None,
) -> List[Risk]:
    """
    Risks likely to be set off if ``target`` materializes: strongly correlated
    with it and severe in their own right. Advisory only; order follows input.
    """
    risks = _cap(risks, max_records, "find_cascade_risks")
    return [
        risk for risk in risks
        if risk.id != target.id
        and calculate_correlation(target, risk) > correlation_threshold
        and risk.score > min_score
    ]


def calculate_risk_velocity(risk: Risk) -> RiskVelocity:
    # Score band only; there is no history to compare against
    if risk.score >= VELOCITY_INCREASING_SCORE:
        return RiskVelocity.INCREASING
    if risk.score >= VELOCITY_STABLE_SCORE:
        return RiskVelocity.STABLE
    return RiskVelocity.DECREASING


def network_stats(network: CorrelationNetwork) -> NetworkStats:
    edges = network.edges
    return NetworkStats(
        node_count=len(network.nodes),
        edge_count=len(edges),
        critical_count=sum(1 for node in network.nodes if node.score >= NETWORK_CRITICAL_SCORE),
        average_strength=sum(edge.strength for edge in edges) / len(edges) if edges else 0.0,
    )
