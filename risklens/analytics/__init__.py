"""
Risk analytics

Pure functions over in-memory risk records: text similarity, correlation
scoring, network building, cascade discovery, layout simulation and tone
analysis. Nothing here reads global state or performs I/O.
"""
from risklens.analytics.similarity_engine import jaccard_similarity, find_similar_risks
from risklens.analytics.correlation_engine import (
    calculate_correlation,
    build_network,
    find_cascade_risks,
    calculate_risk_velocity,
)
from risklens.analytics.sentiment_analyzer import analyze_sentiment

__all__ = [
    "jaccard_similarity",
    "find_similar_risks",
    "calculate_correlation",
    "build_network",
    "find_cascade_risks",
    "calculate_risk_velocity",
    "analyze_sentiment",
]
