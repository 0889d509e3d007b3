# risklens/analytics/sentiment_analyzer.py
"""
Rule-based tone analysis of risk descriptions.

Runs locally and synchronously, with no API calls, so a whole register can
be scored on every render.
"""
import logging
from typing import Dict, Iterable, List

from risklens.analytics.config import (
    CAPS_PENALTY,
    CAPS_RATIO_THRESHOLD,
    EXCLAMATION_FREE_COUNT,
    EXCLAMATION_PENALTY,
    MAX_SENTIMENT_KEYWORDS,
    QUESTION_PENALTY,
    SENTIMENT_ACTIONS,
    SENTIMENT_LEXICONS,
    SENTIMENT_THRESHOLDS,
)
from risklens.analytics.schemas import (
    OrganizationStatus,
    SentimentCategory,
    SentimentResult,
    SentimentSummary,
)
from risklens.schemas.risk import Risk

logger = logging.getLogger(__name__)


def _categorize(score: float) -> SentimentCategory:
    if score <= SENTIMENT_THRESHOLDS["panic"]:
        return SentimentCategory.PANIC
    if score <= SENTIMENT_THRESHOLDS["urgent"]:
        return SentimentCategory.URGENT
    if score <= SENTIMENT_THRESHOLDS["concerned"]:
        return SentimentCategory.CONCERNED
    if score >= SENTIMENT_THRESHOLDS["confident"]:
        return SentimentCategory.CONFIDENT
    return SentimentCategory.NEUTRAL


def _explain(keywords: List[str]) -> str:
    if not keywords:
        return "ไม่พบคำสำคัญ"
    more = " และอื่นๆ" if len(keywords) > 3 else ""
    return f'พบคำว่า "{", ".join(keywords[:3])}"{more}'


def analyze_sentiment(text: str) -> SentimentResult:
    """
    Scores the tone of a piece of text.

    Each lexicon hit adds its fixed delta; more than two "!" subtracts 0.1
    per "!", every "?" subtracts 0.05, and text that is more than 30%
    uppercase letters loses a flat 0.2. The total is clamped to [-1, 1].

    Args:
        text: Free text, usually a risk description.

    Returns:
        SentimentResult: category, clamped score, up to five matched keywords
        and the follow-up action for the category.
    """
    text = text or ""
    lower = text.lower()
    score = 0.0
    found: List[str] = []

    for words, delta in SENTIMENT_LEXICONS.values():
        for word in words:
            if word in lower:
                score += delta
                if word not in found:
                    found.append(word)

    exclamations = text.count("!")
    if exclamations > EXCLAMATION_FREE_COUNT:
        score -= EXCLAMATION_PENALTY * exclamations

    questions = text.count("?")
    if questions > 0:
        score -= QUESTION_PENALTY * questions

    # Thai has no letter case, so only cased scripts can trip this
    if text and sum(1 for ch in text if ch.isupper()) / len(text) > CAPS_RATIO_THRESHOLD:
        score -= CAPS_PENALTY

    score = max(-1.0, min(1.0, score))
    category = _categorize(score)

    return SentimentResult(
        category=category,
        score=score,
        keywords=found[:MAX_SENTIMENT_KEYWORDS],
        explanation=_explain(found),
        recommended_action=SENTIMENT_ACTIONS[category.value],
    )


def analyze_batch_sentiment(risks: Iterable[Risk]) -> Dict[str, SentimentResult]:
    """Tone of every risk description, keyed by risk id."""
    return {risk.id: analyze_sentiment(risk.description) for risk in risks}


def organization_sentiment_summary(results: Dict[str, SentimentResult]) -> SentimentSummary:
    """
    Rolls per-risk tone up to one organization status.

    critical: any panic, or more than 20% urgent
    warning: any urgent, or more than 30% concerned
    healthy: average score above 0.1
    stable: otherwise
    """
    sentiments = list(results.values())
    total = len(sentiments)
    distribution = {category: 0 for category in SentimentCategory}
    for result in sentiments:
        distribution[result.category] += 1

    average = sum(s.score for s in sentiments) / total if total else 0.0

    if distribution[SentimentCategory.PANIC] > 0 or distribution[SentimentCategory.URGENT] > total * 0.2:
        status = OrganizationStatus.CRITICAL
    elif distribution[SentimentCategory.URGENT] > 0 or distribution[SentimentCategory.CONCERNED] > total * 0.3:
        status = OrganizationStatus.WARNING
    elif average > 0.1:
        status = OrganizationStatus.HEALTHY
    else:
        status = OrganizationStatus.STABLE

    logger.debug(f"Organization sentiment: total={total}, average={average:.2f}, status={status.value}")
    return SentimentSummary(
        distribution=distribution,
        average_score=average,
        overall_status=status,
        total_risks=total,
    )
