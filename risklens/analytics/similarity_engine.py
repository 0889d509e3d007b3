# risklens/analytics/similarity_engine.py

import logging
import re
from typing import FrozenSet, List, Sequence

from risklens.analytics.config import (
    DUPLICATE_MAX_RESULTS,
    DUPLICATE_SIMILARITY_THRESHOLD,
    SHINGLE_KEEP_PATTERN,
    SHINGLE_SIZE,
)
from risklens.analytics.schemas import SimilarRiskMatch
from risklens.schemas.risk import Risk

logger = logging.getLogger(__name__)

_STRIP_RE = re.compile(SHINGLE_KEEP_PATTERN)


def normalize_text(text: str) -> str:
    """Lowercase and drop everything but latin alphanumerics and Thai characters."""
    return _STRIP_RE.sub("", (text or "").lower())


def get_shingles(text: str, k: int = SHINGLE_SIZE) -> FrozenSet[str]:
    """
    Returns the set of all contiguous k-character substrings of the normalized text.
    Text shorter than k yields an empty set.
    """
    clean = normalize_text(text)
    return frozenset(clean[i:i + k] for i in range(len(clean) - k + 1))


def jaccard_similarity(text1: str, text2: str, k: int = SHINGLE_SIZE) -> float:
    """
    Intersection-over-union of the two shingle sets, in [0, 1].
    Two empty sets give 0.0, not 1.0.
    """
    set1 = get_shingles(text1, k)
    set2 = get_shingles(text2, k)
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)


def find_similar_risks(
    corpus: Sequence[Risk],
    title: str,
    description: str = "",
    threshold: float = DUPLICATE_SIMILARITY_THRESHOLD,
    top_n: int = DUPLICATE_MAX_RESULTS,
) -> List[SimilarRiskMatch]:
    """
    Finds existing risks that look like a near-duplicate of a draft.

    Args:
        corpus: Existing risks, in display order.
        title: Draft title.
        description: Draft description.
        threshold: Matches must score strictly above this.
        top_n: Maximum number of matches returned.

    Returns:
        List[SimilarRiskMatch]: Most similar first; equal scores keep corpus order.
        Empty when nothing clears the threshold.
    """
    candidate = f"{title} {description}"
    matches = []
    for risk in corpus:
        similarity = jaccard_similarity(candidate, risk.text)
        if similarity > threshold:
            matches.append(SimilarRiskMatch(risk=risk, similarity=similarity))

    # list.sort is stable, so ties keep corpus order
    matches.sort(key=lambda m: m.similarity, reverse=True)
    logger.debug(f"Near-duplicate check: corpus={len(corpus)}, above {threshold}: {len(matches)}")
    return matches[:top_n]
