"""
Similarity model for pairs of market records.

Three independent sub-scores, each in [0, 1]:

- question: Jaccard index over question keyword sets
- category: 1 for equal categories, 0 for different ones, 0.5 when unknown
- close_date: linear decay over the configured day window, 0.5 when unknown

The sub-scores are combined by ``aggregate`` with the weights of a
``MatchConfig``. Every measure is symmetric, so ``score(a, b)`` and
``score(b, a)`` are equal.

Usage:
    from crossmarket.matching.scorer import SimilarityScorer

    scorer = SimilarityScorer(MatchConfig())
    similarity, scores = scorer.similarity(market_a, market_b)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional, Tuple

from ..models import MarketCategory, MarketRecord, MatchConfig, SubScores
from .text import extract_keywords, jaccard

# Sub-score used when either side lacks the field
NEUTRAL_SCORE = 0.5

_SECONDS_PER_DAY = 86400.0


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------

def question_similarity(a: str, b: str) -> float:
    """Jaccard similarity of the keyword sets of two questions."""
    return jaccard(extract_keywords(a), extract_keywords(b))


def category_similarity(
    a: Optional[MarketCategory],
    b: Optional[MarketCategory],
) -> float:
    if a is None or b is None:
        return NEUTRAL_SCORE
    return 1.0 if a == b else 0.0


def close_date_similarity(
    a: Optional[datetime],
    b: Optional[datetime],
    max_diff_days: float,
) -> float:
    """
    Closing-date proximity.

    Args:
        a: Closing time of the first market
        b: Closing time of the second market
        max_diff_days: Differences of this many days or more score 0

    Returns:
        1.0 for identical dates, 0.0 at or beyond the window, linear in between.
    """
    if a is None or b is None:
        return NEUTRAL_SCORE

    diff_days = abs((_as_utc(a) - _as_utc(b)).total_seconds()) / _SECONDS_PER_DAY

    if diff_days == 0:
        return 1.0
    if diff_days >= max_diff_days:
        return 0.0
    return 1.0 - diff_days / max_diff_days


def aggregate(scores: SubScores, config: MatchConfig) -> float:
    """Weighted sum of sub-scores. Weights are used as given."""
    return (
        scores.question * config.question_weight
        + scores.category * config.category_weight
        + scores.close_date * config.close_date_weight
    )


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------

class SimilarityScorer:
    """
    Scores record pairs under one fixed ``MatchConfig``.

    Keyword sets are memoized per instance, so a scorer reused across an
    O(n^2) matching or clustering run tokenizes each question once.
    """

    def __init__(self, config: Optional[MatchConfig] = None):
        self.config = config or MatchConfig()
        self.keyword_cache: Dict[str, FrozenSet[str]] = {}

    def keywords(self, question: str) -> FrozenSet[str]:
        cached = self.keyword_cache.get(question)
        if cached is None:
            cached = frozenset(extract_keywords(question))
            self.keyword_cache[question] = cached
        return cached

    def score(self, a: MarketRecord, b: MarketRecord) -> SubScores:
        return SubScores(
            question=jaccard(self.keywords(a.question), self.keywords(b.question)),
            category=category_similarity(a.category, b.category),
            close_date=close_date_similarity(
                a.closes_at, b.closes_at, self.config.max_close_date_diff_days
            ),
        )

    def similarity(self, a: MarketRecord, b: MarketRecord) -> Tuple[float, SubScores]:
        """Aggregate similarity together with the sub-scores it came from."""
        scores = self.score(a, b)
        return aggregate(scores, self.config), scores
