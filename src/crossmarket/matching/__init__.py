"""
Cross-platform market matching.

Scores record pairs, pairs listings across platforms and clusters
same-topic markets.
"""

from .clustering import cluster_key, cluster_markets
from .grouping import calculate_aggregate_liquidity, find_best_price, group_by_platform
from .matcher import MarketMatcher
from .scorer import (
    SimilarityScorer,
    aggregate,
    category_similarity,
    close_date_similarity,
    question_similarity,
)
from .text import STOP_WORDS, extract_keywords, normalize_text

__all__ = [
    "MarketMatcher",
    "SimilarityScorer",
    "aggregate",
    "question_similarity",
    "category_similarity",
    "close_date_similarity",
    "cluster_markets",
    "cluster_key",
    "group_by_platform",
    "find_best_price",
    "calculate_aggregate_liquidity",
    "normalize_text",
    "extract_keywords",
    "STOP_WORDS",
]
