"""
crossmarket: cross-platform prediction market matching.

Decides which listings on different platforms describe the same event,
groups same-topic markets and ranks YES-price discrepancies between
matched listings.

Usage:
    from crossmarket import MarketMatcher, ArbitrageDetector

    matcher = MarketMatcher(min_similarity=0.6)
    result = matcher.find_matches(polymarket_markets, kalshi_markets)
    opportunities = ArbitrageDetector().find_opportunities(result.matched)
"""

from .arbitrage import ArbitrageDetector
from .exceptions import ConfigError, CrossmarketError, SnapshotError
from .matching import (
    MarketMatcher,
    SimilarityScorer,
    aggregate,
    calculate_aggregate_liquidity,
    cluster_markets,
    find_best_price,
    group_by_platform,
)
from .models import (
    ArbitrageOpportunity,
    BestPrice,
    MarketCategory,
    MarketMatch,
    MarketRecord,
    MatchConfig,
    MatchResult,
    SubScores,
)

__version__ = "0.1.0"

__all__ = [
    "MarketMatcher",
    "SimilarityScorer",
    "ArbitrageDetector",
    "aggregate",
    "cluster_markets",
    "group_by_platform",
    "find_best_price",
    "calculate_aggregate_liquidity",
    "MarketRecord",
    "MarketCategory",
    "MatchConfig",
    "SubScores",
    "MarketMatch",
    "MatchResult",
    "ArbitrageOpportunity",
    "BestPrice",
    "CrossmarketError",
    "ConfigError",
    "SnapshotError",
]
