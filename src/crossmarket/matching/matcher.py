"""
Cross-platform market matcher.

Pairs listings on different platforms that refer to the same real-world
event, using the weighted similarity model in ``scorer``.

Matching is greedy and order-dependent: sources are processed in input
order and each takes the best still-available target. This is not a
globally optimal assignment.

Usage:
    from crossmarket.matching import MarketMatcher

    matcher = MarketMatcher(min_similarity=0.6)
    result = matcher.find_matches(polymarket_markets, kalshi_markets)
    for match in result.matched:
        print(match.source.question, "<->", match.match.question)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ..models import MarketMatch, MarketRecord, MatchConfig, MatchResult
from .clustering import DEFAULT_MIN_CLUSTER_SIZE, cluster_markets
from .scorer import SimilarityScorer

logger = logging.getLogger(__name__)

DEFAULT_MATCH_LIMIT = 5


class MarketMatcher:
    """
    Match prediction markets across platforms.

    Args:
        config: Base MatchConfig (defaults: threshold 0.7, weights 0.6/0.2/0.2,
            7 day close-date window)
        **overrides: Individual MatchConfig fields to override, e.g.
            ``min_similarity=0.5``
    """

    def __init__(self, config: Optional[MatchConfig] = None, **overrides: Any):
        self.config = (config or MatchConfig()).with_overrides(**overrides)
        self.scorer = SimilarityScorer(self.config)

    def find_matches(
        self,
        source_markets: Sequence[MarketRecord],
        target_markets: Sequence[MarketRecord],
    ) -> MatchResult:
        """
        Find the best cross-platform match for every source market.

        Targets on the source's own platform are never considered, and a
        target is consumed once matched. Ties keep the earlier target.

        Args:
            source_markets: Markets to match, processed in order.
            target_markets: Candidate pool.

        Returns:
            MatchResult where each source is either matched or unmatched.
        """
        result = MatchResult()
        used_targets: Set[Tuple[str, str]] = set()

        for source in source_markets:
            best: Optional[MarketMatch] = None

            for target in target_markets:
                if target.key in used_targets or target.platform == source.platform:
                    continue

                similarity, scores = self.scorer.similarity(source, target)
                if best is None or similarity > best.similarity:
                    best = MarketMatch(
                        source=source,
                        match=target,
                        similarity=similarity,
                        scores=scores,
                    )

            if best is not None and best.similarity >= self.config.min_similarity:
                result.matched.append(best)
                used_targets.add(best.match.key)
            else:
                result.unmatched.append(source)

        logger.debug(
            "Matched %d of %d source markets against %d targets",
            len(result.matched),
            len(source_markets),
            len(target_markets),
        )
        return result

    def find_matches_for_market(
        self,
        market: MarketRecord,
        candidates: Sequence[MarketRecord],
        limit: int = DEFAULT_MATCH_LIMIT,
    ) -> List[MarketMatch]:
        """
        Rank candidates against a single market, most similar first.

        Only the market itself is skipped; candidates may share its platform
        and may appear in results for other queries.
        """
        matches: List[MarketMatch] = []

        for candidate in candidates:
            if candidate.key == market.key:
                continue

            similarity, scores = self.scorer.similarity(market, candidate)
            if similarity >= self.config.min_similarity:
                matches.append(MarketMatch(
                    source=market,
                    match=candidate,
                    similarity=similarity,
                    scores=scores,
                ))

        matches.sort(key=lambda m: m.similarity, reverse=True)
        return matches[:limit]

    def cluster_markets(
        self,
        markets: Sequence[MarketRecord],
        min_cluster_size: int = DEFAULT_MIN_CLUSTER_SIZE,
    ) -> Dict[str, List[MarketRecord]]:
        """Group markets into same-topic clusters regardless of platform."""
        return cluster_markets(markets, self.scorer, min_cluster_size)

    def get_parameters(self) -> Dict[str, float]:
        """Return current configuration for reproducibility."""
        return self.config.to_dict()
