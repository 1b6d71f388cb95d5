"""
Cross-platform arbitrage detection.

Ranks matched market pairs by the gap between their YES prices.

The profit model is deliberately simple:
- spread = |yes_price_a - yes_price_b|
- potential_profit = spread * position_size (default 100 units)
- no fees, slippage or capital lockup are modeled

In a binary market buying NO at price p is equivalent to selling YES at
1 - p, so the trade is: buy YES on the cheap side, buy NO on the dear side.

Usage:
    from crossmarket.arbitrage import ArbitrageDetector

    detector = ArbitrageDetector(min_spread=0.03)
    opportunities = detector.find_opportunities(result.matched)
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..models import ArbitrageOpportunity, MarketMatch

logger = logging.getLogger(__name__)

DEFAULT_MIN_SPREAD = 0.02
DEFAULT_POSITION_SIZE = 100.0


class ArbitrageDetector:
    """
    Price-spread opportunities over already matched pairs.

    Args:
        min_spread: Minimum absolute YES-price spread to report (default: 0.02)
        position_size: Reference position used for the profit estimate (default: 100)
    """

    def __init__(
        self,
        min_spread: float = DEFAULT_MIN_SPREAD,
        position_size: float = DEFAULT_POSITION_SIZE,
    ):
        self.min_spread = min_spread
        self.position_size = position_size

    def find_opportunities(
        self,
        matches: Iterable[MarketMatch],
        min_spread: Optional[float] = None,
    ) -> List[ArbitrageOpportunity]:
        """
        Compute opportunities for matches quoting a YES price on both sides.

        Args:
            matches: Output of MarketMatcher.find_matches (``result.matched``).
            min_spread: Per-call override of the detector's minimum spread.

        Returns:
            Opportunities sorted by potential profit, highest first.
        """
        threshold = self.min_spread if min_spread is None else min_spread
        opportunities: List[ArbitrageOpportunity] = []

        for match in matches:
            source, target = match.source, match.match
            if source.yes_price is None or target.yes_price is None:
                continue

            spread = abs(source.yes_price - target.yes_price)
            if spread < threshold:
                continue

            opportunities.append(ArbitrageOpportunity(
                markets=(source, target),
                spread=spread,
                potential_profit=spread * self.position_size,
                match_confidence=match.similarity,
            ))

        opportunities.sort(key=lambda o: o.potential_profit, reverse=True)
        logger.debug(
            "Found %d opportunities with spread >= %.3f", len(opportunities), threshold
        )
        return opportunities

    def get_parameters(self) -> Dict[str, float]:
        return {"min_spread": self.min_spread, "position_size": self.position_size}
