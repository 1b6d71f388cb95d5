"""Grouping and aggregation helpers over lists of market records."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..models import BestPrice, MarketRecord

PRICE_SIDES = ("yes", "no")


def group_by_platform(markets: Iterable[MarketRecord]) -> Dict[str, List[MarketRecord]]:
    """Partition markets by platform, keeping their relative order."""
    groups: Dict[str, List[MarketRecord]] = {}
    for market in markets:
        groups.setdefault(market.platform, []).append(market)
    return groups


def find_best_price(markets: Iterable[MarketRecord], side: str) -> Optional[BestPrice]:
    """
    Cheapest market for one side of the book.

    Args:
        markets: Candidate markets, typically one matched group.
        side: "yes" or "no".

    Returns:
        BestPrice for the lowest defined price (first one on ties), or None
        when no market quotes that side.

    Raises:
        ValueError: If side is not "yes" or "no".
    """
    if side not in PRICE_SIDES:
        raise ValueError(f"side must be one of {PRICE_SIDES}, got {side!r}")

    best: Optional[BestPrice] = None
    for market in markets:
        price = market.yes_price if side == "yes" else market.no_price
        if price is None:
            continue
        if best is None or price < best.price:
            best = BestPrice(market=market, price=price)
    return best


def calculate_aggregate_liquidity(markets: Iterable[MarketRecord]) -> float:
    """Total liquidity, counting markets without a figure as zero."""
    return sum((market.liquidity or 0.0 for market in markets), 0.0)
