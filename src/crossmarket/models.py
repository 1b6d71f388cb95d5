"""
Value types shared by the matching, clustering and arbitrage modules.

Market records arrive already normalized by whatever collector produced the
snapshot; everything here is immutable so a record can be handed to several
matchers at once.

Usage:
    from crossmarket.models import MarketRecord, MarketCategory, MatchConfig

    market = MarketRecord(
        id="0xabc",
        platform="POLYMARKET",
        question="Will Bitcoin reach $100k by 2024?",
        category=MarketCategory.CRYPTO,
        yes_price=0.45,
    )
    config = MatchConfig(min_similarity=0.5)
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class MarketCategory(str, Enum):
    """Unified category taxonomy shared by every platform."""

    POLITICS = "POLITICS"
    SPORTS = "SPORTS"
    CRYPTO = "CRYPTO"
    ECONOMICS = "ECONOMICS"
    SCIENCE = "SCIENCE"
    ENTERTAINMENT = "ENTERTAINMENT"
    TECHNOLOGY = "TECHNOLOGY"
    OTHER = "OTHER"


# ---------------------------------------------------------------------------
# Market records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MarketRecord:
    """A normalized listing from one platform."""

    id: str
    platform: str
    question: str
    category: Optional[MarketCategory] = None
    closes_at: Optional[datetime] = None
    yes_price: Optional[float] = None  # 0-1
    no_price: Optional[float] = None  # 0-1
    liquidity: Optional[float] = None

    # Carried through to reports, never scored
    volume: Optional[float] = None
    url: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        """Identity of the record across platforms."""
        return (self.platform, self.id)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value if self.category else None
        return data

    def __repr__(self) -> str:
        return (
            f"MarketRecord(platform={self.platform!r}, id={self.id!r}, "
            f"question={self.question[:50]!r})"
        )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MatchConfig:
    """
    Tunable parameters of the similarity model.

    Args:
        min_similarity: Minimum aggregate similarity to accept a match (0-1)
        question_weight: Weight of the question-text sub-score
        category_weight: Weight of the category sub-score
        close_date_weight: Weight of the closing-date sub-score
        max_close_date_diff_days: Closing dates this many days apart score 0

    Weights are not normalized. If they do not sum to 1 the aggregate can
    leave the nominal [0, 1] range; a warning is logged but the config is
    accepted.
    """

    min_similarity: float = 0.7
    question_weight: float = 0.6
    category_weight: float = 0.2
    close_date_weight: float = 0.2
    max_close_date_diff_days: float = 7

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_similarity <= 1.0:
            raise ValueError(
                f"min_similarity must be within [0, 1], got {self.min_similarity}"
            )
        for name in ("question_weight", "category_weight", "close_date_weight"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.max_close_date_diff_days < 0:
            raise ValueError(
                "max_close_date_diff_days must be non-negative, "
                f"got {self.max_close_date_diff_days}"
            )
        if not math.isclose(self.total_weight, 1.0, abs_tol=1e-6):
            logger.warning(
                "Match weights sum to %.3f, similarity may exceed 1.0",
                self.total_weight,
            )

    @property
    def total_weight(self) -> float:
        return self.question_weight + self.category_weight + self.close_date_weight

    def with_overrides(self, **overrides: Any) -> MatchConfig:
        """Return a copy with the given fields replaced; ``None`` values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SubScores:
    """Per-signal similarity between two records, each in [0, 1]."""

    question: float
    category: float
    close_date: float


@dataclass(frozen=True)
class MarketMatch:
    """A source record paired with its best match on another platform."""

    source: MarketRecord
    match: MarketRecord
    similarity: float
    scores: SubScores

    def __repr__(self) -> str:
        return (
            f"MarketMatch(similarity={self.similarity:.3f}, "
            f"source={self.source.question[:40]!r}, "
            f"match={self.match.question[:40]!r})"
        )


@dataclass
class MatchResult:
    """Output of a pairwise matching run; every source lands in exactly one list."""

    matched: List[MarketMatch] = field(default_factory=list)
    unmatched: List[MarketRecord] = field(default_factory=list)


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """
    Yes-price discrepancy between two matched markets.

    Attributes:
        markets: The matched pair, source first
        spread: Absolute difference between the two yes prices
        potential_profit: spread times the reference position size
        match_confidence: Similarity of the originating match
    """

    markets: Tuple[MarketRecord, MarketRecord]
    spread: float
    potential_profit: float
    match_confidence: float

    @property
    def buy_yes_market(self) -> MarketRecord:
        """Side where YES is cheaper."""
        a, b = self.markets
        return a if a.yes_price <= b.yes_price else b

    @property
    def buy_no_market(self) -> MarketRecord:
        """Side where YES is dearer, so NO is the cheap leg."""
        a, b = self.markets
        return b if a.yes_price <= b.yes_price else a


@dataclass(frozen=True)
class BestPrice:
    market: MarketRecord
    price: float
