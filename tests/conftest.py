"""
Shared pytest fixtures for the crossmarket test suite.

Provides:
- A market record factory with sensible defaults
- Small cross-platform snapshots for matching and arbitrage tests
- Snapshot DataFrames and files for frame/CLI tests
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List

import pandas as pd
import pytest


# Ensure src is in path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from crossmarket.models import MarketCategory, MarketRecord  # noqa: E402


BASE_CLOSE = datetime(2024, 12, 31, tzinfo=timezone.utc)


def create_market(**overrides) -> MarketRecord:
    """
    Build a MarketRecord with test defaults.

    Defaults describe a Polymarket crypto market closing at the end of 2024.
    """
    fields = {
        "id": "test-market-1",
        "platform": "POLYMARKET",
        "question": "Will Bitcoin reach $100k by end of 2024?",
        "category": MarketCategory.CRYPTO,
        "closes_at": BASE_CLOSE,
        "yes_price": 0.5,
        "no_price": 0.5,
        "liquidity": 5000.0,
        "volume": 10000.0,
    }
    fields.update(overrides)
    return MarketRecord(**fields)


@pytest.fixture
def make_market() -> Callable[..., MarketRecord]:
    """Factory fixture wrapping create_market."""
    return create_market


@pytest.fixture
def polymarket_markets() -> List[MarketRecord]:
    return [
        create_market(
            id="poly-btc",
            question="Will Bitcoin reach $100k by December 2024?",
            yes_price=0.45,
        ),
        create_market(
            id="poly-fed",
            question="Will the Fed cut interest rates in March?",
            category=MarketCategory.ECONOMICS,
            closes_at=datetime(2024, 3, 20, tzinfo=timezone.utc),
            yes_price=0.30,
        ),
        create_market(
            id="poly-oscar",
            question="Which film wins Best Picture at the Oscars?",
            category=MarketCategory.ENTERTAINMENT,
            closes_at=datetime(2024, 3, 10, tzinfo=timezone.utc),
            yes_price=None,
        ),
    ]


@pytest.fixture
def kalshi_markets() -> List[MarketRecord]:
    return [
        create_market(
            id="kalshi-fed",
            platform="KALSHI",
            question="Fed cut interest rates in March?",
            category=MarketCategory.ECONOMICS,
            closes_at=datetime(2024, 3, 20, tzinfo=timezone.utc),
            yes_price=0.34,
            liquidity=2000.0,
        ),
        create_market(
            id="kalshi-btc",
            platform="KALSHI",
            question="Bitcoin reach $100k by December 2024?",
            yes_price=0.55,
            liquidity=3000.0,
        ),
    ]


@pytest.fixture
def snapshot_df() -> pd.DataFrame:
    """Snapshot frame using collector-style column aliases."""
    return pd.DataFrame([
        {
            "market_id": "K-BTC-100K",
            "title": "Bitcoin reach $100k by December 2024?",
            "exchange": "KALSHI",
            "category": "Crypto",
            "close_time": "2024-12-31T00:00:00Z",
            "yesPrice": 0.55,
            "liquidity": 3000,
        },
        {
            "market_id": "K-FED-MAR",
            "title": "Fed cut interest rates in March?",
            "exchange": "KALSHI",
            "category": "Economics",
            "close_time": "2024-03-20T00:00:00Z",
            "yesPrice": None,
            "liquidity": None,
        },
    ])
