"""
Tabular snapshot I/O.

Converts market snapshots (CSV, JSON, JSONL or Parquet files, or DataFrames
handed over by a collector) into MarketRecord lists, and converts matching
results back into flat DataFrames for reporting.

Column names vary between collectors, so a few aliases are accepted for each
field (e.g. ``title`` for ``question``, ``close_time`` for ``closes_at``).

Usage:
    from crossmarket.frames import load_markets, matches_to_dataframe

    poly = load_markets("data/polymarket.csv", platform="POLYMARKET")
    kalshi = load_markets("data/kalshi.json", platform="KALSHI")
    result = MarketMatcher().find_matches(poly, kalshi)
    matches_to_dataframe(result.matched).to_csv("matches.csv", index=False)
"""

from __future__ import annotations

import logging
import math
import numbers
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .exceptions import SnapshotError
from .matching.grouping import calculate_aggregate_liquidity, find_best_price
from .models import ArbitrageOpportunity, MarketMatch, MarketRecord
from .taxonomy import map_category

logger = logging.getLogger(__name__)

# canonical field -> accepted column names, first present wins
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "id": ("id", "market_id", "ticker", "slug"),
    "question": ("question", "title", "name"),
    "platform": ("platform", "exchange"),
    "category": ("category",),
    "closes_at": ("closes_at", "closesAt", "close_time", "end_date"),
    "yes_price": ("yes_price", "yesPrice"),
    "no_price": ("no_price", "noPrice"),
    "liquidity": ("liquidity",),
    "volume": ("volume",),
    "url": ("url",),
}

_NUMERIC_FIELDS = ("yes_price", "no_price", "liquidity", "volume")

# Epoch timestamps at or above this are milliseconds (1e11 s is year 5138)
_EPOCH_MS_THRESHOLD = 1e11
_EPOCH_TEXT = re.compile(r"^-?\d{9,}(\.\d+)?$")

MATCH_COLUMNS = [
    "source_platform", "source_id", "source_question",
    "match_platform", "match_id", "match_question",
    "similarity", "question_score", "category_score", "close_date_score",
    "source_yes_price", "match_yes_price",
]
UNMATCHED_COLUMNS = ["platform", "id", "question"]
OPPORTUNITY_COLUMNS = [
    "question",
    "buy_yes_platform", "buy_yes_id", "buy_yes_price",
    "buy_no_platform", "buy_no_id", "buy_no_price",
    "spread", "potential_profit", "match_confidence", "combined_liquidity",
]
CLUSTER_COLUMNS = [
    "cluster_key", "cluster_size", "platform", "id", "question",
    "yes_price", "is_best_yes",
]


# ---------------------------------------------------------------------------
# Snapshot -> records
# ---------------------------------------------------------------------------

def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename aliased columns to canonical names, dropping everything else."""
    out = pd.DataFrame(index=df.index)
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in df.columns:
                out[canonical] = df[alias]
                break
    return out


def _missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _optional(value: Any) -> Any:
    return None if _missing(value) else value


def _optional_float(value: Any) -> Optional[float]:
    return None if _missing(value) else float(value)


def _epoch_value(value: Any) -> float:
    """Numeric epoch timestamp, or NaN for anything that is not one."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, str) and _EPOCH_TEXT.match(value.strip()):
        return float(value)
    return math.nan


def _parse_close_times(values: pd.Series) -> pd.Series:
    """
    Parse a close-time column to UTC timestamps.

    ISO-8601 strings may differ in shape from row to row (date only, with
    time, with offset). Numeric values are epoch timestamps, in milliseconds
    when at or above 1e11 and in seconds otherwise. Values that cannot be
    parsed become NaT and are counted in a warning.
    """
    if pd.api.types.is_datetime64_any_dtype(values):
        return pd.to_datetime(values, utc=True)

    parsed = pd.Series(pd.NaT, index=values.index, dtype="datetime64[ns, UTC]")
    present = ~values.map(_missing).astype(bool)

    epochs = values.map(_epoch_value).astype(float)
    is_epoch = epochs.notna()
    millis = is_epoch & (epochs.abs() >= _EPOCH_MS_THRESHOLD)
    seconds = is_epoch & ~millis
    if millis.any():
        parsed[millis] = pd.to_datetime(epochs[millis], unit="ms", utc=True)
    if seconds.any():
        parsed[seconds] = pd.to_datetime(epochs[seconds], unit="s", utc=True)

    text = present & ~is_epoch
    if text.any():
        parsed[text] = pd.to_datetime(values[text], format="ISO8601", utc=True, errors="coerce")

    failed = int((present & parsed.isna()).sum())
    if failed:
        logger.warning("Could not parse %d close times; they are treated as unknown", failed)
    return parsed


def markets_from_dataframe(
    df: pd.DataFrame,
    platform: Optional[str] = None,
    category_overrides: Optional[Mapping[str, str]] = None,
) -> List[MarketRecord]:
    """
    Build MarketRecords from a snapshot DataFrame.

    Args:
        df: One row per market. Needs an id and a question column (or an alias).
        platform: Platform for every row; required when the frame has no
            platform/exchange column, overrides it otherwise.
        category_overrides: Raw label -> category name overrides for map_category.

    Returns:
        Records in row order. Rows without an id or question are dropped.

    Raises:
        SnapshotError: If the id or question column is missing, or no
            platform is available.
    """
    if df.empty:
        return []

    out = _normalize_columns(df)
    for required in ("id", "question"):
        if required not in out.columns:
            raise SnapshotError(
                f"Snapshot has no '{required}' column "
                f"(accepted: {', '.join(COLUMN_ALIASES[required])})"
            )
    if platform is not None:
        out["platform"] = platform
    elif "platform" not in out.columns:
        raise SnapshotError("Snapshot has no platform column; pass platform=")

    if "closes_at" in out.columns:
        out["closes_at"] = _parse_close_times(out["closes_at"])
    for name in _NUMERIC_FIELDS:
        if name in out.columns:
            out[name] = pd.to_numeric(out[name], errors="coerce")

    records: List[MarketRecord] = []
    dropped = 0

    for row in out.to_dict("records"):
        if _missing(row.get("id")) or _missing(row.get("question")) or _missing(row.get("platform")):
            dropped += 1
            continue

        closes_at = _optional(row.get("closes_at"))
        url = _optional(row.get("url"))
        records.append(MarketRecord(
            id=str(row["id"]).strip(),
            platform=str(row["platform"]).strip(),
            question=str(row["question"]),
            category=map_category(_optional(row.get("category")), category_overrides),
            closes_at=closes_at.to_pydatetime() if closes_at is not None else None,
            yes_price=_optional_float(row.get("yes_price")),
            no_price=_optional_float(row.get("no_price")),
            liquidity=_optional_float(row.get("liquidity")),
            volume=_optional_float(row.get("volume")),
            url=str(url) if url is not None else None,
        ))

    if dropped:
        logger.warning("Dropped %d snapshot rows without id, question or platform", dropped)
    return records


def read_snapshot(path: Union[str, Path]) -> pd.DataFrame:
    """Read a snapshot file into a DataFrame based on its suffix."""
    path = Path(path)
    if not path.exists():
        raise SnapshotError(f"Snapshot not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            # Keep ids as text; numeric columns are coerced later
            return pd.read_csv(path, dtype=str)
        if suffix == ".json":
            return pd.read_json(path, dtype=False, convert_dates=False)
        if suffix == ".jsonl":
            return pd.read_json(path, lines=True, dtype=False, convert_dates=False)
        if suffix == ".parquet":
            return pd.read_parquet(path)
    except (ValueError, OSError) as e:
        raise SnapshotError(f"Could not read snapshot {path}: {e}") from e

    raise SnapshotError(f"Unsupported snapshot format: {path.suffix or path.name}")


def load_markets(
    path: Union[str, Path],
    platform: Optional[str] = None,
    category_overrides: Optional[Mapping[str, str]] = None,
) -> List[MarketRecord]:
    """Read a snapshot file and convert it to MarketRecords."""
    markets = markets_from_dataframe(read_snapshot(path), platform, category_overrides)
    logger.info("Loaded %d markets from %s", len(markets), path)
    return markets


# ---------------------------------------------------------------------------
# Results -> DataFrames
# ---------------------------------------------------------------------------

def matches_to_dataframe(matches: Sequence[MarketMatch]) -> pd.DataFrame:
    """Flatten matches, one row per pair."""
    rows = [
        {
            "source_platform": m.source.platform,
            "source_id": m.source.id,
            "source_question": m.source.question,
            "match_platform": m.match.platform,
            "match_id": m.match.id,
            "match_question": m.match.question,
            "similarity": m.similarity,
            "question_score": m.scores.question,
            "category_score": m.scores.category,
            "close_date_score": m.scores.close_date,
            "source_yes_price": m.source.yes_price,
            "match_yes_price": m.match.yes_price,
        }
        for m in matches
    ]
    return pd.DataFrame(rows, columns=MATCH_COLUMNS)


def unmatched_to_dataframe(markets: Sequence[MarketRecord]) -> pd.DataFrame:
    rows = [{"platform": m.platform, "id": m.id, "question": m.question} for m in markets]
    return pd.DataFrame(rows, columns=UNMATCHED_COLUMNS)


def opportunities_to_dataframe(opportunities: Sequence[ArbitrageOpportunity]) -> pd.DataFrame:
    """Flatten opportunities; the YES leg is the cheaper side, the NO leg the dearer one."""
    rows = []
    for opp in opportunities:
        yes_leg, no_leg = opp.buy_yes_market, opp.buy_no_market
        rows.append({
            "question": opp.markets[0].question,
            "buy_yes_platform": yes_leg.platform,
            "buy_yes_id": yes_leg.id,
            "buy_yes_price": yes_leg.yes_price,
            "buy_no_platform": no_leg.platform,
            "buy_no_id": no_leg.id,
            "buy_no_price": (
                no_leg.no_price if no_leg.no_price is not None else 1.0 - no_leg.yes_price
            ),
            "spread": opp.spread,
            "potential_profit": opp.potential_profit,
            "match_confidence": opp.match_confidence,
            "combined_liquidity": calculate_aggregate_liquidity(opp.markets),
        })
    return pd.DataFrame(rows, columns=OPPORTUNITY_COLUMNS)


def clusters_to_dataframe(clusters: Mapping[str, Sequence[MarketRecord]]) -> pd.DataFrame:
    """One row per cluster member, flagging the cheapest YES quote in each cluster."""
    rows = []
    for key, members in clusters.items():
        best = find_best_price(members, "yes")
        for market in members:
            rows.append({
                "cluster_key": key,
                "cluster_size": len(members),
                "platform": market.platform,
                "id": market.id,
                "question": market.question,
                "yes_price": market.yes_price,
                "is_best_yes": best is not None and best.market.key == market.key,
            })
    return pd.DataFrame(rows, columns=CLUSTER_COLUMNS)
