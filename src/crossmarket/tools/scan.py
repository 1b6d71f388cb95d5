"""
Cross-platform market scanner.

Loads market snapshot files, matches listings across platforms and reports
matches, arbitrage opportunities, same-topic clusters, or the closest
markets to a free-text question.

For ``match`` and ``arbitrage`` the first platform found in the snapshots
is the source side and every other platform is the target pool.

Usage:
    crossmarket-scan match data/polymarket.csv data/kalshi.csv
    crossmarket-scan arbitrage data/*.json --min-spread 0.03 -o arbs.csv
    crossmarket-scan cluster data/all_markets.parquet --min-cluster-size 3
    crossmarket-scan lookup data/*.csv --query "Will Bitcoin reach $100k?" --limit 10
    crossmarket-scan match poly.csv kalshi.csv --platform POLYMARKET --platform KALSHI
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from ..arbitrage import ArbitrageDetector
from ..config import Settings, load_settings
from ..exceptions import CrossmarketError
from ..frames import (
    clusters_to_dataframe,
    load_markets,
    matches_to_dataframe,
    opportunities_to_dataframe,
    unmatched_to_dataframe,
)
from ..logging_config import setup_logging
from ..matching import MarketMatcher, group_by_platform
from ..models import MarketRecord, MatchConfig
from ..taxonomy import category_counts
from .cli_utils import print_dataframe, print_panel

logger = logging.getLogger(__name__)

MODES = ("match", "arbitrage", "cluster", "lookup")
QUERY_PLATFORM = "QUERY"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crossmarket-scan",
        description="Match prediction markets across platforms and detect arbitrage",
    )
    parser.add_argument("mode", choices=MODES, help="What to report")
    parser.add_argument("files", nargs="+", type=Path, help="Snapshot files (.csv, .json, .jsonl, .parquet)")
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file (default: config/default.yaml)")
    parser.add_argument(
        "--platform", action="append", default=None,
        help="Platform of each file, in file order (repeat once per file)",
    )

    matching = parser.add_argument_group("matching")
    matching.add_argument("--min-similarity", type=float, default=None)
    matching.add_argument("--question-weight", type=float, default=None)
    matching.add_argument("--category-weight", type=float, default=None)
    matching.add_argument("--close-date-weight", type=float, default=None)
    matching.add_argument("--max-days", type=float, default=None, help="Close-date window in days")

    parser.add_argument("--min-spread", type=float, default=None, help="Minimum YES-price spread (arbitrage)")
    parser.add_argument("--position-size", type=float, default=None, help="Reference position for profit (arbitrage)")
    parser.add_argument("--min-cluster-size", type=int, default=None, help="Smallest cluster kept (cluster)")
    parser.add_argument("--query", default=None, help="Question to look up (lookup)")
    parser.add_argument("--limit", type=int, default=None, help="Results per lookup")

    output = parser.add_argument_group("output")
    output.add_argument("--json", action="store_true", help="Print JSON records instead of a table")
    output.add_argument("-o", "--output", type=Path, default=None, help="Also write results to CSV")
    output.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_match_config(args: argparse.Namespace, settings: Settings) -> MatchConfig:
    """Settings file values, overridden by any command-line flags given."""
    return settings.matching.to_match_config().with_overrides(
        min_similarity=args.min_similarity,
        question_weight=args.question_weight,
        category_weight=args.category_weight,
        close_date_weight=args.close_date_weight,
        max_close_date_diff_days=args.max_days,
    )


def load_all(
    files: Sequence[Path],
    platforms: Optional[Sequence[str]],
    settings: Settings,
) -> List[MarketRecord]:
    if platforms is not None and len(platforms) != len(files):
        raise CrossmarketError(
            f"Got {len(platforms)} --platform values for {len(files)} files"
        )

    markets: List[MarketRecord] = []
    for i, path in enumerate(files):
        platform = platforms[i] if platforms is not None else None
        markets.extend(load_markets(path, platform, settings.taxonomy.overrides))

    logger.info(
        "Loaded %d markets; categories: %s",
        len(markets),
        category_counts(m.category for m in markets),
    )
    return markets


def split_source_target(markets: Sequence[MarketRecord]) -> Tuple[List[MarketRecord], List[MarketRecord]]:
    """First platform as source, all remaining platforms pooled as target."""
    groups = group_by_platform(markets)
    if len(groups) < 2:
        raise CrossmarketError(
            f"Need markets from at least two platforms, got {list(groups) or 'none'}"
        )
    platforms = list(groups)
    target = [m for p in platforms[1:] for m in groups[p]]
    logger.info("Source platform %s (%d markets) vs %s", platforms[0], len(groups[platforms[0]]), platforms[1:])
    return groups[platforms[0]], target


def run_match(matcher: MarketMatcher, markets: Sequence[MarketRecord]) -> pd.DataFrame:
    source, target = split_source_target(markets)
    result = matcher.find_matches(source, target)
    logger.info("Matched %d, unmatched %d", len(result.matched), len(result.unmatched))
    if result.unmatched:
        logger.debug("Unmatched:\n%s", unmatched_to_dataframe(result.unmatched).to_string(index=False))
    return matches_to_dataframe(result.matched)


def run_arbitrage(
    matcher: MarketMatcher,
    detector: ArbitrageDetector,
    markets: Sequence[MarketRecord],
) -> pd.DataFrame:
    source, target = split_source_target(markets)
    result = matcher.find_matches(source, target)
    opportunities = detector.find_opportunities(result.matched)
    logger.info("%d opportunities from %d matches", len(opportunities), len(result.matched))
    return opportunities_to_dataframe(opportunities)


def run_cluster(
    matcher: MarketMatcher,
    markets: Sequence[MarketRecord],
    min_cluster_size: int,
) -> pd.DataFrame:
    clusters = matcher.cluster_markets(markets, min_cluster_size)
    logger.info("%d clusters from %d markets", len(clusters), len(markets))
    return clusters_to_dataframe(clusters)


def run_lookup(
    matcher: MarketMatcher,
    markets: Sequence[MarketRecord],
    query: str,
    limit: int,
) -> pd.DataFrame:
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    probe = MarketRecord(id="query", platform=QUERY_PLATFORM, question=query)
    return matches_to_dataframe(matcher.find_matches_for_market(probe, markets, limit))


def emit(df: pd.DataFrame, args: argparse.Namespace, title: str, max_rows: int) -> None:
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.output, index=False)
        logger.info("Wrote %d rows to %s", len(df), args.output)

    if args.json:
        print(df.to_json(orient="records", indent=2, date_format="iso"))
    elif df.empty:
        print_panel("No results", title=title, style="yellow")
    else:
        print_dataframe(df, title=title, max_rows=max_rows)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config) if args.config else load_settings()
    except CrossmarketError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.logging, level="DEBUG" if args.verbose else None)

    if args.mode == "lookup" and not args.query:
        parser.error("lookup requires --query")

    try:
        matcher = MarketMatcher(resolve_match_config(args, settings))
        markets = load_all(args.files, args.platform, settings)

        if args.mode == "match":
            df = run_match(matcher, markets)
        elif args.mode == "arbitrage":
            detector = ArbitrageDetector(
                min_spread=args.min_spread if args.min_spread is not None else settings.arbitrage.min_spread,
                position_size=(
                    args.position_size if args.position_size is not None
                    else settings.arbitrage.position_size
                ),
            )
            df = run_arbitrage(matcher, detector, markets)
        elif args.mode == "cluster":
            size = (
                args.min_cluster_size if args.min_cluster_size is not None
                else settings.clustering.min_cluster_size
            )
            df = run_cluster(matcher, markets, size)
        else:
            limit = args.limit if args.limit is not None else settings.scan.limit
            df = run_lookup(matcher, markets, args.query, limit)
    except (CrossmarketError, ValueError) as e:
        logger.error("%s", e)
        return 2

    emit(df, args, title=f"crossmarket {args.mode}", max_rows=settings.scan.max_rows)
    return 0


if __name__ == "__main__":
    sys.exit(main())
