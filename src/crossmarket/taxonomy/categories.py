"""
Unified category taxonomy.

Each platform labels its markets differently ("US Politics", "nba",
"Macro / Fed", ...). ``map_category`` folds a raw label into the shared
``MarketCategory`` enum so the category sub-score can compare listings from
different platforms.

A missing label stays ``None`` (unknown, scored neutral), while a label that
matches no rule becomes ``OTHER``.

Usage:
    from crossmarket.taxonomy import map_category

    map_category("US Elections")   # MarketCategory.POLITICS
    map_category("Bitcoin")        # MarketCategory.CRYPTO
    map_category("")               # None
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Tuple

from ..models import MarketCategory

logger = logging.getLogger(__name__)


# Checked in order; the first category with a matching pattern wins.
CATEGORY_PATTERNS: Tuple[Tuple[MarketCategory, Tuple[str, ...]], ...] = (
    (MarketCategory.POLITICS, (
        "politic", "election", "government", "president", "congress",
        "trump", "biden",
    )),
    (MarketCategory.SPORTS, (
        "sport", "nfl", "nba", "mlb", "soccer", "football", "basketball",
        "tennis",
    )),
    (MarketCategory.CRYPTO, (
        "crypto", "bitcoin", "ethereum", "btc", "blockchain", "defi", "nft",
    )),
    (MarketCategory.ECONOMICS, (
        "econ", "finance", "fed", "inflation", "stock", "interest", "gdp",
        "cpi",
    )),
    (MarketCategory.SCIENCE, (
        "science", "space", "climate", "nasa",
    )),
    (MarketCategory.TECHNOLOGY, (
        "tech", r"\bai\b", "software",
    )),
    (MarketCategory.ENTERTAINMENT, (
        "entertainment", "celebrity", "movie", "music", r"\btv\b",
    )),
)


def _compile(patterns: Iterable[str]) -> List[Pattern[str]]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


_COMPILED: List[Tuple[MarketCategory, List[Pattern[str]]]] = [
    (category, _compile(patterns)) for category, patterns in CATEGORY_PATTERNS
]


def map_category(
    label: Optional[str],
    overrides: Optional[Mapping[str, str]] = None,
) -> Optional[MarketCategory]:
    """
    Map a raw platform category label onto ``MarketCategory``.

    Args:
        label: Raw label as reported by the platform (may be None or empty)
        overrides: Optional exact label -> category name mapping, checked
            first (case-insensitive on the label)

    Returns:
        The unified category, or None when the label is missing.
    """
    if label is None:
        return None
    if isinstance(label, MarketCategory):
        return label

    text = str(label).strip()
    if not text:
        return None

    if overrides:
        lowered = {k.lower(): v for k, v in overrides.items()}
        target = lowered.get(text.lower())
        if target is not None:
            try:
                return MarketCategory(target.upper())
            except ValueError:
                logger.warning("Ignoring override %r -> %r: unknown category", text, target)

    try:
        return MarketCategory(text.upper())
    except ValueError:
        pass

    for category, patterns in _COMPILED:
        if any(p.search(text) for p in patterns):
            return category

    return MarketCategory.OTHER


def map_categories(
    labels: Iterable[Optional[str]],
    overrides: Optional[Mapping[str, str]] = None,
) -> List[Optional[MarketCategory]]:
    return [map_category(label, overrides) for label in labels]


def category_counts(categories: Iterable[Optional[MarketCategory]]) -> Dict[str, int]:
    """Count categories, with unknown ones under "UNKNOWN"."""
    counts: Dict[str, int] = {}
    for category in categories:
        name = category.value if category is not None else "UNKNOWN"
        counts[name] = counts.get(name, 0) + 1
    return counts
