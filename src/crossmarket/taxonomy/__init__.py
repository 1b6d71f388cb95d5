"""
Market taxonomy module.

Maps platform-specific category labels onto the unified MarketCategory enum.
"""

from .categories import (
    CATEGORY_PATTERNS,
    category_counts,
    map_categories,
    map_category,
)

__all__ = [
    "CATEGORY_PATTERNS",
    "map_category",
    "map_categories",
    "category_counts",
]
