"""
Cross-platform arbitrage detection for matched prediction markets.
"""

from .detector import DEFAULT_MIN_SPREAD, DEFAULT_POSITION_SIZE, ArbitrageDetector

__all__ = [
    "ArbitrageDetector",
    "DEFAULT_MIN_SPREAD",
    "DEFAULT_POSITION_SIZE",
]
