"""Exceptions raised outside the pure matching core."""


class CrossmarketError(Exception):
    """Base class for crossmarket errors."""

    pass


class ConfigError(CrossmarketError):
    """Raised when a settings file cannot be turned into Settings."""

    pass


class SnapshotError(CrossmarketError):
    """Raised when a market snapshot cannot be loaded or is missing required columns."""

    pass
