"""Player models."""

from .player import Category, DerivedMetrics, PerformanceStats, PlayerRecord, StoredPlayer

__all__ = [
    "Category",
    "DerivedMetrics",
    "PerformanceStats",
    "PlayerRecord",
    "StoredPlayer",
]
