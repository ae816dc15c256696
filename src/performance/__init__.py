"""Performance statistics over trade history."""

from .models import PairPerformance, PerformanceSummary, TradeStats
from .performance_analyzer import PerformanceAnalyzer

__all__ = [
    "PairPerformance",
    "PerformanceAnalyzer",
    "PerformanceSummary",
    "TradeStats",
]
