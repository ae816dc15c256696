"""Data models for performance analysis."""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TradeStats:
    """Summary statistics that drive risk adaptation.

    Attributes:
        win_rate: Fraction of trades that were profitable (0-1).
        average_risk_reward: Mean win divided by mean absolute loss.
        average_trade_size: Mean lot size.
        consecutive_losses: Length of the current losing streak.
        total_trades: Number of trades analyzed.
    """

    win_rate: float
    average_risk_reward: float
    average_trade_size: float
    consecutive_losses: int
    total_trades: int


@dataclass
class PairPerformance:
    """Trade count and P&L for a single instrument."""

    trades: int = 0
    pnl: float = 0.0


@dataclass
class PerformanceSummary:
    """Account performance report."""

    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float  # percent
    total_pnl: float
    average_win: float
    average_loss: float
    pair_performance: dict[str, PairPerformance] = field(default_factory=dict)
