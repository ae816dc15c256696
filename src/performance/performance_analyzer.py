"""Analyzer reducing trade history to performance statistics."""
from collections.abc import Sequence

from src.accounts.models import Trade, TradeOutcome
from src.performance.models import PairPerformance, PerformanceSummary, TradeStats

DEFAULT_STATS = TradeStats(
    win_rate=0.6,
    average_risk_reward=2.5,
    average_trade_size=0.01,
    consecutive_losses=0,
    total_trades=0,
)


class PerformanceAnalyzer:
    """Calculates trade statistics from an account's trade history.

    All methods are pure functions of their input. History is put in
    chronological order before analysis.
    """

    def analyze(self, trades: Sequence[Trade]) -> TradeStats:
        """Reduce trade history to the statistics used for planning.

        Args:
            trades: Settled trades for one account, possibly empty.

        Returns:
            TradeStats. An empty history yields the conservative baseline
            DEFAULT_STATS.
        """
        if not trades:
            return DEFAULT_STATS

        ordered = self._chronological(trades)

        winners = [t for t in ordered if t.is_win]
        losers = [t for t in ordered if t.is_loss]

        total_trades = len(ordered)
        win_rate = len(winners) / total_trades

        avg_win = sum(t.profit_loss for t in winners) / len(winners) if winners else 0.0
        # No losers yet: treat the mean loss as one unit
        avg_loss = abs(sum(t.profit_loss for t in losers)) / len(losers) if losers else 1.0

        average_trade_size = sum(t.lot_size for t in ordered) / total_trades

        return TradeStats(
            win_rate=win_rate,
            average_risk_reward=avg_win / avg_loss,
            average_trade_size=average_trade_size,
            consecutive_losses=self.consecutive_losses(ordered),
            total_trades=total_trades,
        )

    def consecutive_losses(self, trades: Sequence[Trade]) -> int:
        """Count the current losing streak.

        Scans from the most recent trade backward and stops at the first
        trade that is not a loss.

        Args:
            trades: Trades in chronological order.

        Returns:
            Number of consecutive losses ending at the latest trade.
        """
        streak = 0
        for trade in reversed(trades):
            if not trade.is_loss:
                break
            streak += 1
        return streak

    def summarize(self, trades: Sequence[Trade]) -> PerformanceSummary:
        """Build a performance report with a per-instrument breakdown.

        Args:
            trades: Settled trades for one account.

        Returns:
            PerformanceSummary with win rate as a percentage.
        """
        wins = [t for t in trades if t.outcome == TradeOutcome.WIN]
        losses = [t for t in trades if t.outcome == TradeOutcome.LOSS]

        total_trades = len(trades)
        win_rate = len(wins) / total_trades * 100 if total_trades > 0 else 0.0

        average_win = sum(t.profit_loss for t in wins) / len(wins) if wins else 0.0
        average_loss = sum(abs(t.profit_loss) for t in losses) / len(losses) if losses else 0.0

        pair_performance: dict[str, PairPerformance] = {}
        for trade in trades:
            pair = pair_performance.setdefault(trade.instrument, PairPerformance())
            pair.trades += 1
            pair.pnl += trade.profit_loss

        return PerformanceSummary(
            total_trades=total_trades,
            winning_trades=len(wins),
            losing_trades=len(losses),
            win_rate=win_rate,
            total_pnl=sum(t.profit_loss for t in trades),
            average_win=average_win,
            average_loss=average_loss,
            pair_performance=pair_performance,
        )

    def _chronological(self, trades: Sequence[Trade]) -> list[Trade]:
        """Sort trades oldest first, keeping input order for equal times."""
        return sorted(trades, key=lambda t: t.traded_at)
