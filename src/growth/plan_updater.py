"""State transitions folding trade results back into a growth plan."""
import logging
from collections.abc import Sequence
from datetime import datetime

from src.accounts.models import Trade
from src.config.settings import PlanningSettings
from src.growth.models import DAY_CLOSED, GrowthPlan, GrowthPlanUpdate
from src.performance.performance_analyzer import PerformanceAnalyzer

logger = logging.getLogger(__name__)


def is_new_trading_day(last_trade_date: datetime | None, now: datetime) -> bool:
    """Check whether now falls on a later calendar day than the last trade.

    A plan that has never traded starts a new day on its first settlement.
    """
    if last_trade_date is None:
        return True
    return now.date() != last_trade_date.date()


class PlanUpdater:
    """Applies trade settlements to a growth plan.

    A plan is active until completed. Each settlement adapts risk per trade
    from the refreshed statistics, advances the daily slot counter and
    accumulates the day's losses. Once the day's losses reach the daily risk
    limit the slot counter is parked at DAY_CLOSED until the next day.
    """

    def __init__(
        self,
        settings: PlanningSettings | None = None,
        analyzer: PerformanceAnalyzer | None = None,
    ):
        self.settings = settings or PlanningSettings()
        self.analyzer = analyzer or PerformanceAnalyzer()

    def adjust_risk(self, risk_per_trade: float, result: float, trades: Sequence[Trade]) -> float:
        """Adapt risk per trade to the latest result.

        Args:
            risk_per_trade: Current risk per trade in percent.
            result: Realized P&L of the settled trade.
            trades: Full trade history including the settled trade.

        Returns:
            Scaled down after a loss extending a streak, scaled up after a
            win with a high win rate, otherwise unchanged. Bounded by the
            risk floor and ceiling.
        """
        s = self.settings
        stats = self.analyzer.analyze(trades)

        if result < 0 and stats.consecutive_losses >= s.loss_streak_threshold:
            return max(s.min_risk_per_trade, risk_per_trade * s.risk_decrease_factor)
        if result > 0 and stats.win_rate > s.high_win_rate:
            return min(s.max_risk_per_trade, risk_per_trade * s.risk_increase_factor)
        return risk_per_trade

    def settle(
        self,
        growth_plan: GrowthPlan,
        result: float,
        is_new_day: bool,
        trades: Sequence[Trade],
        now: datetime | None = None,
        current_balance: float | None = None,
    ) -> GrowthPlanUpdate:
        """Compute the plan state after a trade settles.

        Args:
            growth_plan: Plan before the settlement.
            result: Realized P&L of the trade.
            is_new_day: Whether the trade is the first of a new calendar day.
            trades: Full trade history including this trade.
            now: Settlement time. Defaults to datetime.now().
            current_balance: Account balance after the trade. Defaults to the
                plan's balance plus result.

        Returns:
            GrowthPlanUpdate describing the new plan state.
        """
        now = now or datetime.now()
        if current_balance is None:
            current_balance = growth_plan.current_balance + result

        risk_per_trade = self.adjust_risk(growth_plan.risk_per_trade, result, trades)
        if risk_per_trade != growth_plan.risk_per_trade:
            logger.info(
                f"Growth plan {growth_plan.id} risk per trade "
                f"{growth_plan.risk_per_trade:.3f}% -> {risk_per_trade:.3f}%"
            )

        loss = max(0.0, -result)
        if is_new_day:
            daily_loss_used = loss
            current_trade = 1
        else:
            daily_loss_used = growth_plan.daily_loss_used + loss
            current_trade = growth_plan.current_trade + 1

        reference = growth_plan.last_trade_date or growth_plan.created_at
        elapsed_days = max(0, (now.date() - reference.date()).days)
        remaining_days = max(0, growth_plan.remaining_days - elapsed_days)

        if daily_loss_used >= growth_plan.daily_risk_limit:
            logger.info(
                f"Growth plan {growth_plan.id} daily risk limit reached "
                f"({daily_loss_used:.2f}/{growth_plan.daily_risk_limit:.2f}), day closed"
            )
            current_trade = DAY_CLOSED

        total_trades_completed = growth_plan.total_trades_completed + 1
        is_completed = growth_plan.is_completed or (
            total_trades_completed >= growth_plan.target_trades
            or current_balance >= growth_plan.target_amount
        )
        if is_completed and not growth_plan.is_completed:
            logger.info(
                f"Growth plan {growth_plan.id} completed after {total_trades_completed} trades "
                f"(balance {current_balance:.2f}, target {growth_plan.target_amount:.2f})"
            )

        return GrowthPlanUpdate(
            current_balance=current_balance,
            risk_per_trade=risk_per_trade,
            total_trades_completed=total_trades_completed,
            daily_loss_used=daily_loss_used,
            current_trade=current_trade,
            remaining_days=remaining_days,
            last_trade_date=now,
            is_completed=is_completed,
            is_new_day=is_new_day,
        )
