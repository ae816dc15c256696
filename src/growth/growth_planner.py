"""Growth planner deriving return targets and trade recommendations."""
import logging
import math
from collections.abc import Sequence
from datetime import datetime

from src.accounts.models import Account, Trade
from src.config.settings import PlanningSettings
from src.growth.exceptions import PlanValidationError
from src.growth.models import GrowthPlan, GrowthPlanAnalysis, TradeRecommendation
from src.instruments.pip_values import PipValueTable
from src.performance.models import TradeStats
from src.performance.performance_analyzer import PerformanceAnalyzer
from src.sizing.position_sizer import PositionSizer

logger = logging.getLogger(__name__)

REASON_SPARSE_HISTORY = "Conservative approach recommended due to limited trading history"
REASON_LOSING_STREAK = "Reduced risk allocation due to recent consecutive losses"
REASON_AGGRESSIVE_TARGET = "High target requires aggressive approach - consider extending timeframe"
REASON_STRONG_PERFORMANCE = "Increased confidence based on strong historical performance"
REASON_BALANCED = "Balanced approach based on current market conditions and your trading history"


class GrowthPlanner:
    """Turns a profit target and horizon into risk budgets and trade ideas.

    Inverts compound growth to find the daily return the target needs,
    sizes risk with a fractional Kelly estimate from trading history, and
    ranks up to three recommendations from the instrument priority list.
    """

    BASE_CONFIDENCE = 0.70
    MIN_CONFIDENCE = 0.30
    MAX_CONFIDENCE = 0.95
    AGGRESSIVE_DAILY_RETURN = 0.02

    def __init__(
        self,
        pip_table: PipValueTable,
        settings: PlanningSettings | None = None,
        analyzer: PerformanceAnalyzer | None = None,
        sizer: PositionSizer | None = None,
    ):
        """Initialize the planner.

        Args:
            pip_table: Instrument universe with pip values and priorities.
            settings: Policy constants. Defaults to PlanningSettings().
            analyzer: Performance analyzer. Created if not given.
            sizer: Position sizer. Created over pip_table if not given.
        """
        self.pip_table = pip_table
        self.settings = settings or PlanningSettings()
        self.analyzer = analyzer or PerformanceAnalyzer()
        self.sizer = sizer or PositionSizer(pip_table)

    def required_daily_return(
        self, current_balance: float, target_amount: float, horizon_days: int
    ) -> float:
        """Compounding daily return that grows the balance to the target.

        Args:
            current_balance: Starting balance, must be positive.
            target_amount: Target balance, must exceed current_balance.
            horizon_days: Days available, must be positive.

        Returns:
            Daily return as a fraction.

        Raises:
            PlanValidationError: If the inputs make the formula undefined.
        """
        self._validate(current_balance, target_amount, horizon_days)
        return (target_amount / current_balance) ** (1 / horizon_days) - 1

    def plan(
        self,
        account: Account,
        target_amount: float,
        horizon_days: int,
        trades: Sequence[Trade],
    ) -> GrowthPlanAnalysis:
        """Build a growth plan analysis for an account.

        Args:
            account: Account to plan for.
            target_amount: Balance to reach.
            horizon_days: Days to reach it in.
            trades: The account's trade history.

        Returns:
            GrowthPlanAnalysis with percentages for progress, return and risk.

        Raises:
            PlanValidationError: For non-positive balance, target or horizon,
                or a target that is already met.
        """
        balance = account.current_balance
        daily_return = self.required_daily_return(balance, target_amount, horizon_days)
        stats = self.analyzer.analyze(trades)

        recommendations = self.recommend_trades(balance, daily_return, stats)
        reason = self.adjustment_reason(stats, daily_return)

        logger.info(
            f"Growth plan for account {account.id}: "
            f"{daily_return * 100:.3f}% daily over {horizon_days} days ({reason})"
        )

        return GrowthPlanAnalysis(
            current_progress=balance / target_amount * 100,
            days_to_target=horizon_days,
            required_daily_return=daily_return * 100,
            optimal_risk_per_trade=self.optimal_risk_per_trade(stats.win_rate),
            recommended_trades=recommendations,
            adjustment_reason=reason,
        )

    def create_growth_plan(
        self,
        account: Account,
        target_amount: float,
        horizon_days: int,
        trades: Sequence[Trade] = (),
        now: datetime | None = None,
        plan_id: int = 0,
    ) -> GrowthPlan:
        """Create the initial GrowthPlan record for an account.

        Raises:
            PlanValidationError: Same conditions as plan().
        """
        self._validate(account.current_balance, target_amount, horizon_days)
        stats = self.analyzer.analyze(trades)
        now = now or datetime.now()

        return GrowthPlan(
            id=plan_id,
            account_id=account.id,
            target_amount=target_amount,
            current_balance=account.current_balance,
            target_trades=horizon_days * self.settings.trades_per_day,
            daily_risk_limit=account.current_balance * self.settings.max_daily_risk,
            risk_per_trade=self.optimal_risk_per_trade(stats.win_rate),
            remaining_days=horizon_days,
            created_at=now,
            updated_at=now,
        )

    def optimal_risk_per_trade(self, win_rate: float) -> float:
        """Quarter-Kelly risk per trade at the minimum risk:reward.

        Args:
            win_rate: Historical win rate (0-1).

        Returns:
            Risk per trade in percent of balance, between the floor and the
            single-trade ceiling.
        """
        s = self.settings
        kelly = win_rate - (1 - win_rate) / s.min_risk_reward
        conservative = min(kelly * s.kelly_fraction, s.max_single_trade_risk)
        return max(s.min_risk_per_trade, conservative * 100)

    def recommend_trades(
        self, balance: float, daily_return: float, stats: TradeStats
    ) -> list[TradeRecommendation]:
        """Rank trade recommendations across the top priority instruments.

        Args:
            balance: Current balance.
            daily_return: Required daily return as a fraction.
            stats: Trading statistics.

        Returns:
            Up to three recommendations; unsupported instruments are skipped.
        """
        s = self.settings
        max_daily_risk = min(s.max_daily_risk, daily_return * s.daily_return_risk_factor)
        recommendations = []

        for instrument, allocation in zip(self.pip_table.priority, s.risk_allocation):
            pip_value = self.pip_table.value_per_pip(instrument)
            if not pip_value:
                continue

            risk_fraction = max_daily_risk * allocation
            stop_distance = self.stop_distance(instrument, stats)
            take_profit = stop_distance * s.min_risk_reward
            lot_size = self.sizer.optimal_lot_size(
                balance, risk_fraction * 100, stop_distance, instrument
            )

            recommendations.append(
                TradeRecommendation(
                    instrument=instrument,
                    lot_size=lot_size,
                    risk_amount=balance * risk_fraction,
                    potential_profit=take_profit * lot_size * pip_value,
                    risk_reward_ratio=s.min_risk_reward,
                    stop_loss_distance=stop_distance,
                    take_profit_distance=take_profit,
                    confidence=self.confidence(stats),
                )
            )

        return recommendations

    def stop_distance(self, instrument: str, stats: TradeStats) -> float:
        """Volatility stop adjusted for recent performance.

        A losing streak longer than two trades tightens the stop; otherwise
        a win rate above the high-win threshold widens it.
        """
        s = self.settings
        base = self.pip_table.base_stop_pips(instrument)

        if stats.consecutive_losses > 2:
            return base * s.stop_tighten_factor
        if stats.win_rate > s.high_win_rate:
            return base * s.stop_widen_factor
        return base

    def confidence(self, stats: TradeStats) -> float:
        """Heuristic confidence score for a recommendation, 0.30-0.95."""
        confidence = self.BASE_CONFIDENCE

        if stats.win_rate > 0.6:
            confidence += 0.1
        if stats.average_risk_reward > 2.0:
            confidence += 0.1
        if stats.consecutive_losses > 3:
            confidence -= 0.2

        return round(max(self.MIN_CONFIDENCE, min(self.MAX_CONFIDENCE, confidence)), 2)

    def adjustment_reason(self, stats: TradeStats, daily_return: float) -> str:
        """Pick the single rationale for the plan. First matching rule wins."""
        if stats.total_trades < self.settings.sparse_history_trades:
            return REASON_SPARSE_HISTORY
        if stats.consecutive_losses > 3:
            return REASON_LOSING_STREAK
        if daily_return > self.AGGRESSIVE_DAILY_RETURN:
            return REASON_AGGRESSIVE_TARGET
        if stats.win_rate > self.settings.high_win_rate:
            return REASON_STRONG_PERFORMANCE
        return REASON_BALANCED

    def _validate(self, current_balance: float, target_amount: float, horizon_days: int) -> None:
        values = {
            "current_balance": current_balance,
            "target_amount": target_amount,
            "horizon_days": horizon_days,
        }
        for name, value in values.items():
            if value is None or not math.isfinite(value) or value <= 0:
                raise PlanValidationError(f"{name} must be positive, got {value}")

        if target_amount <= current_balance:
            raise PlanValidationError(
                f"target_amount ({target_amount:.2f}) must exceed "
                f"current_balance ({current_balance:.2f})"
            )
