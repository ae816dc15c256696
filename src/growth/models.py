"""Data models for growth plans and daily trade slots."""
from dataclasses import dataclass, field, replace
from datetime import date, datetime

# current_trade value that blocks further slots for the day
DAY_CLOSED = 4


@dataclass
class GrowthPlan:
    """Multi-day plan turning a profit target into daily trade quotas.

    Attributes:
        id: Plan identifier.
        account_id: Account the plan belongs to.
        target_amount: Balance the plan aims to reach.
        current_balance: Balance as of the last settlement.
        target_trades: Trades the plan expects to take in total.
        current_trade: Slot index for today (1-3), or DAY_CLOSED.
        daily_risk_limit: Maximum currency loss per day.
        daily_loss_used: Currency lost so far today.
        risk_per_trade: Risk per trade as a percentage of balance.
        total_trades_completed: Trades settled against the plan.
        remaining_days: Planning days left.
        last_trade_date: When the last trade settled.
        is_completed: Terminal flag.
        created_at: When the plan was created.
        updated_at: When the plan last changed.
    """

    id: int
    account_id: int
    target_amount: float
    current_balance: float
    target_trades: int
    daily_risk_limit: float
    risk_per_trade: float
    remaining_days: int
    current_trade: int = 1
    daily_loss_used: float = 0.0
    total_trades_completed: int = 0
    last_trade_date: datetime | None = None
    is_completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_day_closed(self) -> bool:
        return self.current_trade >= DAY_CLOSED

    @property
    def remaining_daily_risk(self) -> float:
        return max(0.0, self.daily_risk_limit - self.daily_loss_used)

    @property
    def progress(self) -> float:
        """Current balance as a percentage of the target amount."""
        if self.target_amount <= 0:
            return 0.0
        return self.current_balance / self.target_amount * 100


@dataclass
class DailyTradePlan:
    """One of up to three trade slots for a planning day.

    Attributes:
        id: Slot identifier (0 until stored).
        growth_plan_id: Owning growth plan.
        instrument: Pair to trade.
        trade_number: Slot index, 1-3.
        allocated_risk: Share of the daily risk limit, in percent.
        lot_size: Recommended lot size.
        stop_loss_pips: Stop distance.
        take_profit_pips: Target distance.
        expected_profit: Profit if the target is hit.
        trade_date: Planning day.
        actual_result: Realized P&L once executed.
        is_executed: Whether the slot has been settled.
        executed_at: When the slot was settled.
    """

    growth_plan_id: int
    instrument: str
    trade_number: int
    allocated_risk: float
    lot_size: float
    stop_loss_pips: float
    take_profit_pips: float
    expected_profit: float
    trade_date: date
    id: int = 0
    actual_result: float | None = None
    is_executed: bool = False
    executed_at: datetime | None = None

    def execute(self, result: float, executed_at: datetime) -> "DailyTradePlan":
        """Return a copy recording the slot's realized result.

        Raises:
            ValueError: If the slot was already executed.
        """
        if self.is_executed:
            raise ValueError(f"Slot {self.id} (trade {self.trade_number}) already executed")
        return replace(self, actual_result=result, is_executed=True, executed_at=executed_at)


@dataclass(frozen=True)
class TradeRecommendation:
    """A ranked trade suggestion from the growth planner."""

    instrument: str
    lot_size: float
    risk_amount: float
    potential_profit: float
    risk_reward_ratio: float
    stop_loss_distance: float
    take_profit_distance: float
    confidence: float  # 0.30-0.95


@dataclass(frozen=True)
class GrowthPlanAnalysis:
    """Result of growth planning for an account.

    Attributes:
        current_progress: Balance as a percentage of the target.
        days_to_target: Planning horizon in days.
        required_daily_return: Compounding daily return needed, in percent.
        optimal_risk_per_trade: Recommended risk per trade, in percent.
        recommended_trades: Up to three ranked recommendations.
        adjustment_reason: Explanation of the risk stance.
    """

    current_progress: float
    days_to_target: int
    required_daily_return: float
    optimal_risk_per_trade: float
    recommended_trades: list[TradeRecommendation]
    adjustment_reason: str


@dataclass(frozen=True)
class GrowthPlanUpdate:
    """New growth plan state after a trade settlement."""

    current_balance: float
    risk_per_trade: float
    total_trades_completed: int
    daily_loss_used: float
    current_trade: int
    remaining_days: int
    last_trade_date: datetime
    is_completed: bool
    is_new_day: bool

    @property
    def is_day_closed(self) -> bool:
        return self.current_trade >= DAY_CLOSED

    @property
    def needs_new_slots(self) -> bool:
        """Whether the caller should generate a fresh day of slots."""
        return self.is_new_day and not self.is_completed

    def apply(self, plan: GrowthPlan) -> GrowthPlan:
        """Return a copy of plan with this update applied."""
        return replace(
            plan,
            current_balance=self.current_balance,
            risk_per_trade=self.risk_per_trade,
            total_trades_completed=self.total_trades_completed,
            daily_loss_used=self.daily_loss_used,
            current_trade=self.current_trade,
            remaining_days=self.remaining_days,
            last_trade_date=self.last_trade_date,
            is_completed=self.is_completed,
            updated_at=self.last_trade_date,
        )
