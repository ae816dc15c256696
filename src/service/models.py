"""Data models returned by the planning service."""
from dataclasses import dataclass, field

from src.accounts.models import Account, Trade
from src.growth.models import DailyTradePlan, GrowthPlan, GrowthPlanUpdate
from src.sizing.models import TradingPlan


@dataclass
class SettlementResult:
    """Everything that changed when a trade was recorded.

    Attributes:
        trade: The stored trade.
        account: The account after the balance update.
        trading_plan: The recomputed trading plan.
        growth_plan: The growth plan after settlement, if the account has one.
        update: The applied plan update, or None when no active plan settled.
        executed_slot: The slot the trade executed, if one was given.
        new_slots: Slots generated because a new day started.
    """

    trade: Trade
    account: Account
    trading_plan: TradingPlan
    growth_plan: GrowthPlan | None
    update: GrowthPlanUpdate | None
    executed_slot: DailyTradePlan | None = None
    new_slots: list[DailyTradePlan] = field(default_factory=list)
