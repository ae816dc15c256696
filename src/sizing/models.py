"""Data models for position sizing."""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TradingPlan:
    """Always-current sizing recommendation for an account.

    Attributes:
        account_id: Account the plan belongs to.
        recommended_lot_size: Lot size for the next trade.
        max_open_positions: Maximum concurrent positions.
        stop_loss_pips: Recommended stop distance.
        take_profit_pips: Recommended target distance.
        suggested_trades_per_week: Weekly trade quota.
        risk_percentage: Risk per trade as a percentage of balance.
        last_updated: When the plan was computed.
    """

    account_id: int
    recommended_lot_size: float
    max_open_positions: int
    stop_loss_pips: float
    take_profit_pips: float
    suggested_trades_per_week: int
    risk_percentage: float
    last_updated: datetime
