"""Builder for the simple per-account trading plan."""
from datetime import datetime

from src.accounts.models import Account
from src.config.settings import TradingPlanSettings
from src.sizing.models import TradingPlan


class TradingPlanBuilder:
    """Builds the fixed-ratio trading plan recomputed after every trade."""

    def __init__(self, settings: TradingPlanSettings | None = None):
        self.settings = settings or TradingPlanSettings()

    def build(self, account: Account, now: datetime | None = None) -> TradingPlan:
        """Build a trading plan from the account's current balance.

        The lot size risks risk_percentage of balance at the configured stop,
        valued at the reference pip value, capped at max_lot_size.

        Args:
            account: Account to size for.
            now: Timestamp for last_updated. Defaults to datetime.now().

        Returns:
            A fresh TradingPlan.
        """
        s = self.settings
        risk_amount = account.current_balance * (s.risk_percentage / 100)
        lot_size = min(s.max_lot_size, risk_amount / (s.stop_loss_pips * s.reference_pip_value))

        return TradingPlan(
            account_id=account.id,
            recommended_lot_size=round(max(lot_size, 0.0), 2),
            max_open_positions=s.max_open_positions,
            stop_loss_pips=s.stop_loss_pips,
            take_profit_pips=s.take_profit_pips,
            suggested_trades_per_week=s.suggested_trades_per_week,
            risk_percentage=s.risk_percentage,
            last_updated=now or datetime.now(),
        )
