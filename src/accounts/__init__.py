"""Accounts, settled trades and balance settlement."""

from .models import Account, Trade, TradeOutcome
from .settlement import calculate_profit_loss, rebuild_balance, settle_balance

__all__ = [
    "Account",
    "Trade",
    "TradeOutcome",
    "calculate_profit_loss",
    "rebuild_balance",
    "settle_balance",
]
