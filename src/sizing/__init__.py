"""Position sizing and the trading plan snapshot."""

from .models import TradingPlan
from .position_sizer import PositionSizer
from .trading_plan import TradingPlanBuilder

__all__ = ["PositionSizer", "TradingPlan", "TradingPlanBuilder"]
