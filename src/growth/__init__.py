"""Growth planning, daily trade slots and plan adaptation."""

from .daily_plan_generator import DailyPlanGenerator
from .exceptions import GrowthPlanError, PlanValidationError
from .growth_planner import GrowthPlanner
from .models import (
    DAY_CLOSED,
    DailyTradePlan,
    GrowthPlan,
    GrowthPlanAnalysis,
    GrowthPlanUpdate,
    TradeRecommendation,
)
from .plan_updater import PlanUpdater, is_new_trading_day

__all__ = [
    "DAY_CLOSED",
    "DailyPlanGenerator",
    "DailyTradePlan",
    "GrowthPlan",
    "GrowthPlanAnalysis",
    "GrowthPlanError",
    "GrowthPlanUpdate",
    "GrowthPlanner",
    "PlanUpdater",
    "PlanValidationError",
    "TradeRecommendation",
    "is_new_trading_day",
]
