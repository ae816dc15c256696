"""Planning service over a plan repository."""

from .models import SettlementResult
from .planning_service import GrowthPlanService

__all__ = ["GrowthPlanService", "SettlementResult"]
