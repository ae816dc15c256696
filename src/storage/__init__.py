"""Storage boundary for accounts, trades and plans."""

from .exceptions import ConcurrentUpdateError, RecordNotFoundError
from .memory import InMemoryPlanRepository
from .repository import PlanRepository

__all__ = [
    "ConcurrentUpdateError",
    "InMemoryPlanRepository",
    "PlanRepository",
    "RecordNotFoundError",
]
