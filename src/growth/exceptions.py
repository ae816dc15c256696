"""Exceptions raised by growth planning."""


class GrowthPlanError(Exception):
    """Base class for growth planning errors."""


class PlanValidationError(GrowthPlanError, ValueError):
    """Inputs make the compound growth calculation undefined.

    Deterministic: calling again with the same inputs fails the same way.
    """
