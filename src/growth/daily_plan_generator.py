"""Generator expanding a day's risk budget into trade slots."""
import logging
from datetime import date

from src.config.settings import PlanningSettings
from src.growth.models import DailyTradePlan, GrowthPlan
from src.instruments.models import normalize_symbol
from src.instruments.pip_values import PipValueTable
from src.sizing.position_sizer import PositionSizer

logger = logging.getLogger(__name__)


class DailyPlanGenerator:
    """Builds the three daily trade slots of a growth plan.

    Slot i trades the i-th priority instrument with the i-th share of the
    daily risk limit, a fixed stop and a target at the minimum risk:reward.
    """

    def __init__(
        self,
        pip_table: PipValueTable,
        settings: PlanningSettings | None = None,
        sizer: PositionSizer | None = None,
    ):
        self.pip_table = pip_table
        self.settings = settings or PlanningSettings()
        self.sizer = sizer or PositionSizer(pip_table)

    def generate(
        self,
        growth_plan: GrowthPlan,
        trade_date: date,
        instrument: str | None = None,
    ) -> list[DailyTradePlan]:
        """Generate the trade slots for a planning day.

        Args:
            growth_plan: Plan supplying the daily risk limit and balance.
            trade_date: Day the slots are for.
            instrument: Optional pair to trade in every slot. Sizing still
                follows the priority instrument of each slot; only the label
                and the expected profit change.

        Returns:
            One slot per allocation share, numbered from 1. Empty when the
            plan is completed.
        """
        if growth_plan.is_completed:
            logger.debug(f"Growth plan {growth_plan.id} completed, no slots generated")
            return []

        s = self.settings
        balance = growth_plan.current_balance
        stop_pips = s.slot_stop_pips
        target_pips = stop_pips * s.min_risk_reward
        override = normalize_symbol(instrument) if instrument else None

        if override and not self.pip_table.supports(override):
            logger.warning(f"Generating slots for unsupported instrument {override}")

        slots = []
        for index, (priority_pair, allocation) in enumerate(
            zip(self.pip_table.priority, s.risk_allocation), start=1
        ):
            allocated_amount = growth_plan.daily_risk_limit * allocation
            risk_pct = allocated_amount / balance * 100 if balance > 0 else 0.0

            lot_size = self.sizer.optimal_lot_size(balance, risk_pct, stop_pips, priority_pair)
            lot_size = max(s.min_lot_size, lot_size)

            label = override or priority_pair
            expected_profit = target_pips * lot_size * self.pip_table.value_per_pip(label)

            slots.append(
                DailyTradePlan(
                    growth_plan_id=growth_plan.id,
                    instrument=label,
                    trade_number=index,
                    allocated_risk=allocation * 100,
                    lot_size=lot_size,
                    stop_loss_pips=stop_pips,
                    take_profit_pips=target_pips,
                    expected_profit=expected_profit,
                    trade_date=trade_date,
                )
            )

        logger.info(
            f"Generated {len(slots)} slots for growth plan {growth_plan.id} on {trade_date.isoformat()}"
        )
        return slots
