"""Service wiring the planning engine to a plan repository."""
import logging
from datetime import date, datetime

from src.accounts.models import Account, Trade, TradeOutcome
from src.accounts.settlement import calculate_profit_loss, settle_balance
from src.config.settings import Settings
from src.growth.daily_plan_generator import DailyPlanGenerator
from src.growth.growth_planner import GrowthPlanner
from src.growth.models import DailyTradePlan, GrowthPlan, GrowthPlanAnalysis
from src.growth.plan_updater import PlanUpdater, is_new_trading_day
from src.instruments.models import normalize_symbol
from src.instruments.pip_values import PipValueTable
from src.performance.models import PerformanceSummary
from src.performance.performance_analyzer import PerformanceAnalyzer
from src.service.models import SettlementResult
from src.sizing.position_sizer import PositionSizer
from src.sizing.trading_plan import TradingPlanBuilder
from src.storage.exceptions import RecordNotFoundError
from src.storage.repository import PlanRepository

logger = logging.getLogger(__name__)


class GrowthPlanService:
    """Runs the account lifecycle over a repository.

    Account creation produces the trading plan, the growth plan and the
    first day of slots. Each recorded trade is settled as one unit under the
    account lock: P&L, trade record, balance, trading plan, growth plan and,
    when a new day starts, fresh slots.
    """

    def __init__(self, repository: PlanRepository, settings: Settings | None = None) -> None:
        """Initialize the service and its engine components.

        Args:
            repository: Storage for accounts, trades and plans.
            settings: Application settings. Defaults to Settings().
        """
        self._repository = repository
        self._settings = settings or Settings()

        self._pip_table = PipValueTable.from_settings(self._settings.instruments)
        self._analyzer = PerformanceAnalyzer()
        sizer = PositionSizer(self._pip_table)
        planning = self._settings.planning

        self._planner = GrowthPlanner(self._pip_table, planning, self._analyzer, sizer)
        self._generator = DailyPlanGenerator(self._pip_table, planning, sizer)
        self._updater = PlanUpdater(planning, self._analyzer)
        self._trading_plan_builder = TradingPlanBuilder(self._settings.trading_plan)

    @property
    def pip_table(self) -> PipValueTable:
        return self._pip_table

    def create_account(
        self,
        user_id: int,
        name: str,
        starting_capital: float,
        max_daily_loss: float,
        max_overall_loss: float,
        profit_target: float,
        horizon_days: int,
        now: datetime | None = None,
    ) -> Account:
        """Create an account with its trading plan, growth plan and slots.

        Args:
            user_id: Owner of the account.
            name: Display name.
            starting_capital: Opening balance.
            max_daily_loss: Daily loss limit, percent of capital.
            max_overall_loss: Overall loss limit, percent of capital.
            profit_target: Profit goal, percent of starting capital.
            horizon_days: Days to reach the profit target.
            now: Creation time. Defaults to datetime.now().

        Returns:
            The stored account.

        Raises:
            PlanValidationError: If capital, target or horizon are not
                positive. Nothing is stored in that case.
        """
        now = now or datetime.now()
        draft = Account(
            id=0,
            user_id=user_id,
            name=name,
            starting_capital=starting_capital,
            current_balance=starting_capital,
            max_daily_loss=max_daily_loss,
            max_overall_loss=max_overall_loss,
            profit_target=profit_target,
            created_at=now,
        )
        # Validate before anything is stored
        self._planner.required_daily_return(starting_capital, draft.target_amount, horizon_days)

        account = self._repository.add_account(draft)
        self._repository.save_trading_plan(self._trading_plan_builder.build(account, now))

        growth_plan = self._repository.add_growth_plan(
            self._planner.create_growth_plan(account, account.target_amount, horizon_days, now=now)
        )
        self._store_slots(growth_plan, now.date())

        logger.info(
            f"Created account {account.id} ({name}) with {starting_capital:.2f}, "
            f"target {account.target_amount:.2f} in {horizon_days} days"
        )
        return account

    def record_trade(
        self,
        account_id: int,
        instrument: str,
        outcome: TradeOutcome,
        lot_size: float,
        entry_price: float,
        exit_price: float,
        stop_loss_pips: float,
        take_profit_pips: float,
        traded_at: datetime | None = None,
        notes: str | None = None,
        slot_id: int | None = None,
    ) -> SettlementResult:
        """Record a closed trade and settle it against the account.

        Args:
            account_id: Account the trade belongs to.
            instrument: Pair code.
            outcome: WIN or LOSS.
            lot_size: Position size in lots.
            entry_price: Entry fill price.
            exit_price: Exit fill price.
            stop_loss_pips: Stop distance used.
            take_profit_pips: Target distance used.
            traded_at: Close time. Defaults to datetime.now().
            notes: Free-text note.
            slot_id: Daily slot this trade executes, if any.

        Returns:
            SettlementResult with the stored trade, account and plan state.

        Raises:
            RecordNotFoundError: If the account or slot does not exist.
            ValueError: If the slot belongs to another account or was
                already executed. Nothing is stored in that case.
            ConcurrentUpdateError: If the account changed outside the lock.
        """
        traded_at = traded_at or datetime.now()

        with self._repository.account_lock(account_id):
            account = self._repository.get_account(account_id)
            # Slot must be valid before any write
            slot = self._pending_slot(account_id, slot_id) if slot_id is not None else None

            profit_loss = calculate_profit_loss(
                instrument, lot_size, entry_price, exit_price, outcome, self._pip_table
            )
            trade = self._repository.add_trade(
                Trade(
                    id=0,
                    account_id=account_id,
                    instrument=normalize_symbol(instrument),
                    outcome=TradeOutcome(outcome),
                    lot_size=lot_size,
                    entry_price=entry_price,
                    exit_price=exit_price,
                    stop_loss_pips=stop_loss_pips,
                    take_profit_pips=take_profit_pips,
                    profit_loss=profit_loss,
                    traded_at=traded_at,
                    notes=notes,
                )
            )

            account = self._repository.update_account(
                settle_balance(account, trade), expected_version=account.version
            )
            trading_plan = self._repository.save_trading_plan(
                self._trading_plan_builder.build(account, traded_at)
            )

            executed_slot = None
            if slot is not None:
                executed_slot = self._repository.update_daily_plan(slot.execute(profit_loss, traded_at))

            growth_plan, update, new_slots = self._settle_growth_plan(account, trade)

        logger.info(
            f"Recorded {trade.outcome.value} on {trade.instrument} for account {account_id}: "
            f"{profit_loss:+.2f}, balance {account.current_balance:.2f}"
        )
        return SettlementResult(
            trade=trade,
            account=account,
            trading_plan=trading_plan,
            growth_plan=growth_plan,
            update=update,
            executed_slot=executed_slot,
            new_slots=new_slots,
        )

    def execute_slot(self, slot_id: int, result: float, executed_at: datetime | None = None) -> DailyTradePlan:
        """Mark a daily slot executed with its realized result.

        Raises:
            RecordNotFoundError: If the slot does not exist.
            ValueError: If the slot was already executed.
        """
        slot = self._repository.get_daily_plan(slot_id)
        return self._repository.update_daily_plan(slot.execute(result, executed_at or datetime.now()))

    def regenerate_slots(
        self,
        account_id: int,
        trade_date: date,
        instrument: str | None = None,
    ) -> list[DailyTradePlan]:
        """Generate and store a new set of slots for a day.

        Args:
            account_id: Account whose growth plan to use.
            trade_date: Day to generate for.
            instrument: Optional pair to relabel every slot with.

        Returns:
            The stored slots.
        """
        growth_plan = self._require_growth_plan(account_id)
        return self._store_slots(growth_plan, trade_date, instrument)

    def daily_slots(self, account_id: int, trade_date: date) -> list[DailyTradePlan]:
        growth_plan = self._require_growth_plan(account_id)
        return self._repository.list_daily_plans(growth_plan.id, trade_date)

    def analyze(
        self,
        account_id: int,
        target_amount: float | None = None,
        horizon_days: int | None = None,
    ) -> GrowthPlanAnalysis:
        """Run the growth planner for an account.

        Target and horizon default to the active growth plan's target amount
        and remaining days.

        Raises:
            PlanValidationError: If the target is already met or the horizon
                is exhausted.
        """
        account = self._repository.get_account(account_id)
        if target_amount is None or horizon_days is None:
            growth_plan = self._require_growth_plan(account_id)
            target_amount = target_amount if target_amount is not None else growth_plan.target_amount
            horizon_days = horizon_days if horizon_days is not None else growth_plan.remaining_days

        trades = self._repository.list_trades(account_id)
        return self._planner.plan(account, target_amount, horizon_days, trades)

    def performance(self, account_id: int) -> PerformanceSummary:
        self._repository.get_account(account_id)
        return self._analyzer.summarize(self._repository.list_trades(account_id))

    def _settle_growth_plan(self, account: Account, trade: Trade):
        growth_plan = self._repository.get_growth_plan(account.id)
        if growth_plan is None:
            return None, None, []
        if growth_plan.is_completed:
            logger.debug(f"Growth plan {growth_plan.id} already completed, not settling trade {trade.id}")
            return growth_plan, None, []

        trades = self._repository.list_trades(account.id)
        is_new_day = is_new_trading_day(growth_plan.last_trade_date, trade.traded_at)

        update = self._updater.settle(
            growth_plan,
            trade.profit_loss,
            is_new_day,
            trades,
            now=trade.traded_at,
            current_balance=account.current_balance,
        )
        growth_plan = self._repository.update_growth_plan(update.apply(growth_plan))

        new_slots: list[DailyTradePlan] = []
        trade_date = trade.traded_at.date()
        if update.needs_new_slots and not self._repository.list_daily_plans(growth_plan.id, trade_date):
            new_slots = self._store_slots(growth_plan, trade_date)

        return growth_plan, update, new_slots

    def _store_slots(
        self, growth_plan: GrowthPlan, trade_date: date, instrument: str | None = None
    ) -> list[DailyTradePlan]:
        slots = self._generator.generate(growth_plan, trade_date, instrument)
        return [self._repository.add_daily_plan(slot) for slot in slots]

    def _pending_slot(self, account_id: int, slot_id: int) -> DailyTradePlan:
        slot = self._repository.get_daily_plan(slot_id)
        growth_plan = self._require_growth_plan(account_id)
        if slot.growth_plan_id != growth_plan.id:
            raise ValueError(
                f"Daily trade plan {slot_id} belongs to growth plan {slot.growth_plan_id}, "
                f"not account {account_id}"
            )
        if slot.is_executed:
            raise ValueError(f"Daily trade plan {slot_id} was already executed")
        return slot

    def _require_growth_plan(self, account_id: int) -> GrowthPlan:
        growth_plan = self._repository.get_growth_plan(account_id)
        if growth_plan is None:
            raise RecordNotFoundError(f"No growth plan for account {account_id}")
        return growth_plan
