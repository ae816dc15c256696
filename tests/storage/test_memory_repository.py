"""Tests for InMemoryPlanRepository."""
import threading
from dataclasses import replace
from datetime import date, datetime, timedelta

import pytest

from src.accounts.models import Account, Trade, TradeOutcome
from src.growth.models import DailyTradePlan, GrowthPlan
from src.sizing.models import TradingPlan
from src.storage.exceptions import ConcurrentUpdateError, RecordNotFoundError
from src.storage.memory import InMemoryPlanRepository

START = datetime(2026, 3, 2, 8, 0)


def make_account(user_id: int = 1) -> Account:
    """Create an unsaved account."""
    return Account(
        id=0,
        user_id=user_id,
        name="Test",
        starting_capital=10000.0,
        current_balance=10000.0,
        max_daily_loss=5.0,
        max_overall_loss=10.0,
        profit_target=10.0,
    )


def make_trade(account_id: int, traded_at: datetime) -> Trade:
    """Create an unsaved trade."""
    return Trade(
        id=0,
        account_id=account_id,
        instrument="EURUSD",
        outcome=TradeOutcome.WIN,
        lot_size=0.1,
        entry_price=1.1,
        exit_price=1.101,
        stop_loss_pips=30,
        take_profit_pips=90,
        profit_loss=10.0,
        traded_at=traded_at,
    )


def make_growth_plan(account_id: int) -> GrowthPlan:
    """Create an unsaved growth plan."""
    return GrowthPlan(
        id=0,
        account_id=account_id,
        target_amount=11000.0,
        current_balance=10000.0,
        target_trades=90,
        daily_risk_limit=100.0,
        risk_per_trade=0.5,
        remaining_days=30,
    )


def make_slot(growth_plan_id: int, trade_number: int, trade_date: date) -> DailyTradePlan:
    """Create an unsaved daily slot."""
    return DailyTradePlan(
        growth_plan_id=growth_plan_id,
        instrument="GBPUSD",
        trade_number=trade_number,
        allocated_risk=50.0,
        lot_size=0.17,
        stop_loss_pips=30.0,
        take_profit_pips=90.0,
        expected_profit=153.0,
        trade_date=trade_date,
    )


@pytest.fixture
def repository() -> InMemoryPlanRepository:
    return InMemoryPlanRepository()


class TestAccounts:
    """Tests for account storage."""

    def test_add_assigns_ids(self, repository):
        first = repository.add_account(make_account())
        second = repository.add_account(make_account())

        assert first.id == 1
        assert second.id == 2
        assert repository.get_account(1) == first

    def test_get_missing_account_raises(self, repository):
        with pytest.raises(RecordNotFoundError):
            repository.get_account(99)

    def test_list_accounts_by_user(self, repository):
        repository.add_account(make_account(user_id=1))
        repository.add_account(make_account(user_id=2))

        assert [a.user_id for a in repository.list_accounts(2)] == [2]

    def test_update_increments_version(self, repository):
        account = repository.add_account(make_account())

        updated = repository.update_account(replace(account, current_balance=10100.0), expected_version=0)

        assert updated.version == 1
        assert repository.get_account(account.id).current_balance == 10100.0

    def test_stale_update_is_rejected(self, repository):
        """Two writers reading the same snapshot cannot both commit."""
        account = repository.add_account(make_account())
        repository.update_account(replace(account, current_balance=10100.0), expected_version=0)

        with pytest.raises(ConcurrentUpdateError):
            repository.update_account(replace(account, current_balance=9900.0), expected_version=0)

        assert repository.get_account(account.id).current_balance == 10100.0

    def test_update_missing_account_raises(self, repository):
        with pytest.raises(RecordNotFoundError):
            repository.update_account(replace(make_account(), id=5), expected_version=0)

    def test_account_lock_is_shared_per_account(self, repository):
        assert repository.account_lock(1) is repository.account_lock(1)
        assert repository.account_lock(1) is not repository.account_lock(2)

    def test_account_lock_serializes_writers(self, repository):
        account = repository.add_account(make_account())

        def deposit() -> None:
            for _ in range(100):
                with repository.account_lock(account.id):
                    current = repository.get_account(account.id)
                    repository.update_account(
                        replace(current, current_balance=current.current_balance + 1),
                        expected_version=current.version,
                    )

        threads = [threading.Thread(target=deposit) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert repository.get_account(account.id).current_balance == pytest.approx(10400.0)
        assert repository.get_account(account.id).version == 400


class TestTrades:
    def test_trades_listed_chronologically(self, repository):
        repository.add_trade(make_trade(1, START + timedelta(hours=2)))
        repository.add_trade(make_trade(1, START))
        repository.add_trade(make_trade(2, START))

        trades = repository.list_trades(1)

        assert [t.traded_at for t in trades] == [START, START + timedelta(hours=2)]
        assert {t.id for t in trades} == {1, 2}


class TestPlans:
    def test_trading_plan_is_replaced(self, repository):
        plan = TradingPlan(1, 0.1, 3, 20.0, 40.0, 4, 2.0, START)
        repository.save_trading_plan(plan)
        repository.save_trading_plan(replace(plan, recommended_lot_size=0.2))

        assert repository.get_trading_plan(1).recommended_lot_size == 0.2
        assert repository.get_trading_plan(2) is None

    def test_growth_plan_round_trip(self, repository):
        plan = repository.add_growth_plan(make_growth_plan(account_id=1))

        repository.update_growth_plan(replace(plan, total_trades_completed=3))

        assert repository.get_growth_plan(1).total_trades_completed == 3
        assert repository.get_growth_plan(2) is None

    def test_update_missing_growth_plan_raises(self, repository):
        with pytest.raises(RecordNotFoundError):
            repository.update_growth_plan(replace(make_growth_plan(1), id=42))

    def test_daily_plans_filtered_by_date(self, repository):
        today = date(2026, 3, 2)
        tomorrow = date(2026, 3, 3)
        for number in (2, 1, 3):
            repository.add_daily_plan(make_slot(1, number, today))
        repository.add_daily_plan(make_slot(1, 1, tomorrow))
        repository.add_daily_plan(make_slot(2, 1, today))

        slots = repository.list_daily_plans(1, today)

        assert [s.trade_number for s in slots] == [1, 2, 3]
        assert len(repository.list_daily_plans(1)) == 4
        assert repository.list_daily_plans(1, datetime(2026, 3, 3, 12, 0))[0].trade_date == tomorrow

    def test_daily_plan_update(self, repository):
        slot = repository.add_daily_plan(make_slot(1, 1, date(2026, 3, 2)))

        repository.update_daily_plan(slot.execute(25.0, START))

        assert repository.get_daily_plan(slot.id).is_executed is True

    def test_returned_records_are_copies(self, repository):
        """Mutating a returned record leaves the stored one unchanged."""
        account = repository.add_account(make_account())
        plan = repository.add_growth_plan(make_growth_plan(account.id))
        slot = repository.add_daily_plan(make_slot(plan.id, 1, date(2026, 3, 2)))

        account.current_balance = 0.0
        repository.get_account(account.id).current_balance = 1.0
        repository.get_growth_plan(account.id).daily_loss_used = 99.0
        repository.list_daily_plans(plan.id)[0].is_executed = True
        slot.lot_size = 5.0

        assert repository.get_account(account.id).current_balance == 10000.0
        assert repository.get_growth_plan(account.id).daily_loss_used == 0.0
        stored_slot = repository.get_daily_plan(slot.id)
        assert stored_slot.is_executed is False
        assert stored_slot.lot_size == 0.17

    def test_get_missing_daily_plan_raises(self, repository):
        with pytest.raises(RecordNotFoundError):
            repository.get_daily_plan(7)
