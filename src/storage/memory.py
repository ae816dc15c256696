"""In-memory plan repository."""
import threading
from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime

from src.accounts.models import Account, Trade
from src.growth.models import DailyTradePlan, GrowthPlan
from src.sizing.models import TradingPlan
from src.storage.exceptions import ConcurrentUpdateError, RecordNotFoundError
from src.storage.repository import PlanRepository


class InMemoryPlanRepository(PlanRepository):
    """Dict-backed repository with per-account locks.

    Ids are assigned from per-table counters starting at 1. Records are
    copied on the way in and on the way out so callers cannot mutate stored
    state.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._trades: dict[int, Trade] = {}
        self._trading_plans: dict[int, TradingPlan] = {}
        self._growth_plans: dict[int, GrowthPlan] = {}
        self._daily_plans: dict[int, DailyTradePlan] = {}

        self._counters: dict[str, int] = defaultdict(int)
        self._table_lock = threading.Lock()
        self._account_locks: dict[int, threading.RLock] = {}

    def _next_id(self, table: str) -> int:
        with self._table_lock:
            self._counters[table] += 1
            return self._counters[table]

    def account_lock(self, account_id: int) -> threading.RLock:
        with self._table_lock:
            return self._account_locks.setdefault(account_id, threading.RLock())

    # Accounts

    def add_account(self, account: Account) -> Account:
        stored = replace(account, id=self._next_id("accounts"), version=0)
        self._accounts[stored.id] = stored
        return replace(stored)

    def get_account(self, account_id: int) -> Account:
        if account_id not in self._accounts:
            raise RecordNotFoundError(f"Account {account_id} not found")
        return replace(self._accounts[account_id])

    def list_accounts(self, user_id: int) -> list[Account]:
        return [replace(a) for a in self._accounts.values() if a.user_id == user_id]

    def update_account(self, account: Account, expected_version: int) -> Account:
        with self._table_lock:
            current = self._accounts.get(account.id)
            if current is None:
                raise RecordNotFoundError(f"Account {account.id} not found")
            if current.version != expected_version:
                raise ConcurrentUpdateError(
                    f"Account {account.id} is at version {current.version}, expected {expected_version}"
                )
            stored = replace(account, version=expected_version + 1)
            self._accounts[account.id] = stored
            return replace(stored)

    # Trades

    def add_trade(self, trade: Trade) -> Trade:
        stored = replace(trade, id=self._next_id("trades"))
        self._trades[stored.id] = stored
        return stored

    def list_trades(self, account_id: int) -> list[Trade]:
        trades = [t for t in self._trades.values() if t.account_id == account_id]
        return sorted(trades, key=lambda t: (t.traded_at, t.id))

    # Trading plans

    def get_trading_plan(self, account_id: int) -> TradingPlan | None:
        return self._trading_plans.get(account_id)

    def save_trading_plan(self, plan: TradingPlan) -> TradingPlan:
        self._trading_plans[plan.account_id] = plan
        return plan

    # Growth plans

    def add_growth_plan(self, plan: GrowthPlan) -> GrowthPlan:
        stored = replace(plan, id=self._next_id("growth_plans"))
        self._growth_plans[stored.id] = stored
        return replace(stored)

    def get_growth_plan(self, account_id: int) -> GrowthPlan | None:
        plans = [p for p in self._growth_plans.values() if p.account_id == account_id]
        if not plans:
            return None
        return replace(max(plans, key=lambda p: p.id))

    def update_growth_plan(self, plan: GrowthPlan) -> GrowthPlan:
        if plan.id not in self._growth_plans:
            raise RecordNotFoundError(f"Growth plan {plan.id} not found")
        stored = replace(plan)
        self._growth_plans[plan.id] = stored
        return replace(stored)

    # Daily trade slots

    def add_daily_plan(self, slot: DailyTradePlan) -> DailyTradePlan:
        stored = replace(slot, id=self._next_id("daily_plans"))
        self._daily_plans[stored.id] = stored
        return replace(stored)

    def get_daily_plan(self, slot_id: int) -> DailyTradePlan:
        if slot_id not in self._daily_plans:
            raise RecordNotFoundError(f"Daily trade plan {slot_id} not found")
        return replace(self._daily_plans[slot_id])

    def list_daily_plans(self, growth_plan_id: int, trade_date: date | None = None) -> list[DailyTradePlan]:
        slots = [replace(s) for s in self._daily_plans.values() if s.growth_plan_id == growth_plan_id]
        if trade_date is not None:
            slots = [s for s in slots if _as_date(s.trade_date) == _as_date(trade_date)]
        return sorted(slots, key=lambda s: (_as_date(s.trade_date), s.trade_number, s.id))

    def update_daily_plan(self, slot: DailyTradePlan) -> DailyTradePlan:
        if slot.id not in self._daily_plans:
            raise RecordNotFoundError(f"Daily trade plan {slot.id} not found")
        self._daily_plans[slot.id] = replace(slot)
        return replace(self._daily_plans[slot.id])


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value
