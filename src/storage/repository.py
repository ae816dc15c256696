"""Abstract repository for accounts, trades and plans."""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date

from src.accounts.models import Account, Trade
from src.growth.models import DailyTradePlan, GrowthPlan
from src.sizing.models import TradingPlan


class PlanRepository(ABC):
    """Storage boundary consumed by the planning service.

    Implementations must serialize writers per account: callers hold
    account_lock() for the whole read-compute-write cycle of a settlement,
    and update_account() rejects writes based on a stale read.
    """

    @abstractmethod
    def account_lock(self, account_id: int) -> AbstractContextManager:
        """Exclusive lock held while settling a trade for an account."""
        pass

    # Accounts

    @abstractmethod
    def add_account(self, account: Account) -> Account:
        """Store a new account and return it with its assigned id."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Account:
        """Get an account.

        Raises:
            RecordNotFoundError: If the account does not exist.
        """
        pass

    @abstractmethod
    def list_accounts(self, user_id: int) -> list[Account]:
        pass

    @abstractmethod
    def update_account(self, account: Account, expected_version: int) -> Account:
        """Replace an account if its stored version matches.

        Returns:
            The stored account with its version incremented.

        Raises:
            RecordNotFoundError: If the account does not exist.
            ConcurrentUpdateError: If the stored version differs from
                expected_version.
        """
        pass

    # Trades

    @abstractmethod
    def add_trade(self, trade: Trade) -> Trade:
        """Store a new trade and return it with its assigned id."""
        pass

    @abstractmethod
    def list_trades(self, account_id: int) -> list[Trade]:
        """Trades for an account in chronological order."""
        pass

    # Trading plans

    @abstractmethod
    def get_trading_plan(self, account_id: int) -> TradingPlan | None:
        pass

    @abstractmethod
    def save_trading_plan(self, plan: TradingPlan) -> TradingPlan:
        pass

    # Growth plans

    @abstractmethod
    def add_growth_plan(self, plan: GrowthPlan) -> GrowthPlan:
        pass

    @abstractmethod
    def get_growth_plan(self, account_id: int) -> GrowthPlan | None:
        """The active growth plan for an account, if any."""
        pass

    @abstractmethod
    def update_growth_plan(self, plan: GrowthPlan) -> GrowthPlan:
        pass

    # Daily trade slots

    @abstractmethod
    def add_daily_plan(self, slot: DailyTradePlan) -> DailyTradePlan:
        pass

    @abstractmethod
    def get_daily_plan(self, slot_id: int) -> DailyTradePlan:
        """Get a slot.

        Raises:
            RecordNotFoundError: If the slot does not exist.
        """
        pass

    @abstractmethod
    def list_daily_plans(self, growth_plan_id: int, trade_date: date | None = None) -> list[DailyTradePlan]:
        """Slots for a growth plan, optionally restricted to one day."""
        pass

    @abstractmethod
    def update_daily_plan(self, slot: DailyTradePlan) -> DailyTradePlan:
        pass
