"""Tests for trade P&L and balance settlement."""
from datetime import datetime

import pytest

from src.accounts.models import Account, Trade, TradeOutcome
from src.accounts.settlement import calculate_profit_loss, rebuild_balance, settle_balance
from src.config.settings import InstrumentSettings
from src.instruments.pip_values import PipValueTable


@pytest.fixture
def pip_table() -> PipValueTable:
    return PipValueTable.from_settings(InstrumentSettings())


def make_account(balance: float = 10000.0) -> Account:
    """Create an account for testing."""
    return Account(
        id=1,
        user_id=1,
        name="Test",
        starting_capital=10000.0,
        current_balance=balance,
        max_daily_loss=5.0,
        max_overall_loss=10.0,
        profit_target=10.0,
        created_at=datetime(2026, 3, 2, 8, 0),
    )


def make_trade(trade_id: int, profit_loss: float, account_id: int = 1) -> Trade:
    """Create a settled trade for testing."""
    return Trade(
        id=trade_id,
        account_id=account_id,
        instrument="EURUSD",
        outcome=TradeOutcome.WIN if profit_loss > 0 else TradeOutcome.LOSS,
        lot_size=0.1,
        entry_price=1.1,
        exit_price=1.1,
        stop_loss_pips=30,
        take_profit_pips=90,
        profit_loss=profit_loss,
        traded_at=datetime(2026, 3, 2, 9, trade_id),
    )


class TestCalculateProfitLoss:
    """Tests for calculate_profit_loss."""

    def test_winning_trade_is_positive(self, pip_table):
        pnl = calculate_profit_loss("EURUSD", 0.5, 1.1000, 1.1030, TradeOutcome.WIN, pip_table)

        assert pnl == pytest.approx(150.0)

    def test_losing_trade_is_negative(self, pip_table):
        pnl = calculate_profit_loss("EURUSD", 0.5, 1.1000, 1.0970, TradeOutcome.LOSS, pip_table)

        assert pnl == pytest.approx(-150.0)

    def test_sign_follows_outcome_not_direction(self, pip_table):
        """A short that won has exit below entry but still books a profit."""
        pnl = calculate_profit_loss("EURUSD", 1.0, 1.1000, 1.0990, "win", pip_table)

        assert pnl == pytest.approx(100.0)

    def test_jpy_pair_uses_hundred_multiplier(self, pip_table):
        pnl = calculate_profit_loss("USDJPY", 1.0, 150.00, 150.50, TradeOutcome.WIN, pip_table)

        assert pnl == pytest.approx(50 * 0.91)

    def test_unknown_instrument_uses_fallback_pip_value(self, pip_table):
        pnl = calculate_profit_loss("XAUUSD", 1.0, 1.0000, 1.0010, TradeOutcome.LOSS, pip_table)

        assert pnl == pytest.approx(-100.0)


class TestSettleBalance:
    def test_adds_profit_loss(self):
        account = make_account()

        settled = settle_balance(account, make_trade(1, -75.0))

        assert settled.current_balance == pytest.approx(9925.0)
        assert account.current_balance == 10000.0

    def test_rejects_trade_from_other_account(self):
        with pytest.raises(ValueError):
            settle_balance(make_account(), make_trade(1, 50.0, account_id=2))

    def test_balance_equals_starting_capital_plus_pnl(self):
        """Settling trades one by one matches rebuilding from history."""
        account = make_account()
        trades = [make_trade(1, 120.0), make_trade(2, -40.0), make_trade(3, 15.5)]

        for trade in trades:
            account = settle_balance(account, trade)

        assert account.current_balance == pytest.approx(rebuild_balance(account, trades))
        assert account.current_balance == pytest.approx(10095.5)
        assert account.total_pnl == pytest.approx(95.5)


class TestAccount:
    def test_target_amount(self):
        assert make_account().target_amount == pytest.approx(11000.0)
