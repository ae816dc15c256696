"""Trade P&L calculation and account balance settlement."""
import logging
from dataclasses import replace

from src.accounts.models import Account, Trade, TradeOutcome
from src.instruments.pip_values import UNKNOWN_PIP_VALUE, PipValueTable

logger = logging.getLogger(__name__)

FALLBACK_PIP_VALUE = 10.0


def calculate_profit_loss(
    instrument: str,
    lot_size: float,
    entry_price: float,
    exit_price: float,
    outcome: TradeOutcome,
    pip_table: PipValueTable,
) -> float:
    """Calculate realized P&L for a closed trade.

    The price move is converted to pips and valued at the instrument's pip
    value. Instruments missing from the table are valued at
    FALLBACK_PIP_VALUE so a trade can always be recorded.

    Args:
        instrument: Pair code.
        lot_size: Position size in standard lots.
        entry_price: Entry fill price.
        exit_price: Exit fill price.
        outcome: WIN or LOSS; decides the sign.
        pip_table: Pip value lookup.

    Returns:
        Positive P&L for a win, negative for a loss.
    """
    pip_value = pip_table.value_per_pip(instrument)
    if pip_value == UNKNOWN_PIP_VALUE:
        pip_value = FALLBACK_PIP_VALUE

    pips = pip_table.price_to_pips(instrument, entry_price, exit_price)
    profit_loss = lot_size * pips * pip_value

    return profit_loss if TradeOutcome(outcome) == TradeOutcome.WIN else -profit_loss


def settle_balance(account: Account, trade: Trade) -> Account:
    """Apply a settled trade to an account balance.

    Args:
        account: Account before settlement.
        trade: Trade to apply.

    Returns:
        A copy of the account with the trade's P&L added.
    """
    if trade.account_id != account.id:
        raise ValueError(f"Trade {trade.id} belongs to account {trade.account_id}, not {account.id}")

    new_balance = account.current_balance + trade.profit_loss
    logger.debug(
        f"Account {account.id} settled trade {trade.id}: "
        f"{account.current_balance:.2f} -> {new_balance:.2f}"
    )
    return replace(account, current_balance=new_balance)


def rebuild_balance(account: Account, trades: list[Trade]) -> float:
    """Recompute the balance from starting capital and trade history."""
    return account.starting_capital + sum(
        t.profit_loss for t in trades if t.account_id == account.id
    )
