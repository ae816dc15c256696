"""Data models for trading accounts and settled trades."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TradeOutcome(str, Enum):
    """Result of a closed trade."""

    WIN = "win"
    LOSS = "loss"


@dataclass
class Account:
    """A tracked trading account.

    Attributes:
        id: Account identifier.
        user_id: Owner of the account.
        name: Display name.
        starting_capital: Balance the account was opened with.
        current_balance: Starting capital plus all settled trade P&L.
        max_daily_loss: Maximum loss per day as a percentage of capital.
        max_overall_loss: Maximum total drawdown as a percentage of capital.
        profit_target: Profit goal as a percentage of starting capital.
        is_active: Whether the account is still being tracked.
        created_at: When the account was created.
        version: Incremented on every stored update.
    """

    id: int
    user_id: int
    name: str
    starting_capital: float
    current_balance: float
    max_daily_loss: float
    max_overall_loss: float
    profit_target: float
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    version: int = 0

    @property
    def target_amount(self) -> float:
        """Balance at which the profit target is reached."""
        return self.starting_capital * (1 + self.profit_target / 100)

    @property
    def total_pnl(self) -> float:
        return self.current_balance - self.starting_capital


@dataclass(frozen=True)
class Trade:
    """A settled trade. Immutable once created.

    Attributes:
        id: Trade identifier.
        account_id: Account the trade settled against.
        instrument: Pair code, e.g. "EURUSD".
        outcome: WIN or LOSS.
        lot_size: Position size in standard lots.
        entry_price: Fill price on entry.
        exit_price: Fill price on exit.
        stop_loss_pips: Stop distance in pips.
        take_profit_pips: Target distance in pips.
        profit_loss: Realized P&L, signed by outcome.
        traded_at: When the trade closed.
        notes: Free-text note.
    """

    id: int
    account_id: int
    instrument: str
    outcome: TradeOutcome
    lot_size: float
    entry_price: float
    exit_price: float
    stop_loss_pips: float
    take_profit_pips: float
    profit_loss: float
    traded_at: datetime
    notes: str | None = None

    @property
    def is_win(self) -> bool:
        return self.profit_loss > 0

    @property
    def is_loss(self) -> bool:
        return self.profit_loss < 0
