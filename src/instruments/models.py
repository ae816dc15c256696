"""Data models for tradable instruments."""
from dataclasses import dataclass


def normalize_symbol(symbol: str) -> str:
    """Normalize a pair code so "EUR/USD", "eurusd" and "EURUSD" match."""
    return symbol.replace("/", "").strip().upper()


@dataclass(frozen=True)
class InstrumentSpec:
    """Static configuration for one currency pair.

    Attributes:
        symbol: Normalized pair code, e.g. "EURUSD".
        pip_value: Account currency per pip for one standard lot.
        base_stop_pips: Typical stop distance for the pair, or None to use
            the table default.
    """

    symbol: str
    pip_value: float
    base_stop_pips: float | None = None

    @property
    def quote_currency(self) -> str:
        """The currency the pair is quoted in."""
        return self.symbol[3:]

    @property
    def pip_multiplier(self) -> int:
        """Multiplier turning a raw price difference into pips.

        Pairs quoted in JPY price the pip at the second decimal, everything
        else at the fourth.
        """
        return 100 if self.quote_currency == "JPY" else 10000
