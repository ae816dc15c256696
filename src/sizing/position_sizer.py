"""Risk-based position sizing."""
from src.instruments.pip_values import UNKNOWN_PIP_VALUE, PipValueTable


class PositionSizer:
    """Converts a risk budget into a lot size.

    Attributes:
        pip_table: Pip value lookup for supported instruments.
    """

    def __init__(self, pip_table: PipValueTable):
        self.pip_table = pip_table

    def risk_amount(self, balance: float, risk_pct: float) -> float:
        """Currency at risk for a percentage of balance."""
        return balance * (risk_pct / 100)

    def optimal_lot_size(
        self,
        balance: float,
        risk_pct: float,
        stop_distance_pips: float,
        instrument: str,
    ) -> float:
        """Calculate the lot size that risks risk_pct of balance at the stop.

        lot_size = balance * risk_pct / 100 / (stop_distance_pips * pip_value)

        Args:
            balance: Account balance.
            risk_pct: Risk as a percentage of balance (0.5 means 0.5%).
            stop_distance_pips: Stop distance in pips.
            instrument: Pair code.

        Returns:
            Lot size rounded to 2 decimal places, or 0.0 when the instrument
            is unsupported or the stop distance is not positive.
        """
        pip_value = self.pip_table.value_per_pip(instrument)
        if pip_value == UNKNOWN_PIP_VALUE or stop_distance_pips <= 0:
            return 0.0

        lot_size = self.risk_amount(balance, risk_pct) / (stop_distance_pips * pip_value)
        return round(lot_size, 2)
