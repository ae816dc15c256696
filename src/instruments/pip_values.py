"""Static pip value table for the supported instrument universe."""
import logging
from collections.abc import Iterable

from src.config.settings import InstrumentSettings
from src.instruments.models import InstrumentSpec, normalize_symbol

logger = logging.getLogger(__name__)

UNKNOWN_PIP_VALUE = 0.0


class PipValueTable:
    """Maps instruments to the monetary value of one pip.

    The table is immutable once built. Lookups for instruments outside the
    configured set return UNKNOWN_PIP_VALUE instead of raising, so callers can
    filter unsupported instruments out.

    Attributes:
        default_stop_pips: Stop distance used for instruments without a
            configured base volatility.
    """

    def __init__(
        self,
        instruments: Iterable[InstrumentSpec],
        priority: Iterable[str] = (),
        default_stop_pips: float = 30.0,
    ) -> None:
        """Initialize the table.

        Args:
            instruments: Instrument specs making up the supported universe.
            priority: Ordered instruments preferred when building daily slots.
            default_stop_pips: Fallback base stop distance.
        """
        self._specs: dict[str, InstrumentSpec] = {}
        for spec in instruments:
            symbol = normalize_symbol(spec.symbol)
            self._specs[symbol] = InstrumentSpec(
                symbol=symbol,
                pip_value=spec.pip_value,
                base_stop_pips=spec.base_stop_pips,
            )
        self._priority = tuple(normalize_symbol(s) for s in priority)
        self.default_stop_pips = default_stop_pips

    @classmethod
    def from_settings(cls, settings: InstrumentSettings) -> "PipValueTable":
        """Build a table from instrument settings."""
        return cls(
            instruments=[
                InstrumentSpec(
                    symbol=item.symbol,
                    pip_value=item.pip_value,
                    base_stop_pips=item.base_stop_pips,
                )
                for item in settings.instruments
            ],
            priority=settings.priority,
            default_stop_pips=settings.default_stop_pips,
        )

    @property
    def instruments(self) -> list[str]:
        """All supported instrument symbols."""
        return list(self._specs)

    @property
    def priority(self) -> tuple[str, ...]:
        """Instruments in slot priority order."""
        return self._priority

    def supports(self, instrument: str) -> bool:
        return normalize_symbol(instrument) in self._specs

    def get(self, instrument: str) -> InstrumentSpec | None:
        return self._specs.get(normalize_symbol(instrument))

    def value_per_pip(self, instrument: str) -> float:
        """Get the currency value of one pip for a standard lot.

        Args:
            instrument: Pair code in any supported spelling.

        Returns:
            Pip value, or UNKNOWN_PIP_VALUE for unsupported instruments.
        """
        spec = self.get(instrument)
        if spec is None:
            logger.warning(f"No pip value configured for {instrument}")
            return UNKNOWN_PIP_VALUE
        return spec.pip_value

    def pip_multiplier(self, instrument: str) -> int:
        """Get the price-difference to pips multiplier.

        Works for unsupported instruments too, since the convention only
        depends on the quote currency.
        """
        spec = self.get(instrument)
        if spec is not None:
            return spec.pip_multiplier
        return 100 if "JPY" in normalize_symbol(instrument) else 10000

    def price_to_pips(self, instrument: str, entry_price: float, exit_price: float) -> float:
        """Convert an absolute price move into pips."""
        return abs(exit_price - entry_price) * self.pip_multiplier(instrument)

    def base_stop_pips(self, instrument: str) -> float:
        """Get the volatility-based stop distance for an instrument."""
        spec = self.get(instrument)
        if spec is None or spec.base_stop_pips is None:
            return self.default_stop_pips
        return spec.base_stop_pips
