"""Tests for PositionSizer."""
import pytest

from src.config.settings import InstrumentSettings
from src.instruments.pip_values import PipValueTable
from src.sizing.position_sizer import PositionSizer


@pytest.fixture
def sizer() -> PositionSizer:
    return PositionSizer(PipValueTable.from_settings(InstrumentSettings()))


class TestPositionSizer:
    """Tests for optimal lot size calculation."""

    def test_risk_amount(self, sizer):
        assert sizer.risk_amount(10000.0, 0.5) == pytest.approx(50.0)

    def test_optimal_lot_size_eurusd(self, sizer):
        """50 at risk over 30 pips at 10 per pip is 0.1667 lots."""
        assert sizer.optimal_lot_size(10000.0, 0.5, 30, "EURUSD") == 0.17

    def test_optimal_lot_size_jpy_pair(self, sizer):
        assert sizer.optimal_lot_size(10000.0, 1.0, 20, "USDJPY") == 5.49

    def test_result_has_two_decimals(self, sizer):
        lot_size = sizer.optimal_lot_size(12345.0, 0.37, 27, "GBPUSD")

        assert lot_size == round(lot_size, 2)

    def test_unsupported_instrument_returns_zero(self, sizer):
        assert sizer.optimal_lot_size(10000.0, 1.0, 30, "XAUUSD") == 0.0

    def test_non_positive_stop_returns_zero(self, sizer):
        assert sizer.optimal_lot_size(10000.0, 1.0, 0, "EURUSD") == 0.0

    def test_lot_size_scales_with_risk(self, sizer):
        small = sizer.optimal_lot_size(10000.0, 0.5, 25, "EURUSD")
        large = sizer.optimal_lot_size(10000.0, 1.0, 25, "EURUSD")

        assert large == pytest.approx(small * 2)
