# tests/config/test_settings.py
"""Tests for application settings."""
import pytest
from pydantic import ValidationError

from src.config.settings import (
    InstrumentSettings,
    PlanningSettings,
    Settings,
    TradingPlanSettings,
)


class TestSettings:
    def test_load_settings_from_yaml(self, tmp_path):
        config_content = """
system:
  name: "Test Planner"

planning:
  min_risk_reward: 2.5
  max_daily_risk: 0.02

instruments:
  priority: ["EURUSD", "GBPUSD", "USDJPY"]
"""
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(config_content)

        settings = Settings.from_yaml(config_file)

        assert settings.system.name == "Test Planner"
        assert settings.planning.min_risk_reward == 2.5
        assert settings.planning.max_daily_risk == 0.02
        assert settings.instruments.priority == ["EURUSD", "GBPUSD", "USDJPY"]

    def test_settings_defaults(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text('system:\n  name: "Minimal"\n')

        settings = Settings.from_yaml(config_file)

        assert settings.planning.risk_allocation == (0.5, 0.25, 0.25)
        assert settings.trading_plan.max_open_positions == 3
        assert len(settings.instruments.instruments) == 25

    def test_empty_yaml_uses_defaults(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("")

        settings = Settings.from_yaml(config_file)

        assert settings.system.name == "Capital Growth Planner"

    def test_env_override(self, tmp_path, monkeypatch):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text('system:\n  name: "Test"\n')

        monkeypatch.setenv("GROWTH_LOG_LEVEL", "DEBUG")

        settings = Settings.from_yaml(config_file)

        assert settings.logging.level == "DEBUG"


class TestPlanningSettings:
    """Tests for PlanningSettings."""

    def test_default_values(self):
        """Policy constants match the planning rules."""
        settings = PlanningSettings()

        assert settings.min_risk_reward == 3.0
        assert settings.max_daily_risk == 0.01
        assert settings.max_single_trade_risk == 0.005
        assert settings.min_risk_per_trade == 0.1
        assert settings.max_risk_per_trade == 1.0
        assert settings.kelly_fraction == 0.25
        assert settings.slot_stop_pips == 30.0
        assert settings.min_lot_size == 0.01

    def test_allocation_must_sum_to_one(self):
        with pytest.raises(ValidationError) as exc_info:
            PlanningSettings(risk_allocation=(0.5, 0.5, 0.5))

        assert "sum to 1.0" in str(exc_info.value)

    def test_max_daily_risk_must_be_positive(self):
        with pytest.raises(ValidationError):
            PlanningSettings(max_daily_risk=0)


class TestInstrumentSettings:
    """Tests for InstrumentSettings."""

    def test_default_priority(self):
        settings = InstrumentSettings()

        assert settings.priority == ["GBPUSD", "GBPJPY", "EURJPY", "EURUSD", "USDJPY"]

    def test_priority_is_normalized(self):
        settings = InstrumentSettings(priority=["eur/usd", "GBP/USD", "usdjpy"])

        assert settings.priority == ["EURUSD", "GBPUSD", "USDJPY"]

    def test_priority_needs_three_instruments(self):
        with pytest.raises(ValidationError):
            InstrumentSettings(priority=["EURUSD", "GBPUSD"])

    def test_pip_value_must_be_positive(self):
        with pytest.raises(ValidationError):
            InstrumentSettings(instruments=[{"symbol": "EURUSD", "pip_value": 0}])


class TestTradingPlanSettings:
    def test_default_values(self):
        settings = TradingPlanSettings()

        assert settings.risk_percentage == 2.0
        assert settings.stop_loss_pips == 20.0
        assert settings.take_profit_pips == 40.0
        assert settings.max_lot_size == 0.5
        assert settings.suggested_trades_per_week == 4
