# src/config/settings.py
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SystemConfig(BaseModel):
    name: str = "Capital Growth Planner"
    version: str = "1.0.0"
    currency: str = "USD"


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GROWTH_LOG_")

    level: str = "INFO"
    format: str = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"


class InstrumentConfig(BaseModel):
    """A single tradable instrument.

    Attributes:
        symbol: Six letter pair code, e.g. "EURUSD".
        pip_value: Account currency per pip for one standard lot.
        base_stop_pips: Typical stop distance for the pair's volatility.
    """

    symbol: str = Field(min_length=6, max_length=6)
    pip_value: float = Field(gt=0)
    base_stop_pips: float | None = Field(default=None, gt=0)


def _default_instruments() -> list[InstrumentConfig]:
    pip_values = {
        "EURUSD": 10.0,
        "GBPUSD": 10.0,
        "USDJPY": 0.91,
        "USDCHF": 11.0,
        "AUDUSD": 10.0,
        "USDCAD": 7.5,
        "NZDUSD": 10.0,
        "EURJPY": 0.91,
        "GBPJPY": 0.91,
        "EURGBP": 12.5,
        "AUDCAD": 7.5,
        "AUDCHF": 11.0,
        "AUDJPY": 0.91,
        "CADJPY": 0.91,
        "CHFJPY": 0.91,
        "EURAUD": 6.7,
        "EURCAD": 7.5,
        "EURCHF": 11.0,
        "GBPAUD": 6.7,
        "GBPCAD": 7.5,
        "GBPCHF": 11.0,
        "GBPNZD": 6.2,
        "NZDCAD": 7.5,
        "NZDCHF": 11.0,
        "NZDJPY": 0.91,
    }
    base_stops = {
        "GBPUSD": 30.0,
        "GBPJPY": 40.0,
        "EURJPY": 35.0,
        "EURUSD": 25.0,
        "USDJPY": 30.0,
    }
    return [
        InstrumentConfig(symbol=symbol, pip_value=value, base_stop_pips=base_stops.get(symbol))
        for symbol, value in pip_values.items()
    ]


class InstrumentSettings(BaseModel):
    """Static instrument universe used for pip values and slot priority."""

    instruments: list[InstrumentConfig] = Field(default_factory=_default_instruments)
    priority: list[str] = Field(
        default_factory=lambda: ["GBPUSD", "GBPJPY", "EURJPY", "EURUSD", "USDJPY"]
    )
    default_stop_pips: float = Field(default=30.0, gt=0)

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: list[str]) -> list[str]:
        """Priority list needs at least one instrument per daily slot."""
        if len(v) < 3:
            raise ValueError(f"Priority list needs at least 3 instruments, got {len(v)}")
        return [symbol.replace("/", "").upper() for symbol in v]


class PlanningSettings(BaseModel):
    """Policy constants for growth planning and adaptive risk."""

    min_risk_reward: float = Field(default=3.0, ge=1.0)
    risk_allocation: tuple[float, float, float] = (0.5, 0.25, 0.25)
    trades_per_day: int = Field(default=3, ge=1, le=3)

    # Fractions of balance
    max_daily_risk: float = Field(default=0.01, gt=0, le=0.1)
    max_single_trade_risk: float = Field(default=0.005, gt=0, le=0.1)
    daily_return_risk_factor: float = Field(default=0.5, gt=0, le=1.0)
    kelly_fraction: float = Field(default=0.25, gt=0, le=1.0)

    # Percent of balance
    min_risk_per_trade: float = Field(default=0.1, gt=0)
    max_risk_per_trade: float = Field(default=1.0, gt=0)

    # Adaptive risk
    loss_streak_threshold: int = Field(default=2, ge=1)
    risk_decrease_factor: float = Field(default=0.8, gt=0, lt=1.0)
    risk_increase_factor: float = Field(default=1.1, gt=1.0)
    high_win_rate: float = Field(default=0.7, ge=0, le=1.0)

    # Stop adjustment
    stop_tighten_factor: float = Field(default=0.8, gt=0, le=1.0)
    stop_widen_factor: float = Field(default=1.2, ge=1.0)

    # Daily slots
    slot_stop_pips: float = Field(default=30.0, gt=0)
    min_lot_size: float = Field(default=0.01, gt=0)
    sparse_history_trades: int = Field(default=10, ge=0)

    @field_validator("risk_allocation")
    @classmethod
    def validate_allocation(cls, v: tuple[float, float, float]) -> tuple[float, float, float]:
        """Allocation shares must cover the whole daily budget."""
        if abs(sum(v) - 1.0) > 1e-9:
            raise ValueError(f"Risk allocation must sum to 1.0, got {sum(v)}")
        return v


class TradingPlanSettings(BaseModel):
    """Settings for the always-current trading plan snapshot."""

    risk_percentage: float = Field(default=2.0, gt=0, le=10.0)
    stop_loss_pips: float = Field(default=20.0, gt=0)
    take_profit_pips: float = Field(default=40.0, gt=0)
    reference_pip_value: float = Field(default=10.0, gt=0)
    max_lot_size: float = Field(default=0.5, gt=0)
    max_open_positions: int = Field(default=3, ge=1)
    suggested_trades_per_week: int = Field(default=4, ge=1)


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    instruments: InstrumentSettings = Field(default_factory=InstrumentSettings)
    planning: PlanningSettings = Field(default_factory=PlanningSettings)
    trading_plan: TradingPlanSettings = Field(default_factory=TradingPlanSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        data.pop("logging", None)
        logging_config = LoggingConfig()

        return cls(
            **data,
            logging=logging_config,
        )
