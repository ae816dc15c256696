# main.py
"""Main entry point: runs a sample growth plan session."""
import logging
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

from dotenv import load_dotenv

from src.accounts.models import TradeOutcome
from src.config.settings import Settings
from src.growth.exceptions import PlanValidationError
from src.service import GrowthPlanService
from src.storage import InMemoryPlanRepository

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.logging.level.upper(),
        format=settings.logging.format,
        datefmt=settings.logging.datefmt,
    )


def load_config() -> Settings:
    """Load settings from YAML if present, defaults otherwise.

    The path comes from GROWTH_CONFIG_PATH, falling back to
    config/settings.yaml.

    Raises:
        SystemExit: If the YAML file exists but cannot be parsed.
    """
    load_dotenv()

    config_path = Path(os.getenv("GROWTH_CONFIG_PATH", str(DEFAULT_CONFIG_PATH)))
    if not config_path.exists():
        return Settings()

    try:
        return Settings.from_yaml(config_path)
    except Exception as e:
        logging.getLogger(__name__).error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)


def print_startup_banner(settings: Settings) -> None:
    """Print system startup banner."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name}")
    logger.info(f"Version: {settings.system.version}")
    logger.info("=" * 60)


def run_sample_session(service: GrowthPlanService, start: datetime) -> None:
    """Create an account and settle a few days of trades."""
    account = service.create_account(
        user_id=1,
        name="Sample account",
        starting_capital=10000.0,
        max_daily_loss=5.0,
        max_overall_loss=10.0,
        profit_target=10.0,
        horizon_days=30,
        now=start,
    )

    analysis = service.analyze(account.id)
    logger.info(
        f"Required daily return {analysis.required_daily_return:.3f}%, "
        f"risk per trade {analysis.optimal_risk_per_trade:.2f}%"
    )
    for rec in analysis.recommended_trades:
        logger.info(
            f"  {rec.instrument}: {rec.lot_size:.2f} lots, SL {rec.stop_loss_distance:.0f} / "
            f"TP {rec.take_profit_distance:.0f} pips, confidence {rec.confidence:.2f}"
        )
    logger.info(analysis.adjustment_reason)

    session = [
        (0, "GBPUSD", TradeOutcome.WIN, 1.2650, 1.2740),
        (0, "GBPJPY", TradeOutcome.LOSS, 190.50, 190.10),
        (1, "EURJPY", TradeOutcome.WIN, 161.20, 162.30),
        (1, "EURUSD", TradeOutcome.LOSS, 1.0850, 1.0825),
    ]
    for day, instrument, outcome, entry, exit_ in session:
        traded_at = start + timedelta(days=day, hours=2)
        slots = service.daily_slots(account.id, traded_at.date())
        pending = [s for s in slots if not s.is_executed]

        result = service.record_trade(
            account_id=account.id,
            instrument=instrument,
            outcome=outcome,
            lot_size=pending[0].lot_size if pending else 0.1,
            entry_price=entry,
            exit_price=exit_,
            stop_loss_pips=30,
            take_profit_pips=90,
            traded_at=traded_at,
            slot_id=pending[0].id if pending else None,
        )
        plan = result.growth_plan
        logger.info(
            f"Day {day + 1}: balance {result.account.current_balance:.2f}, "
            f"slot {plan.current_trade}, daily loss {plan.daily_loss_used:.2f}/{plan.daily_risk_limit:.2f}"
        )

    summary = service.performance(account.id)
    logger.info(f"Win rate {summary.win_rate:.1f}% over {summary.total_trades} trades, P&L {summary.total_pnl:+.2f}")


def main() -> None:
    settings = load_config()
    configure_logging(settings)
    print_startup_banner(settings)

    service = GrowthPlanService(InMemoryPlanRepository(), settings)
    try:
        run_sample_session(service, datetime.now().replace(hour=8, minute=0, second=0, microsecond=0))
    except PlanValidationError as e:
        logger.error(f"Invalid plan parameters: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
