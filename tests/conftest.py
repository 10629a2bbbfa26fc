"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from sigtrade_app.ledger.ledger import TradeLedger
from sigtrade_app.models.trading import Direction, TradeRequest, TradeSource
from sigtrade_app.risk.models import RiskSettings
from sigtrade_app.settlement.oracles import ManualSettlementOracle


FIXED_NOW = datetime(2024, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed UTC timestamp."""
    return lambda: FIXED_NOW


@pytest.fixture
def risk_settings() -> RiskSettings:
    """Default risk limits with auto-trading enabled."""
    return RiskSettings(
        max_daily_loss=Decimal("100"),
        max_trade_amount=Decimal("10"),
        stop_loss_percentage=Decimal("5"),
        max_consecutive_losses=3,
        auto_trading_enabled=True,
    )


@pytest.fixture
def manual_oracle() -> ManualSettlementOracle:
    return ManualSettlementOracle()


@pytest.fixture
def ledger(risk_settings, manual_oracle, fixed_clock) -> TradeLedger:
    """Ledger with a 1000 balance settled through a manual oracle."""
    return TradeLedger(
        settings=risk_settings,
        initial_balance=Decimal("1000"),
        oracle=manual_oracle,
        clock=fixed_clock,
    )


def make_request(
    amount="10",
    source=TradeSource.MANUAL,
    pair="EUR/USD",
    direction=Direction.CALL,
    duration_seconds=60,
) -> TradeRequest:
    return TradeRequest(
        pair=pair,
        direction=direction,
        amount=Decimal(amount),
        duration_seconds=duration_seconds,
        source=source,
        source_label="Manual Trade" if source == TradeSource.MANUAL else "Telegram: test",
    )


@pytest.fixture
def request_factory():
    """Factory for trade requests."""
    return make_request
