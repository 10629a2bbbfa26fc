#!/usr/bin/env python3
"""
Basic Usage Example - SigTrade Signal Trading Core

This script demonstrates the signal-to-settlement flow with simulated
settlement. It shows how to:
- Build an engine from configuration
- Feed raw signal lines through the parser and risk gate
- Let the scheduled oracle settle trades in the background
- Read account state and statistics

Run: python examples/basic_usage.py
"""

import random
import time

from sigtrade_app.engine import TradingEngine
from sigtrade_app.logging import configure_logging
from sigtrade_app.settlement import ScheduledSettlementOracle, SimulatedOutcomePolicy

SAMPLE_SIGNALS = [
    "EURUSD CALL 60s $10",
    "GBP/USD put 300s $5",
    "USDJPY CALL 60s $25",        # over the trade limit
    "EURUSD SIDEWAYS 60s $5",     # bad direction
    "AUDCAD PUT 120s $2.50",
]


def print_account(engine: TradingEngine) -> None:
    account = engine.ledger.get_account()
    assessment = engine.ledger.assess_risk()
    print(f"   Balance: ${account.balance}  Daily P&L: ${account.daily_pnl}  "
          f"Loss streak: {account.consecutive_losses}  Risk: {assessment.level.value}")


def main():
    """Run the basic usage demonstration."""
    configure_logging(level="WARNING")

    print("🚀 SigTrade Basic Usage Demo")
    print("=" * 50)

    rng = random.Random(42)
    oracle = ScheduledSettlementOracle(
        policy=SimulatedOutcomePolicy(rng=rng),
        min_delay_seconds=0.2,
        max_delay_seconds=1.0,
        rng=rng,
    )

    print("1. Building engine from config/settings.yaml...")
    engine = TradingEngine.from_config(oracle=oracle, overrides={"risk": {"auto_trading_enabled": True}})
    print_account(engine)
    print()

    oracle.start()
    try:
        print("2. Processing signals:")
        for raw in SAMPLE_SIGNALS:
            result = engine.process_signal(raw)
            signal = result.signal
            if not signal.valid:
                print(f"   ✗ {raw!r}: {signal.rejection_reason}")
            elif result.executed:
                trade = result.placement.trade
                print(f"   ✓ {raw!r} → trade {trade.trade_id[:8]} {trade.pair} {trade.direction.value} ${trade.amount}")
            else:
                print(f"   ⚠ {raw!r}: {result.placement.rejection.reason}")
        print()

        print("3. Placing a manual trade...")
        placement = engine.place_manual_trade("EUR/JPY", "CALL", "3", 60)
        print(f"   Placed: {placement.placed}")
        print()

        print("4. Waiting for settlement...")
        deadline = time.monotonic() + 5
        while engine.ledger.pending_trades() and time.monotonic() < deadline:
            time.sleep(0.1)
    finally:
        oracle.stop()

    for trade in engine.ledger.list_trades():
        print(f"   {trade.source_label:<32} {trade.state.value:<8} profit: {trade.profit}")
    print()

    stats = engine.ledger.stats_for("today")
    print("5. Today's stats:")
    print(f"   Trades: {stats.total_trades}  Won: {stats.won_trades}  Lost: {stats.lost_trades}  "
          f"Win rate: {stats.win_rate:.1f}%  Profit: ${stats.total_profit}")
    print_account(engine)
    print()

    print("✅ Demo completed successfully!")


if __name__ == "__main__":
    main()
