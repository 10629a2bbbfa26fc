"""Default configuration parameters for the signal trading core."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RiskParams:
    """Risk limit defaults matching RiskSettings from risk.models."""
    max_daily_loss: float = 100.0                   # Hard stop on daily P&L
    max_trade_amount: float = 10.0                  # Per-trade stake cap
    stop_loss_percentage: float = 5.0               # Percent of balance, (0, 100]
    max_consecutive_losses: int = 3                 # Loss streak circuit breaker
    auto_trading_enabled: bool = False              # Signal-derived trades allowed


@dataclass(frozen=True)
class AccountParams:
    """Account parameters."""
    initial_balance: float = 1000.0
    currency: str = "USD"


@dataclass(frozen=True)
class SettlementParams:
    """Simulated settlement parameters."""
    min_delay_seconds: float = 1.0
    max_delay_seconds: float = 5.0
    win_probability: float = 0.55
    payout_multiplier: float = 1.8


@dataclass(frozen=True)
class SignalFeedParams:
    """Signal feed parameters."""
    recent_signals_limit: int = 20
    auto_label_prefix: str = "Telegram"
    manual_label_prefix: str = "Manual"


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    risk: RiskParams
    account: AccountParams
    settlement: SettlementParams
    signal_feed: SignalFeedParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        risk=RiskParams(),
        account=AccountParams(),
        settlement=SettlementParams(),
        signal_feed=SignalFeedParams(),
    )
