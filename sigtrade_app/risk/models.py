"""
Risk limit settings and gating result models.
"""

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..config.defaults import RiskParams
from ..utils.money import to_decimal


@dataclass(frozen=True)
class RiskSettings:
    """
    Risk limits consumed as a full replacement struct.

    Read-only to the core during a gating decision; updates swap the whole
    instance.
    """

    max_daily_loss: Decimal = Decimal("100")
    max_trade_amount: Decimal = Decimal("10")
    stop_loss_percentage: Decimal = Decimal("5")
    max_consecutive_losses: int = 3
    auto_trading_enabled: bool = False

    @classmethod
    def from_params(cls, params: RiskParams) -> "RiskSettings":
        """Build settings from the frozen configuration defaults."""
        return cls.from_dict(asdict(params))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskSettings":
        """Build settings from a plain mapping, coercing money fields to Decimal."""
        defaults = cls()
        return cls(
            max_daily_loss=to_decimal(data.get("max_daily_loss", defaults.max_daily_loss)),
            max_trade_amount=to_decimal(data.get("max_trade_amount", defaults.max_trade_amount)),
            stop_loss_percentage=to_decimal(
                data.get("stop_loss_percentage", defaults.stop_loss_percentage)
            ),
            max_consecutive_losses=int(
                data.get("max_consecutive_losses", defaults.max_consecutive_losses)
            ),
            auto_trading_enabled=bool(
                data.get("auto_trading_enabled", defaults.auto_trading_enabled)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def with_auto_trading(self, enabled: bool) -> "RiskSettings":
        """Copy with auto-trading toggled (emergency stop / resume)."""
        data = asdict(self)
        data["auto_trading_enabled"] = enabled
        return RiskSettings(**data)


class GateName(str, Enum):
    """Risk gates in evaluation order."""
    DAILY_LOSS = "daily_loss"
    AUTO_TRADING = "auto_trading"
    TRADE_AMOUNT = "trade_amount"
    BALANCE = "balance"
    CONSECUTIVE_LOSSES = "consecutive_losses"


@dataclass(frozen=True)
class GateDecision:
    """Allow, or deny with the reason of the first failing gate."""

    allowed: bool
    reason: Optional[str] = None
    gate: Optional[GateName] = None

    @classmethod
    def allow(cls) -> "GateDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, gate: GateName, reason: str) -> "GateDecision":
        return cls(allowed=False, reason=reason, gate=gate)


class RiskLevel(str, Enum):
    """Daily loss exposure level."""
    NORMAL = "normal"
    WARNING = "warning"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RiskAssessment:
    """Snapshot of how close the account is to its daily loss limit."""

    level: RiskLevel
    loss_usage_pct: Decimal
    daily_pnl: Decimal
    max_daily_loss: Decimal

    @property
    def trading_halted(self) -> bool:
        return self.level == RiskLevel.STOPPED
