"""
Ledger data models for the trade lifecycle and account accounting.

Trades and account snapshots are immutable; every transition produces a new
instance so readers never observe a half-applied settlement.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..errors import InvalidOutcomeError, RiskRejectedError, StateTransitionError
from ..models.trading import Direction, TradeSource
from ..utils.money import to_decimal


class TradeState(str, Enum):
    """Trade lifecycle states. WON and LOST are terminal."""
    PENDING = "pending"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (TradeState.WON, TradeState.LOST)


@dataclass(frozen=True)
class SettlementOutcome:
    """
    Outcome reported by a settlement oracle for a pending trade.

    The payout is normalized to Decimal on construction so a float or string
    from an external oracle never reaches the profit arithmetic.

    Raises:
        InvalidOutcomeError: If the payout is not a finite number
    """

    won: bool
    payout: Optional[Decimal] = Decimal("0")

    def __post_init__(self):
        if self.payout is None:
            return
        try:
            object.__setattr__(self, "payout", to_decimal(self.payout))
        except ValueError as e:
            raise InvalidOutcomeError(
                f"Non-numeric payout {self.payout!r}",
                context={"payout": repr(self.payout)}
            ) from e

    @classmethod
    def win(cls, payout: Decimal) -> "SettlementOutcome":
        return cls(won=True, payout=payout)

    @classmethod
    def loss(cls) -> "SettlementOutcome":
        return cls(won=False)


@dataclass(frozen=True)
class Trade:
    """A placed wager with a pending-then-terminal lifecycle."""

    trade_id: str
    placed_at: datetime
    pair: str
    direction: Direction
    amount: Decimal
    duration_seconds: int
    source: TradeSource
    source_label: str
    state: TradeState = TradeState.PENDING
    payout: Optional[Decimal] = None         # Only when WON
    settled_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.state == TradeState.PENDING

    @property
    def profit(self) -> Optional[Decimal]:
        """Realized profit, None while pending."""
        if self.state == TradeState.WON:
            return self.payout - self.amount
        if self.state == TradeState.LOST:
            return -self.amount
        return None

    def with_outcome(self, outcome: SettlementOutcome, settled_at: datetime) -> "Trade":
        """Create the terminal trade for a settlement outcome."""
        if self.state.is_terminal:
            raise StateTransitionError(
                f"Trade {self.trade_id} is already {self.state.value}",
                current_state=self.state.value,
                attempted_transition=TradeState.WON.value if outcome.won else TradeState.LOST.value
            )

        if outcome.won:
            return replace(self, state=TradeState.WON, payout=outcome.payout, settled_at=settled_at)
        return replace(self, state=TradeState.LOST, payout=None, settled_at=settled_at)


@dataclass(frozen=True)
class AccountState:
    """Account snapshot owned by the ledger."""

    balance: Decimal
    daily_pnl: Decimal = Decimal("0")
    consecutive_losses: int = 0

    def apply_profit(self, profit: Decimal, won: bool) -> "AccountState":
        return AccountState(
            balance=self.balance + profit,
            daily_pnl=self.daily_pnl + profit,
            consecutive_losses=0 if won else self.consecutive_losses + 1,
        )

    def with_daily_reset(self) -> "AccountState":
        return replace(self, daily_pnl=Decimal("0"))


@dataclass(frozen=True)
class RiskRejected:
    """Placement denied by the risk gate."""

    reason: str
    gate_name: Optional[str] = None


@dataclass(frozen=True)
class PlacementResult:
    """Either a placed trade or a risk rejection."""

    trade: Optional[Trade] = None
    rejection: Optional[RiskRejected] = None

    @property
    def placed(self) -> bool:
        return self.trade is not None

    def unwrap(self) -> Trade:
        """Return the trade or raise RiskRejectedError."""
        if self.trade is None:
            raise RiskRejectedError(
                self.rejection.reason,
                gate_name=self.rejection.gate_name
            )
        return self.trade


class SettlementStatus(str, Enum):
    """Result of a settlement attempt."""
    SETTLED = "settled"
    UNKNOWN_TRADE = "unknown_trade"
    ALREADY_SETTLED = "already_settled"
    INVALID_OUTCOME = "invalid_outcome"


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of TradeLedger.settle()."""

    status: SettlementStatus
    trade: Optional[Trade] = None
    profit: Optional[Decimal] = None
    message: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.status == SettlementStatus.SETTLED


@dataclass(frozen=True)
class TradeStats:
    """Read-only aggregate over a set of trades."""

    total_trades: int
    won_trades: int
    lost_trades: int
    pending_trades: int
    total_profit: Decimal
    win_rate: float           # Percent of settled trades, 0 when none settled
