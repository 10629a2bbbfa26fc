"""
Trading contracts shared across parsing, gating and the ledger.
"""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from ..utils.money import to_decimal


class Direction(str, Enum):
    """Binary option direction."""
    CALL = "CALL"
    PUT = "PUT"


class TradeSource(str, Enum):
    """Provenance of a trade request."""
    MANUAL = "manual"
    SIGNAL = "signal"


@dataclass(frozen=True)
class TradeRequest:
    """
    A proposed trade, built from a valid Signal or from manual input.

    The amount is normalized to Decimal on construction. Non-positive stakes
    and negative durations are refused here, before any risk evaluation, so
    no entry path can reach the ledger with them.

    Raises:
        ValueError: If the amount is not a positive number or the duration
            is not a non-negative integer
    """

    pair: str
    direction: Direction
    amount: Decimal
    duration_seconds: int
    source: TradeSource = TradeSource.MANUAL
    source_label: str = "Manual Trade"
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        amount = to_decimal(self.amount)
        if amount <= 0:
            raise ValueError(f"Trade amount must be positive, got {amount}")
        object.__setattr__(self, "amount", amount)

        duration = self.duration_seconds
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 0:
            raise ValueError(f"Trade duration must be a non-negative integer, got {duration!r}")

    @property
    def is_signal_derived(self) -> bool:
        return self.source == TradeSource.SIGNAL
