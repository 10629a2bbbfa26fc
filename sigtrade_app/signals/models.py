"""Signal data models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..models.trading import Direction, TradeRequest, TradeSource
from ..utils.time import utc_now


@dataclass(frozen=True)
class Signal:
    """A parsed trading signal.

    Attributes:
        raw_text: Verbatim input line
        pair: Normalized currency pair, e.g. ``EUR/USD``
        direction: CALL or PUT
        duration_seconds: Option expiry in seconds
        amount: Stake
        valid: True iff every field parsed and passed the syntactic and
            trade limit checks
        rejection_reason: Human-readable reason when invalid
        signal_id: Unique id for this processed line
        received_at: When the line was parsed
    """

    raw_text: str
    valid: bool
    pair: Optional[str] = None
    direction: Optional[Direction] = None
    duration_seconds: Optional[int] = None
    amount: Optional[Decimal] = None
    rejection_reason: Optional[str] = None
    signal_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    received_at: datetime = field(default_factory=utc_now)

    @classmethod
    def rejected(cls, raw_text: str, reason: str, **kwargs) -> "Signal":
        return cls(raw_text=raw_text, valid=False, rejection_reason=reason, **kwargs)

    def to_request(self, source: TradeSource, source_label: str) -> TradeRequest:
        """Build a trade request from a valid signal."""
        if not self.valid:
            raise ValueError(f"Cannot trade an invalid signal: {self.rejection_reason}")
        return TradeRequest(
            pair=self.pair,
            direction=self.direction,
            amount=self.amount,
            duration_seconds=self.duration_seconds,
            source=source,
            source_label=source_label,
        )
