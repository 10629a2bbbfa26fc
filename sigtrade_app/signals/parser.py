"""
Signal text parser.

Expected shape: ``PAIR DIRECTION DURATIONs $AMOUNT``, for example
``EURUSD CALL 60s $10`` or ``gbp/usd put 300s $2.50``.
"""

import re
import threading
from datetime import datetime
from typing import Any, Optional

from ..models.trading import Direction
from ..risk.models import RiskSettings
from ..utils.money import parse_decimal
from .models import Signal

PAIR_PATTERN = re.compile(r"^([A-Z]{3})([A-Z]{3})$")
DURATION_PATTERN = re.compile(r"^\d+$")
EXPECTED_TOKENS = 4

REASON_FORMAT = "invalid signal format: expected 'PAIR DIRECTION DURATIONs $AMOUNT'"
REASON_PAIR = "invalid currency pair"
REASON_DIRECTION = "invalid direction: expected CALL or PUT"
REASON_DURATION = "invalid duration"
REASON_AMOUNT = "invalid amount"
REASON_AMOUNT_NOT_POSITIVE = "amount must be positive"
REASON_AMOUNT_LIMIT = "amount exceeds maximum trade limit"


class ParsingMetrics:
    """Counters for parsed signal lines, grouped by rejection category."""

    def __init__(self):
        self._lock = threading.Lock()
        self.total_parses = 0
        self.valid_parses = 0
        self.rejected_parses = 0
        self.rejections_by_reason: dict[str, int] = {}

    def record(self, signal: Signal) -> None:
        with self._lock:
            self.total_parses += 1
            if signal.valid:
                self.valid_parses += 1
                return
            self.rejected_parses += 1
            category = _reason_category(signal.rejection_reason or "")
            self.rejections_by_reason[category] = self.rejections_by_reason.get(category, 0) + 1

    def get_stats(self) -> dict[str, Any]:
        """Get current metrics."""
        with self._lock:
            return {
                "total_parses": self.total_parses,
                "valid_parses": self.valid_parses,
                "rejected_parses": self.rejected_parses,
                "valid_rate": self.valid_parses / max(self.total_parses, 1),
                "rejections_by_reason": dict(self.rejections_by_reason),
            }


def _reason_category(reason: str) -> str:
    # Strip the offending token so counts group by rule
    for prefix in (
        REASON_FORMAT, REASON_PAIR, REASON_DIRECTION, REASON_DURATION,
        REASON_AMOUNT_NOT_POSITIVE, REASON_AMOUNT_LIMIT, REASON_AMOUNT,
    ):
        if reason.startswith(prefix):
            return prefix
    return reason


class SignalParser:
    """
    Parses raw signal text against the current risk limits.

    The returned Signal depends only on the input line and the limits passed
    in; every result is also counted in the parser's metrics.
    """

    def __init__(self):
        self.metrics = ParsingMetrics()

    def parse(
        self,
        raw: str,
        limits: RiskSettings,
        received_at: Optional[datetime] = None
    ) -> Signal:
        """
        Parse one signal line.

        Args:
            raw: Raw text from the message feed
            limits: Risk settings used for the trade amount cross-check
            received_at: Optional receive timestamp

        Returns:
            Signal with valid=True, or valid=False and a rejection reason
        """
        signal = self._parse(raw, limits, received_at)
        self.metrics.record(signal)
        return signal

    def _parse(self, raw: Any, limits: RiskSettings, received_at: Optional[datetime]) -> Signal:
        extra = {"received_at": received_at} if received_at is not None else {}
        raw = raw if isinstance(raw, str) else ""

        tokens = raw.split()
        if len(tokens) != EXPECTED_TOKENS:
            return Signal.rejected(raw, REASON_FORMAT, **extra)

        pair_token, direction_token, duration_token, amount_token = tokens

        pair = self._parse_pair(pair_token)
        if pair is None:
            return Signal.rejected(raw, f"{REASON_PAIR}: {pair_token}", **extra)

        direction = self._parse_direction(direction_token)
        if direction is None:
            return Signal.rejected(raw, f"{REASON_DIRECTION}, got {direction_token}", **extra)

        duration = self._parse_duration(duration_token)
        if duration is None:
            return Signal.rejected(raw, f"{REASON_DURATION}: {duration_token}", **extra)

        amount = parse_decimal(amount_token[1:] if amount_token.startswith("$") else amount_token)
        if amount is None:
            return Signal.rejected(raw, f"{REASON_AMOUNT}: {amount_token}", **extra)
        if amount <= 0:
            return Signal.rejected(raw, REASON_AMOUNT_NOT_POSITIVE, **extra)

        if amount > limits.max_trade_amount:
            return Signal.rejected(
                raw,
                f"{REASON_AMOUNT_LIMIT} (${limits.max_trade_amount})",
                **extra
            )

        return Signal(
            raw_text=raw,
            valid=True,
            pair=pair,
            direction=direction,
            duration_seconds=duration,
            amount=amount,
            **extra
        )

    def get_stats(self) -> dict[str, Any]:
        return self.metrics.get_stats()

    @staticmethod
    def _parse_pair(token: str) -> Optional[str]:
        match = PAIR_PATTERN.match(token.replace("/", "").upper())
        if not match:
            return None
        return f"{match.group(1)}/{match.group(2)}"

    @staticmethod
    def _parse_direction(token: str) -> Optional[Direction]:
        try:
            return Direction(token.upper())
        except ValueError:
            return None

    @staticmethod
    def _parse_duration(token: str) -> Optional[int]:
        # Zero is accepted; negative and fractional values are not
        if token[-1:] in ("s", "S"):
            token = token[:-1]
        if not DURATION_PATTERN.match(token):
            return None
        return int(token)


parser = SignalParser()


def parse_signal(raw: str, limits: RiskSettings) -> Signal:
    """Parse a signal line with the shared parser instance."""
    return parser.parse(raw, limits)
