"""
Main trading engine coordinator.

Wires the signal parser, the trade ledger and a settlement oracle together:
Raw text → SignalParser → RiskGate (inside TradeLedger.place) → PENDING
trade → SettlementOracle → TradeLedger.settle.
"""

import threading
from collections import deque
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from .config.loader import ConfigLoader
from .ledger.ledger import TradeLedger
from .ledger.models import PlacementResult
from .models.trading import Direction, TradeRequest, TradeSource
from .persistence.trade_store import TradeStore
from .risk.models import RiskSettings
from .settlement.base import SettlementOracle
from .settlement.oracles import ScheduledSettlementOracle
from .signals.models import Signal
from .signals.parser import SignalParser

logger = structlog.get_logger(__name__)

MANUAL_TRADE_LABEL = "Manual Trade"


@dataclass(frozen=True)
class SignalProcessingResult:
    """What happened to one incoming signal line."""
    signal: Signal
    placement: Optional[PlacementResult] = None

    @property
    def executed(self) -> bool:
        return self.placement is not None and self.placement.placed


class TradingEngine:
    """
    Coordinator for signal intake and trade execution.

    Keeps a bounded feed of recently processed signals. Valid signals are
    executed automatically when auto-trading is enabled; otherwise they wait
    for execute_signal().
    """

    def __init__(
        self,
        ledger: TradeLedger,
        parser: Optional[SignalParser] = None,
        recent_signals_limit: int = 20,
        auto_label_prefix: str = "Telegram",
        manual_label_prefix: str = "Manual"
    ) -> None:
        self.logger = logger
        self.ledger = ledger
        self.parser = parser or SignalParser()
        self.auto_label_prefix = auto_label_prefix
        self.manual_label_prefix = manual_label_prefix

        self._lock = threading.Lock()
        self._recent: deque[Signal] = deque(maxlen=recent_signals_limit)
        self._executed: set[str] = set()
        self._stats = {"received": 0, "valid": 0, "rejected": 0, "executed": 0}

        self.logger.info("Trading engine initialized", recent_signals_limit=recent_signals_limit)

    @classmethod
    def from_config(
        cls,
        config_dir: Optional[Union[str, Path]] = None,
        oracle: Optional[SettlementOracle] = None,
        db_path: Optional[Union[str, Path]] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> "TradingEngine":
        """
        Build an engine from the YAML settings file and defaults.

        Args:
            config_dir: Directory holding settings.yaml
            oracle: Settlement oracle, a simulated scheduled oracle when omitted
            db_path: Optional SQLite path for the trade audit trail
            overrides: Config overrides applied over the file
        """
        loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        config = loader.load_config(overrides)
        defaults = loader.defaults

        if oracle is None:
            oracle = ScheduledSettlementOracle.from_params(replace(defaults.settlement, **config["settlement"]))

        ledger = TradeLedger(
            settings=RiskSettings.from_dict(config["risk"]),
            initial_balance=config["account"]["initial_balance"],
            oracle=oracle,
            store=TradeStore(db_path) if db_path else None,
        )

        feed = config["signal_feed"]
        return cls(
            ledger=ledger,
            recent_signals_limit=feed["recent_signals_limit"],
            auto_label_prefix=feed["auto_label_prefix"],
            manual_label_prefix=feed["manual_label_prefix"],
        )

    def process_signal(self, raw: str) -> SignalProcessingResult:
        """
        Parse an incoming signal line and auto-execute it when allowed.

        Args:
            raw: Raw text from the message feed

        Returns:
            The parsed signal and, when auto-executed, the placement result
        """
        settings = self.ledger.settings
        signal = self.parser.parse(raw, settings)

        with self._lock:
            if len(self._recent) == self._recent.maxlen:
                # Only signals still in the feed can be executed
                self._executed.discard(self._recent[-1].signal_id)
            self._recent.appendleft(signal)
            self._stats["received"] += 1
            self._stats["valid" if signal.valid else "rejected"] += 1

        if not signal.valid:
            self.logger.info(
                "Signal rejected",
                signal_id=signal.signal_id,
                raw=signal.raw_text,
                reason=signal.rejection_reason
            )
            return SignalProcessingResult(signal=signal)

        self.logger.info(
            "Signal parsed",
            signal_id=signal.signal_id,
            pair=signal.pair,
            direction=signal.direction.value,
            duration_seconds=signal.duration_seconds,
            amount=str(signal.amount)
        )

        if not settings.auto_trading_enabled:
            return SignalProcessingResult(signal=signal)

        placement = self._execute(
            signal,
            TradeSource.SIGNAL,
            f"{self.auto_label_prefix}: {signal.raw_text}"
        )
        return SignalProcessingResult(signal=signal, placement=placement)

    def execute_signal(self, signal_id: str) -> PlacementResult:
        """
        Manually execute a valid signal from the recent feed.

        Raises:
            KeyError: If the signal is not in the recent feed
            ValueError: If the signal is invalid or was already executed
        """
        with self._lock:
            signal = next((s for s in self._recent if s.signal_id == signal_id), None)
            if signal is None:
                raise KeyError(f"Signal {signal_id} not in recent feed")

        if not signal.valid:
            raise ValueError(f"Signal {signal_id} is invalid: {signal.rejection_reason}")

        return self._execute(
            signal,
            TradeSource.MANUAL,
            f"{self.manual_label_prefix}: {signal.raw_text}"
        )

    def place_manual_trade(
        self,
        pair: str,
        direction: Union[Direction, str],
        amount: Union[Decimal, float, int, str],
        duration_seconds: int
    ) -> PlacementResult:
        """
        Place a trade entered by hand rather than derived from a signal.

        Raises:
            ValueError: If the direction, amount or duration is unusable
        """
        request = TradeRequest(
            pair=pair,
            direction=Direction(direction.upper()) if isinstance(direction, str) else direction,
            amount=amount,
            duration_seconds=duration_seconds,
            source=TradeSource.MANUAL,
            source_label=MANUAL_TRADE_LABEL,
        )
        return self.ledger.place(request)

    def _execute(self, signal: Signal, source: TradeSource, label: str) -> PlacementResult:
        # Claim the signal first so concurrent callers cannot execute it twice
        with self._lock:
            if signal.signal_id in self._executed:
                raise ValueError(f"Signal {signal.signal_id} already executed")
            self._executed.add(signal.signal_id)

        placement = self.ledger.place(signal.to_request(source, label))

        with self._lock:
            if placement.placed:
                self._stats["executed"] += 1
            else:
                self._executed.discard(signal.signal_id)
        return placement

    def recent_signals(self) -> list[Signal]:
        """Recently processed signals, most recent first."""
        with self._lock:
            return list(self._recent)

    def is_executed(self, signal_id: str) -> bool:
        with self._lock:
            return signal_id in self._executed

    def get_stats(self) -> dict[str, int]:
        """Signal intake counters."""
        with self._lock:
            return dict(self._stats)

    def set_auto_trading(self, enabled: bool) -> None:
        """Toggle auto-trading by replacing the risk settings."""
        self.ledger.update_settings(self.ledger.settings.with_auto_trading(enabled))

    def emergency_stop(self) -> None:
        """Stop all auto-trading immediately."""
        self.logger.warning("Emergency stop: auto-trading disabled")
        self.set_auto_trading(False)
