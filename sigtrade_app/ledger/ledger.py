"""
Trade ledger: single owner of trades and account state.

place() and settle() run inside one exclusive section, so a risk decision
is always taken against the account state the new trade is committed to,
and concurrent settlement callbacks never interleave with placement.
"""

import threading
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Union

from ..config.validation import ConfigValidator
from ..errors import (
    AlreadySettledError,
    ConfigurationError,
    IntegrationFaultError,
    InvalidOutcomeError,
    PersistenceError,
    UnknownTradeError,
)
from ..logging.config import LEDGER_SUBSYSTEM, get_audit_logger, log_state_transition
from ..models.trading import TradeRequest
from ..risk.gate import RiskGate
from ..risk.models import RiskAssessment, RiskSettings
from ..utils.money import to_decimal
from ..utils.time import is_same_trading_day, utc_now
from .models import (
    AccountState,
    PlacementResult,
    RiskRejected,
    SettlementOutcome,
    SettlementResult,
    SettlementStatus,
    Trade,
    TradeState,
    TradeStats,
)

ledger_logger = get_audit_logger(__name__, LEDGER_SUBSYSTEM)

STATS_PERIODS = ("all", "today")

_FAULT_STATUS = {
    UnknownTradeError: SettlementStatus.UNKNOWN_TRADE,
    AlreadySettledError: SettlementStatus.ALREADY_SETTLED,
    InvalidOutcomeError: SettlementStatus.INVALID_OUTCOME,
}


class TradeLedger:
    """Authoritative trade set plus balance and P&L accounting."""

    def __init__(
        self,
        settings: Optional[RiskSettings] = None,
        initial_balance: Union[Decimal, float, int, str] = Decimal("1000"),
        oracle=None,
        store=None,
        risk_gate: Optional[RiskGate] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize the ledger.

        Args:
            settings: Initial risk settings, defaults when omitted
            initial_balance: Starting account balance
            oracle: SettlementOracle that resolves placed trades
            store: Optional TradeStore for an audit trail
            risk_gate: Gate used to re-check every placement
            clock: Source of placement and settlement timestamps
        """
        self.logger = ledger_logger
        self.initial_balance = to_decimal(initial_balance)
        self.risk_gate = risk_gate or RiskGate()
        self.oracle = oracle
        self.store = store
        self.clock = clock

        self._lock = threading.RLock()
        self._settings = settings or RiskSettings()
        self._account = AccountState(balance=self.initial_balance)
        self._trades: dict[str, Trade] = {}
        self._order: list[str] = []          # Placement order, oldest first

        if self.oracle is not None:
            self.oracle.attach(self.settle)

    @property
    def settings(self) -> RiskSettings:
        return self._settings

    def update_settings(self, settings: RiskSettings) -> None:
        """
        Replace the risk settings as a whole.

        Raises:
            ConfigurationError: If the new settings fail validation
        """
        errors = ConfigValidator.validate_risk_params(settings.to_dict())
        if errors:
            raise ConfigurationError(
                "Invalid risk settings: " + "; ".join(f"{e.field}: {e.message}" for e in errors),
                errors=errors
            )

        with self._lock:
            previous = self._settings
            self._settings = settings

        self.logger.info(
            "Risk settings replaced",
            auto_trading_enabled=settings.auto_trading_enabled,
            previous_auto_trading_enabled=previous.auto_trading_enabled,
            max_trade_amount=str(settings.max_trade_amount),
            max_daily_loss=str(settings.max_daily_loss)
        )

    def get_account(self) -> AccountState:
        with self._lock:
            return self._account

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        with self._lock:
            return self._trades.get(trade_id)

    def place(self, request: TradeRequest) -> PlacementResult:
        """
        Gate and commit a trade as one operation.

        Args:
            request: Proposed trade

        Returns:
            PlacementResult with the new PENDING trade, or the risk rejection
        """
        with self._lock:
            decision = self.risk_gate.evaluate(request, self._settings, self._account)
            if not decision.allowed:
                self.logger.warning(
                    "Trade rejected by risk gate",
                    request_id=request.request_id,
                    pair=request.pair,
                    amount=str(request.amount),
                    source=request.source.value,
                    reason=decision.reason
                )
                return PlacementResult(
                    rejection=RiskRejected(reason=decision.reason, gate_name=decision.gate.value)
                )

            trade = Trade(
                trade_id=uuid.uuid4().hex,
                placed_at=self.clock(),
                pair=request.pair,
                direction=request.direction,
                amount=request.amount,
                duration_seconds=request.duration_seconds,
                source=request.source,
                source_label=request.source_label,
            )
            self._trades[trade.trade_id] = trade
            self._order.append(trade.trade_id)

        self._persist(trade)

        log_state_transition(
            self.logger,
            trade,
            previous_state=None,
            trigger="place",
            context={
                "direction": trade.direction.value,
                "amount": str(trade.amount),
                "duration_seconds": trade.duration_seconds,
                "source": trade.source.value,
            }
        )

        if self.oracle is not None:
            self.oracle.register(trade)

        return PlacementResult(trade=trade)

    def settle(self, trade_id: str, outcome: SettlementOutcome) -> SettlementResult:
        """
        Resolve a PENDING trade exactly once.

        Unknown ids, repeated settlements and unusable outcomes are integration
        faults: they are logged and reported in the result, and leave every
        trade and the account untouched.
        """
        try:
            with self._lock:
                trade = self._validate_settlement(trade_id, outcome)
                settled = trade.with_outcome(outcome, self.clock())
                profit = settled.profit

                self._account = self._account.apply_profit(profit, won=outcome.won)
                self._trades[trade_id] = settled
                account = self._account

        except IntegrationFaultError as e:
            status = _FAULT_STATUS.get(type(e), SettlementStatus.INVALID_OUTCOME)
            self.logger.warning(
                "Settlement dropped",
                trade_id=trade_id,
                status=status.value,
                error=str(e)
            )
            return SettlementResult(status=status, trade=self.get_trade(trade_id), message=str(e))

        self._persist(settled)

        log_state_transition(
            self.logger,
            settled,
            previous_state=TradeState.PENDING,
            trigger="settle",
            context={
                "amount": str(settled.amount),
                "payout": str(settled.payout) if settled.payout is not None else None,
                "profit": str(profit),
                "balance": str(account.balance),
                "daily_pnl": str(account.daily_pnl),
                "consecutive_losses": account.consecutive_losses,
            }
        )

        return SettlementResult(status=SettlementStatus.SETTLED, trade=settled, profit=profit)

    def _validate_settlement(self, trade_id: str, outcome: SettlementOutcome) -> Trade:
        trade = self._trades.get(trade_id)
        if trade is None:
            raise UnknownTradeError(f"Unknown trade {trade_id}", trade_id=trade_id)

        if trade.state.is_terminal:
            raise AlreadySettledError(
                f"Trade {trade_id} already settled as {trade.state.value}",
                current_state=trade.state.value,
                trade_id=trade_id
            )

        if outcome.won and (outcome.payout is None or outcome.payout < 0):
            raise InvalidOutcomeError(
                f"Invalid payout {outcome.payout} for winning trade {trade_id}",
                trade_id=trade_id,
                context={"payout": str(outcome.payout)}
            )

        return trade

    def _persist(self, trade: Trade) -> None:
        # Audit trail only; the in-memory ledger stays authoritative
        if self.store is None:
            return
        try:
            self.store.save_trade(trade)
        except PersistenceError as e:
            self.logger.error(
                "Failed to persist trade",
                trade_id=trade.trade_id,
                state=trade.state.value,
                error=str(e)
            )

    def reset_daily_pnl(self) -> None:
        """Day-boundary event: zero the daily P&L, keep balance and loss streak."""
        with self._lock:
            previous = self._account.daily_pnl
            self._account = self._account.with_daily_reset()

        self.logger.info("Daily P&L reset", previous_daily_pnl=str(previous))

    def list_trades(self, state: Optional[TradeState] = None, limit: Optional[int] = None) -> list[Trade]:
        """
        Trades ordered most recent first.

        Args:
            state: Optional state filter
            limit: Optional maximum number of trades
        """
        with self._lock:
            trades = [self._trades[trade_id] for trade_id in reversed(self._order)]

        if state is not None:
            trades = [t for t in trades if t.state == state]
        if limit is not None:
            trades = trades[:limit]
        return trades

    def pending_trades(self) -> list[Trade]:
        return self.list_trades(state=TradeState.PENDING)

    def stats_for(self, period: str = "all", now: Optional[datetime] = None) -> TradeStats:
        """
        Aggregate statistics over a period.

        Args:
            period: "all" for every trade, "today" for trades placed on the
                current trading day
            now: Reference time for "today", defaults to the ledger clock
        """
        if period not in STATS_PERIODS:
            raise ValueError(f"Unknown stats period {period!r}, expected one of {STATS_PERIODS}")

        trades = self.list_trades()
        if period == "today":
            reference = now or self.clock()
            trades = [t for t in trades if is_same_trading_day(t.placed_at, reference)]

        won = sum(1 for t in trades if t.state == TradeState.WON)
        lost = sum(1 for t in trades if t.state == TradeState.LOST)
        settled = won + lost

        return TradeStats(
            total_trades=len(trades),
            won_trades=won,
            lost_trades=lost,
            pending_trades=len(trades) - settled,
            total_profit=sum((t.profit for t in trades if t.profit is not None), Decimal("0")),
            win_rate=(won / settled * 100) if settled else 0.0,
        )

    def assess_risk(self) -> RiskAssessment:
        """Daily loss exposure for the current settings and account."""
        with self._lock:
            settings, account = self._settings, self._account
        return self.risk_gate.assess(settings, account)
