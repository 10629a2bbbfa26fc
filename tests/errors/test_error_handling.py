"""
Error classification and handling tests.

Business rule failures are recoverable values or exceptions, integration
faults are isolated per settlement call, and system failures are not
recoverable.
"""

import pytest
from decimal import Decimal
from unittest.mock import Mock, patch

from sigtrade_app.errors import (
    AlreadySettledError,
    ConfigurationError,
    IntegrationFaultError,
    InvalidOutcomeError,
    PersistenceError,
    RiskRejectedError,
    StateTransitionError,
    SystemFailureError,
    TradingRuleError,
    UnknownTradeError,
)
from sigtrade_app.ledger.ledger import TradeLedger
from sigtrade_app.ledger.models import SettlementOutcome, SettlementStatus
from sigtrade_app.settlement.oracles import ManualSettlementOracle

from conftest import make_request


class TestErrorClassification:
    """Test error classification system."""

    def test_trading_rule_hierarchy(self):
        """Test that risk rejections are recoverable business rule errors."""
        error = RiskRejectedError("insufficient balance", gate_name="balance", context={"amount": "50"})

        assert isinstance(error, TradingRuleError)
        assert error.recoverable is True
        assert error.reason == "insufficient balance"
        assert error.gate_name == "balance"
        assert error.context == {"amount": "50"}
        assert str(error) == "Trade rejected: insufficient balance"

    def test_integration_fault_hierarchy(self):
        """Test that settlement faults share a recoverable base."""
        for cls in (UnknownTradeError, AlreadySettledError, InvalidOutcomeError):
            error = cls("fault", trade_id="t-1")
            assert isinstance(error, IntegrationFaultError)
            assert error.recoverable is True
            assert error.trade_id == "t-1"
            assert error.context == {}

    def test_already_settled_carries_state(self):
        error = AlreadySettledError("dup", current_state="won", trade_id="t-1")

        assert error.current_state == "won"

    def test_system_failure_hierarchy(self):
        """Test that system failures are not recoverable."""
        errors = [
            StateTransitionError("bad", current_state="won", attempted_transition="won->lost"),
            PersistenceError("disk", operation="sqlite", target="trades.db"),
            ConfigurationError("bad config", errors=["x"]),
        ]

        for error in errors:
            assert isinstance(error, SystemFailureError)
            assert error.recoverable is False

        assert errors[0].attempted_transition == "won->lost"
        assert errors[1].target == "trades.db"
        assert errors[2].errors == ["x"]

    def test_configuration_error_defaults(self):
        assert ConfigurationError("bad").errors == []


class TestErrorPropagation:
    """Where errors surface and where they are absorbed."""

    def test_unwrap_raises_rejection(self, ledger):
        result = ledger.place(make_request("11"))

        with pytest.raises(RiskRejectedError) as exc_info:
            result.unwrap()

        assert exc_info.value.reason == "amount exceeds maximum trade limit"
        assert exc_info.value.gate_name == "trade_amount"

    def test_unwrap_returns_trade(self, ledger):
        result = ledger.place(make_request("1"))

        assert result.unwrap() is result.trade

    def test_settle_never_raises_on_faults(self, ledger):
        trade = ledger.place(make_request("1")).trade
        ledger.settle(trade.trade_id, SettlementOutcome.loss())

        statuses = [
            ledger.settle("unknown", SettlementOutcome.loss()).status,
            ledger.settle(trade.trade_id, SettlementOutcome.loss()).status,
        ]

        assert statuses == [SettlementStatus.UNKNOWN_TRADE, SettlementStatus.ALREADY_SETTLED]

    def test_fault_message_in_result(self, ledger):
        result = ledger.settle("unknown", SettlementOutcome.win(Decimal("1")))

        assert "unknown" in result.message

    def test_terminal_trade_transition_raises(self, ledger):
        trade = ledger.place(make_request("1")).trade
        settled = ledger.settle(trade.trade_id, SettlementOutcome.loss()).trade

        with pytest.raises(StateTransitionError):
            settled.with_outcome(SettlementOutcome.win(Decimal("2")), settled.settled_at)

    def test_unattached_manual_oracle(self):
        oracle = ManualSettlementOracle()

        with pytest.raises(RuntimeError):
            oracle.resolve("t-1", won=False)

    def test_unexpected_store_error_propagates(self, risk_settings, fixed_clock):
        store = Mock()
        store.save_trade.side_effect = OSError("unexpected")
        ledger = TradeLedger(settings=risk_settings, store=store, clock=fixed_clock)

        with pytest.raises(OSError):
            ledger.place(make_request("1"))

    def test_persistence_error_logged(self, risk_settings, fixed_clock):
        store = Mock()
        store.save_trade.side_effect = PersistenceError("disk full", operation="sqlite")
        ledger = TradeLedger(settings=risk_settings, store=store, clock=fixed_clock)

        with patch.object(ledger, "logger", Mock()) as mock_logger:
            assert ledger.place(make_request("1")).placed is True

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["error"] == "disk full"
