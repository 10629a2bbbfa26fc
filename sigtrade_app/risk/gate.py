"""
Risk gate evaluation for proposed trades.

Checks run in a fixed order and the first failing check determines the
denial reason. Every check is recorded through the gating logger.
"""

from decimal import Decimal

from ..ledger.models import AccountState
from ..logging.config import GATING_SUBSYSTEM, get_audit_logger, log_gate_decision
from ..models.trading import TradeRequest
from .models import GateDecision, GateName, RiskAssessment, RiskLevel, RiskSettings

REASON_DAILY_LOSS = "daily loss limit reached"
REASON_AUTO_TRADING = "auto-trading disabled"
REASON_TRADE_AMOUNT = "amount exceeds maximum trade limit"
REASON_BALANCE = "insufficient balance"
REASON_CONSECUTIVE_LOSSES = "consecutive loss limit reached"

WARNING_USAGE_PCT = Decimal("75")

gating_logger = get_audit_logger(__name__, GATING_SUBSYSTEM)


class RiskGate:
    """Evaluates proposed trades against risk limits and account state. Never mutates."""

    def __init__(self):
        self.gating_logger = gating_logger

    def evaluate(
        self,
        proposed: TradeRequest,
        limits: RiskSettings,
        account: AccountState
    ) -> GateDecision:
        """
        Evaluate a proposed trade.

        Args:
            proposed: Trade being considered
            limits: Current risk settings
            account: Current account snapshot

        Returns:
            GateDecision.allow() or a denial naming the first failing gate
        """
        checks = (
            (GateName.DAILY_LOSS, self._check_daily_loss, REASON_DAILY_LOSS),
            (GateName.AUTO_TRADING, self._check_auto_trading, REASON_AUTO_TRADING),
            (GateName.TRADE_AMOUNT, self._check_trade_amount, REASON_TRADE_AMOUNT),
            (GateName.BALANCE, self._check_balance, REASON_BALANCE),
            (GateName.CONSECUTIVE_LOSSES, self._check_consecutive_losses, REASON_CONSECUTIVE_LOSSES),
        )

        for gate, check, reason in checks:
            passed, context = check(proposed, limits, account)
            log_gate_decision(
                self.gating_logger,
                proposed,
                gate_name=gate.value,
                passed=passed,
                reason="ok" if passed else reason,
                context=context
            )
            if not passed:
                return GateDecision.deny(gate, reason)

        return GateDecision.allow()

    @staticmethod
    def _check_daily_loss(proposed, limits, account):
        # Hard stop regardless of the proposed stake
        passed = account.daily_pnl > -limits.max_daily_loss
        return passed, {
            "daily_pnl": str(account.daily_pnl),
            "max_daily_loss": str(limits.max_daily_loss),
        }

    @staticmethod
    def _check_auto_trading(proposed, limits, account):
        passed = limits.auto_trading_enabled or not proposed.is_signal_derived
        return passed, {
            "auto_trading_enabled": limits.auto_trading_enabled,
            "source": proposed.source.value,
        }

    @staticmethod
    def _check_trade_amount(proposed, limits, account):
        passed = proposed.amount <= limits.max_trade_amount
        return passed, {
            "amount": str(proposed.amount),
            "max_trade_amount": str(limits.max_trade_amount),
        }

    @staticmethod
    def _check_balance(proposed, limits, account):
        passed = proposed.amount <= account.balance
        return passed, {
            "amount": str(proposed.amount),
            "balance": str(account.balance),
        }

    @staticmethod
    def _check_consecutive_losses(proposed, limits, account):
        passed = account.consecutive_losses < limits.max_consecutive_losses
        return passed, {
            "consecutive_losses": account.consecutive_losses,
            "max_consecutive_losses": limits.max_consecutive_losses,
        }

    def assess(self, limits: RiskSettings, account: AccountState) -> RiskAssessment:
        """
        Summarize daily loss exposure.

        Usage is |daily loss| as a percentage of max_daily_loss and is zero
        while the day is flat or profitable. Above 75% the level is WARNING;
        at the limit trading is STOPPED.
        """
        if account.daily_pnl < 0 and limits.max_daily_loss > 0:
            usage = (-account.daily_pnl) / limits.max_daily_loss * 100
        else:
            usage = Decimal("0")

        if account.daily_pnl <= -limits.max_daily_loss:
            level = RiskLevel.STOPPED
        elif usage > WARNING_USAGE_PCT:
            level = RiskLevel.WARNING
        else:
            level = RiskLevel.NORMAL

        return RiskAssessment(
            level=level,
            loss_usage_pct=usage,
            daily_pnl=account.daily_pnl,
            max_daily_loss=limits.max_daily_loss,
        )