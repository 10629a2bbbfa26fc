"""
Integration fault classifications for misbehaving settlement collaborators.

Raised inside the ledger when a settlement callback cannot be applied. The
ledger isolates them per call: they are logged and dropped so other trades
are never affected.
"""

from typing import Optional, Dict, Any


class IntegrationFaultError(Exception):
    """Base class for faults caused by an external collaborator."""

    def __init__(self, message: str, trade_id: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.trade_id = trade_id
        self.context = context or {}
        self.recoverable = True


class UnknownTradeError(IntegrationFaultError):
    """Settlement received for a trade id the ledger never issued."""


class AlreadySettledError(IntegrationFaultError):
    """Duplicate or out-of-order settlement for a terminal trade."""

    def __init__(self, message: str, current_state: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.current_state = current_state


class InvalidOutcomeError(IntegrationFaultError):
    """Settlement outcome that cannot be applied (e.g. negative payout)."""
