"""
Business rule errors for expected, frequent trading outcomes.

These are normal results (a trade was denied by risk policy), not faults.
"""

from typing import Optional, Dict, Any


class TradingRuleError(Exception):
    """Base class for expected business rule failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class RiskRejectedError(TradingRuleError):
    """Trade placement denied by the risk gate."""

    def __init__(self, reason: str, gate_name: Optional[str] = None, **kwargs):
        super().__init__(f"Trade rejected: {reason}", **kwargs)
        self.reason = reason
        self.gate_name = gate_name
