"""
Error classification system for the trading core.

Business rule failures and integration faults are kept apart from system
failures so callers can decide what is a normal outcome and what needs
intervention.
"""

from .trading_rules import (
    TradingRuleError,
    RiskRejectedError,
)
from .integration import (
    IntegrationFaultError,
    UnknownTradeError,
    AlreadySettledError,
    InvalidOutcomeError,
)
from .system_failures import (
    SystemFailureError,
    StateTransitionError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    # Business rules
    "TradingRuleError",
    "RiskRejectedError",
    # Integration faults
    "IntegrationFaultError",
    "UnknownTradeError",
    "AlreadySettledError",
    "InvalidOutcomeError",
    # System failures
    "SystemFailureError",
    "StateTransitionError",
    "PersistenceError",
    "ConfigurationError",
]
