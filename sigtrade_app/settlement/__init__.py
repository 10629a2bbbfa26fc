"""
Settlement module.

Settlement oracles resolve PENDING trades by calling back into the ledger
exactly once per trade. How the outcome is produced (simulation, broker
callback, manual resolution) is a policy that lives here, never in the
ledger.
"""
from .base import OutcomePolicy, SettleCallback, SettlementOracle
from .oracles import ManualSettlementOracle, ScheduledSettlementOracle
from .policies import FixedOutcomePolicy, SimulatedOutcomePolicy
from .scheduler import SettlementScheduler

__all__ = [
    "OutcomePolicy",
    "SettleCallback",
    "SettlementOracle",
    "ManualSettlementOracle",
    "ScheduledSettlementOracle",
    "FixedOutcomePolicy",
    "SimulatedOutcomePolicy",
    "SettlementScheduler",
]
