"""
Shared trading data contracts.

Immutable values exchanged between the parser, the risk gate, the ledger
and the settlement oracle.
"""
from .trading import Direction, TradeRequest, TradeSource

__all__ = ["Direction", "TradeRequest", "TradeSource"]
