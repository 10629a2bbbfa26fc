"""Base classes for settlement oracles and outcome policies."""

from abc import ABC, abstractmethod
from typing import Callable, Optional

import structlog

from ..ledger.models import SettlementOutcome, SettlementResult, Trade

SettleCallback = Callable[[str, SettlementOutcome], SettlementResult]


class OutcomePolicy(ABC):
    """Decides the outcome of a pending trade."""

    @abstractmethod
    def decide(self, trade: Trade) -> SettlementOutcome:
        """
        Produce the settlement outcome for a trade.

        Args:
            trade: Pending trade being resolved

        Returns:
            Win with payout, or loss
        """
        pass


class SettlementOracle(ABC):
    """
    External settlement collaborator.

    The ledger attaches its settle() callback once and registers every newly
    placed trade. The oracle must invoke the callback exactly once per
    registered trade, after a bounded delay of its choosing.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"settlement.{name}")
        self._settle: Optional[SettleCallback] = None

    def attach(self, settle: SettleCallback) -> None:
        """Attach the ledger settle() callback."""
        self._settle = settle

    @abstractmethod
    def register(self, trade: Trade) -> None:
        """Accept a newly placed PENDING trade for future resolution."""
        pass

    def _deliver(self, trade_id: str, outcome: SettlementOutcome) -> SettlementResult:
        """Invoke the attached settle callback."""
        if self._settle is None:
            raise RuntimeError(f"Settlement oracle {self.name} is not attached to a ledger")

        result = self._settle(trade_id, outcome)
        self.logger.debug(
            "Settlement delivered",
            trade_id=trade_id,
            won=outcome.won,
            status=result.status.value
        )
        return result
