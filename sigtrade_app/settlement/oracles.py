"""Settlement oracle implementations."""

import random
import threading
from decimal import Decimal
from typing import Optional, Union

from ..config.defaults import SettlementParams
from ..errors import InvalidOutcomeError
from ..ledger.models import SettlementOutcome, SettlementResult, SettlementStatus, Trade
from ..utils.money import quantize_money, to_decimal
from .base import OutcomePolicy, SettlementOracle
from .policies import SimulatedOutcomePolicy
from .scheduler import SettlementScheduler


class ScheduledSettlementOracle(SettlementOracle):
    """
    Resolves each registered trade once, after a random bounded delay.

    The outcome comes from the injected policy when the task fires, so the
    policy sees the trade as it was at placement.
    """

    def __init__(
        self,
        policy: Optional[OutcomePolicy] = None,
        scheduler: Optional[SettlementScheduler] = None,
        min_delay_seconds: float = 1.0,
        max_delay_seconds: float = 5.0,
        rng: Optional[random.Random] = None,
        name: str = "scheduled"
    ):
        super().__init__(name)
        if min_delay_seconds < 0 or max_delay_seconds < min_delay_seconds:
            raise ValueError(
                f"Invalid delay range [{min_delay_seconds}, {max_delay_seconds}]"
            )
        self.rng = rng or random.Random()
        self.policy = policy or SimulatedOutcomePolicy(rng=self.rng)
        self.scheduler = scheduler or SettlementScheduler()
        self.min_delay_seconds = min_delay_seconds
        self.max_delay_seconds = max_delay_seconds

    @classmethod
    def from_params(
        cls,
        params: SettlementParams,
        rng: Optional[random.Random] = None,
        scheduler: Optional[SettlementScheduler] = None
    ) -> "ScheduledSettlementOracle":
        rng = rng or random.Random()
        return cls(
            policy=SimulatedOutcomePolicy(
                win_probability=params.win_probability,
                payout_multiplier=params.payout_multiplier,
                rng=rng,
            ),
            scheduler=scheduler,
            min_delay_seconds=params.min_delay_seconds,
            max_delay_seconds=params.max_delay_seconds,
            rng=rng,
        )

    def register(self, trade: Trade) -> None:
        delay = self.rng.uniform(self.min_delay_seconds, self.max_delay_seconds)
        self.scheduler.schedule(
            delay,
            lambda: self._resolve(trade),
            name=f"settle:{trade.trade_id}"
        )
        self.logger.info("Trade registered for settlement", trade_id=trade.trade_id, delay_seconds=round(delay, 3))

    def _resolve(self, trade: Trade) -> SettlementResult:
        return self._deliver(trade.trade_id, self.policy.decide(trade))

    def start(self) -> None:
        self.scheduler.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self.scheduler.stop(timeout)


class ManualSettlementOracle(SettlementOracle):
    """Holds registered trades until resolve() is called for each."""

    def __init__(self, payout_multiplier: Union[float, Decimal] = 1.8, name: str = "manual"):
        super().__init__(name)
        self.payout_multiplier = to_decimal(payout_multiplier)
        self._lock = threading.Lock()
        self._registered: dict[str, Trade] = {}

    def register(self, trade: Trade) -> None:
        with self._lock:
            self._registered[trade.trade_id] = trade
        self.logger.info("Trade registered for settlement", trade_id=trade.trade_id)

    @property
    def awaiting(self) -> list[str]:
        """Ids of registered trades not yet resolved through this oracle."""
        with self._lock:
            return list(self._registered)

    def resolve(
        self,
        trade_id: str,
        won: bool,
        payout: Optional[Union[Decimal, float, int, str]] = None
    ) -> SettlementResult:
        """
        Settle a trade now.

        A win without an explicit payout pays the stake times the payout
        multiplier. Unregistered or already resolved ids are still forwarded
        so the ledger can report the fault.
        """
        with self._lock:
            trade = self._registered.get(trade_id)

        try:
            if not won:
                outcome = SettlementOutcome.loss()
            elif payout is not None:
                outcome = SettlementOutcome.win(payout)
            elif trade is not None:
                outcome = SettlementOutcome.win(quantize_money(trade.amount * self.payout_multiplier))
            else:
                outcome = SettlementOutcome.win(Decimal("0"))
        except InvalidOutcomeError as e:
            # Trade stays registered so it can be resolved with a usable payout
            self.logger.warning("Unusable payout rejected", trade_id=trade_id, error=str(e))
            return SettlementResult(
                status=SettlementStatus.INVALID_OUTCOME,
                trade=trade,
                message=str(e)
            )

        with self._lock:
            self._registered.pop(trade_id, None)
        return self._deliver(trade_id, outcome)
