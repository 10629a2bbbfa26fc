"""Outcome policies for simulated and deterministic settlement."""

import random
from decimal import Decimal
from typing import Optional, Union

from ..ledger.models import SettlementOutcome, Trade
from ..utils.money import quantize_money, to_decimal
from .base import OutcomePolicy


class SimulatedOutcomePolicy(OutcomePolicy):
    """
    Random win/loss with a fixed payout multiplier.

    Defaults reproduce the demo simulation: 55% wins paying 1.8x the stake.
    """

    def __init__(
        self,
        win_probability: float = 0.55,
        payout_multiplier: Union[float, Decimal] = 1.8,
        rng: Optional[random.Random] = None
    ):
        if not 0.0 <= win_probability <= 1.0:
            raise ValueError(f"win_probability must be in [0, 1], got {win_probability}")
        self.win_probability = win_probability
        self.payout_multiplier = to_decimal(payout_multiplier)
        self.rng = rng or random.Random()

    def decide(self, trade: Trade) -> SettlementOutcome:
        if self.rng.random() < self.win_probability:
            return SettlementOutcome.win(quantize_money(trade.amount * self.payout_multiplier))
        return SettlementOutcome.loss()


class FixedOutcomePolicy(OutcomePolicy):
    """Always produces the same result; payout is a multiple of the stake."""

    def __init__(self, won: bool, payout_multiplier: Union[float, Decimal] = 1.8):
        self.won = won
        self.payout_multiplier = to_decimal(payout_multiplier)

    def decide(self, trade: Trade) -> SettlementOutcome:
        if self.won:
            return SettlementOutcome.win(quantize_money(trade.amount * self.payout_multiplier))
        return SettlementOutcome.loss()
