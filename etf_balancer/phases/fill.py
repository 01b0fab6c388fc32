"""Spend leftover cash on extra whole shares."""

import logging

from ..ledger import Results
from ..planner import AllocationPlan
from .base import BalancePhase

logger = logging.getLogger(__name__)


class FillPhase(BalancePhase):
    """Sweep targeted symbols by price, highest first, until nothing is bought.

    Each sweep buys at most one share per symbol, in the first account (in
    portfolio order) with enough cash. Cash no account can spend on a whole
    share is left uninvested.
    """

    def run(self, plan: AllocationPlan, results: Results) -> None:
        symbols = [
            d.symbol
            for d in sorted(plan, key=lambda d: (-d.price, d.symbol))
            if d.target_weight > 0
        ]

        sweeps = 0
        while True:
            bought = []
            for symbol in symbols:
                if self._buy_one(self.portfolio.accounts, symbol, results):
                    bought.append(symbol)
            if not bought:
                break
            sweeps += 1
            logger.debug("Fill sweep %d bought %s", sweeps, ", ".join(bought))
