"""Need-prioritized buying with tax-sheltered placement of high-yield symbols.

Needs are kept in a heap keyed by how underweight each symbol is relative to
its own target (``percentage_delta``), not by absolute dollars. One share is
bought per pop and the symbol is pushed back with its reduced need, so
purchases interleave across symbols in order of relative underweight.
"""

import heapq
import logging
from dataclasses import dataclass
from decimal import Decimal

import numpy as np

from ..ledger import Results
from ..planner import AllocationPlan
from .base import BalancePhase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Needed:
    """Outstanding dollar need for one symbol."""

    symbol: str
    cash_delta: Decimal
    percentage_delta: Decimal

    @classmethod
    def compute(
        cls,
        symbol: str,
        cash_delta: Decimal,
        target_weight: Decimal,
        total_value: Decimal,
    ) -> "Needed":
        base = target_weight * total_value
        percentage = cash_delta / base if base != 0 else Decimal("0")
        return cls(symbol=symbol, cash_delta=cash_delta, percentage_delta=percentage)

    @property
    def priority(self) -> tuple[Decimal, str]:
        """Heap key: most underweight first, then by symbol."""
        return (-self.percentage_delta, self.symbol)

    def shares(self, price: Decimal) -> Decimal:
        return self.cash_delta / price


def median_yield(yields: list[float]) -> float | None:
    """Median of the known dividend yields, or None without yield data."""
    if not yields:
        return None
    return float(np.median(np.array(yields, dtype=float)))


class BuyPhase(BalancePhase):
    """Spend cash on underweight symbols, one share at a time."""

    def run(self, plan: AllocationPlan, results: Results) -> None:
        threshold = median_yield(
            [inv.div_yield for inv in self.portfolio.market if inv.div_yield is not None]
        )
        yields = {inv.symbol: inv.div_yield or 0.0 for inv in self.portfolio.market}

        queue: list[tuple[tuple[Decimal, str], Needed]] = []
        for delta in plan:
            needed = Needed.compute(
                delta.symbol, delta.cash_delta, delta.target_weight, plan.total_value
            )
            heapq.heappush(queue, (needed.priority, needed))

        while queue:
            _, needed = heapq.heappop(queue)
            delta = plan[needed.symbol]
            if needed.shares(delta.price) <= 0:
                continue

            high_yield = threshold is not None and yields.get(needed.symbol, 0.0) > threshold
            if not self._buy(needed.symbol, high_yield, results):
                logger.debug(
                    "No account can afford %s; unmet need $%.2f",
                    needed.symbol, needed.cash_delta,
                )
                continue

            remaining = needed.cash_delta - delta.price
            if remaining > 0:
                again = Needed.compute(
                    needed.symbol, remaining, delta.target_weight, plan.total_value
                )
                heapq.heappush(queue, (again.priority, again))

    def _buy(self, symbol: str, high_yield: bool, results: Results) -> bool:
        sheltered = [a for a in self.portfolio.accounts if a.tax_sheltered]
        if high_yield and self._buy_one(sheltered, symbol, results):
            return True

        # Sheltered accounts were already tried for high-yield symbols
        candidates = [a for a in self._taxable_first()
                      if not (high_yield and a.tax_sheltered)]
        return self._buy_one(candidates, symbol, results)
