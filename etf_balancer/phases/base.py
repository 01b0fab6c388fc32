"""Abstract base class for balancing phases."""

from abc import ABC, abstractmethod

from ..ledger import Results
from ..models import Account
from ..planner import AllocationPlan
from ..portfolio import Portfolio


class BalancePhase(ABC):
    """One step of a rebalance that trades through the results ledger."""

    def __init__(self, portfolio: Portfolio) -> None:
        self.portfolio = portfolio

    @abstractmethod
    def run(self, plan: AllocationPlan, results: Results) -> None:
        """Apply this phase's trades to ``results``.

        Args:
            plan: Deltas computed from the starting portfolio.
            results: Ledger owned by the current rebalance.
        """
        pass

    def _sheltered_first(self) -> list[Account]:
        """Accounts with tax-sheltered ones first, portfolio order otherwise."""
        return sorted(self.portfolio.accounts, key=lambda a: not a.tax_sheltered)

    def _taxable_first(self) -> list[Account]:
        return sorted(self.portfolio.accounts, key=lambda a: a.tax_sheltered)

    def _buy_one(self, accounts: list[Account], symbol: str, results: Results) -> bool:
        """Buy a single share in the first account that can afford it."""
        price = self.portfolio.price_of(symbol)
        return any(results.buy_maybe(a.name, symbol, price, 1) for a in accounts)
