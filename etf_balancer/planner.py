"""Per-symbol deltas between the target allocation and current holdings."""

from dataclasses import dataclass, field
from decimal import Decimal

from .portfolio import Portfolio


@dataclass(frozen=True)
class SymbolDelta:
    """How far one symbol is from its target, in dollars and in shares."""

    symbol: str
    price: Decimal
    target_weight: Decimal
    allocation: Decimal
    total_shares: Decimal
    cash_delta: Decimal

    @property
    def shares_delta(self) -> Decimal:
        return self.cash_delta / self.price


@dataclass(frozen=True)
class AllocationPlan:
    """Deltas for every targeted or held symbol, sorted by symbol."""

    total_value: Decimal
    deltas: dict[str, SymbolDelta] = field(default_factory=dict)

    def __iter__(self):
        return iter(self.deltas.values())

    def __getitem__(self, symbol: str) -> SymbolDelta:
        return self.deltas[symbol]


def plan_allocation(portfolio: Portfolio) -> AllocationPlan:
    """Compute target dollar allocation and cash/share deltas per symbol.

    Symbols that are held but not targeted get a target weight of zero, so
    their whole position shows up as a negative delta.

    Raises:
        ValueError: If a targeted or held symbol has no market price.
    """
    total_value = portfolio.total_value()
    deltas: dict[str, SymbolDelta] = {}

    for symbol in sorted(set(portfolio.target) | portfolio.held_symbols()):
        price = portfolio.price_of(symbol)
        weight = portfolio.target.get(symbol, Decimal("0"))
        allocation = weight * total_value
        total_shares = sum(
            (account.shares_of(symbol) for account in portfolio.accounts),
            start=Decimal("0"),
        )

        deltas[symbol] = SymbolDelta(
            symbol=symbol,
            price=price,
            target_weight=weight,
            allocation=allocation,
            total_shares=total_shares,
            cash_delta=allocation - total_shares * price,
        )

    return AllocationPlan(total_value=total_value, deltas=deltas)
