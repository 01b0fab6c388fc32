"""Mutable results ledger shared by the balancing phases."""

import logging
from decimal import Decimal
from typing import Iterable

from .config import BalancerConfig
from .models import Account, Trade

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class Results:
    """Per-account positions and cash produced by a rebalance.

    Every trade goes through ``buy_maybe``, which refuses anything that would
    leave the account with negative cash. ``allocations`` and ``total_cash``
    are only filled in by ``calculate_percentages``.
    """

    def __init__(self) -> None:
        self.positions: dict[str, dict[str, Decimal]] = {}
        self.cash: dict[str, Decimal] = {}
        self.allocations: dict[str, Decimal] = {}
        self.total_cash: Decimal = ZERO
        self._book: dict[tuple[str, str], int] = {}
        self._trade_prices: dict[str, Decimal] = {}

    @classmethod
    def from_accounts(cls, accounts: Iterable[Account]) -> "Results":
        """Seed a ledger with copies of each account's cash and positions."""
        results = cls()
        for account in accounts:
            results.positions[account.name] = dict(account.positions)
            results.cash[account.name] = account.cash
        return results

    def buy_maybe(
        self, account: str, symbol: str, price: Decimal, shares: int
    ) -> bool:
        """Buy (or sell, for negative ``shares``) if the account can afford it.

        Returns True when the trade was committed. Nothing changes otherwise.
        """
        cost = price * shares
        available = self.cash.get(account, ZERO)
        if cost > available:
            return False

        self.cash[account] = available - cost
        self.transact(account, symbol, shares)

        key = (account, symbol)
        self._book[key] = self._book.get(key, 0) + shares
        self._trade_prices[symbol] = price
        logger.debug(
            "%s %d %s in %s @ %s", "BUY" if shares > 0 else "SELL",
            abs(shares), symbol, account, price,
        )
        return True

    def transact(self, account: str, symbol: str, shares: int | Decimal) -> Decimal:
        """Change a position without touching cash; returns the new count.

        Positions are clamped at zero. Pass ``shares=0`` to read a position.
        """
        held = self.positions.setdefault(account, {})
        current = held.get(symbol, ZERO)
        if not shares:
            return current

        updated = max(ZERO, current + shares)
        held[symbol] = updated
        return updated

    def trades(self) -> list[Trade]:
        """Net orders per account and symbol, in account then symbol order."""
        orders: list[Trade] = []
        for account in self.positions:
            for (acct, symbol), shares in sorted(self._book.items()):
                if acct != account or shares == 0:
                    continue
                orders.append(
                    Trade(
                        account=account,
                        action="BUY" if shares > 0 else "SELL",
                        symbol=symbol,
                        shares=abs(shares),
                        price=self._trade_prices[symbol],
                    )
                )
        return orders

    def total_value(self, prices: dict[str, Decimal]) -> Decimal:
        return sum(self.cash.values(), start=ZERO) + sum(
            self._market_values(prices).values(), start=ZERO
        )

    def calculate_percentages(self, prices: dict[str, Decimal]) -> None:
        """Fill ``total_cash`` and ``allocations`` from the final state.

        Allocations are fractions of the grand total, with the combined cash
        under the ``"cash"`` key. A zero grand total leaves them empty.
        """
        self.total_cash = sum(self.cash.values(), start=ZERO)
        values = self._market_values(prices)

        grand_total = self.total_cash + sum(values.values(), start=ZERO)
        if grand_total == 0:
            self.allocations = {}
            return

        self.allocations = {
            symbol: value / grand_total for symbol, value in values.items()
        }
        self.allocations[BalancerConfig.CASH_KEY] = self.total_cash / grand_total

    def _market_values(self, prices: dict[str, Decimal]) -> dict[str, Decimal]:
        values: dict[str, Decimal] = {}
        for held in self.positions.values():
            for symbol, shares in held.items():
                if symbol not in prices:
                    raise ValueError(f"No price for held symbol {symbol}")
                values[symbol] = values.get(symbol, ZERO) + shares * prices[symbol]
        return dict(sorted(values.items()))

    def __repr__(self) -> str:
        return (
            f"Results(positions={self.positions}, cash={self.cash}, "
            f"total_cash={self.total_cash}, allocations={self.allocations})"
        )
