"""Data models for the ETF balancer."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal, Optional


@dataclass(frozen=True)
class Investment:
    """Market entry for one symbol: price and optional dividend yield."""

    symbol: str
    price: Decimal
    div_yield: Optional[float] = None


@dataclass
class Account:
    """A brokerage account with cash and share positions."""

    name: str
    tax_sheltered: bool = False
    cash: Decimal = Decimal("0")
    positions: dict[str, Decimal] = field(default_factory=dict)

    def value(self, market: list[Investment]) -> Decimal:
        """Cash plus market value of positions. Unpriced symbols count as zero."""
        prices = {inv.symbol: inv.price for inv in market}
        return self.cash + sum(
            (shares * prices[symbol]
             for symbol, shares in self.positions.items()
             if symbol in prices),
            start=Decimal("0"),
        )

    def shares_of(self, symbol: str) -> Decimal:
        return self.positions.get(symbol, Decimal("0"))


@dataclass(frozen=True)
class Trade:
    """Net order placed on one account for one symbol."""

    account: str
    action: Literal["BUY", "SELL"]
    symbol: str
    shares: int
    price: Decimal

    @property
    def dollar_amount(self) -> Decimal:
        return Decimal(self.shares) * self.price

    def __str__(self) -> str:
        return (
            f"{self.account}: {self.action} {self.shares} {self.symbol} "
            f"@ ${self.price:.2f} (${self.dollar_amount:.2f})"
        )
