from decimal import Decimal
from typing import Iterable, Optional

from .config import BalancerConfig, ValidationMessage
from .ledger import Results
from .models import Account, Investment


class Portfolio:
    """Accounts, market snapshot and target allocation for one rebalance."""

    def __init__(
        self,
        target: Optional[dict[str, Decimal]] = None,
        accounts: Optional[Iterable[Account]] = None,
        market: Optional[Iterable[Investment]] = None,
        no_taxed_sales: bool = False,
        no_sale_accounts: Optional[Iterable[str]] = None,
    ) -> None:
        self.target: dict[str, Decimal] = dict(target or {})
        self.accounts: list[Account] = []
        self.market: list[Investment] = list(market or [])
        self.no_taxed_sales = no_taxed_sales
        self.no_sale_accounts: set[str] = set(no_sale_accounts or ())
        for account in accounts or []:
            self.add_account(account)

    def add_account(self, account: Account) -> None:
        if any(a.name == account.name for a in self.accounts):
            raise ValueError(f"Duplicate account name: {account.name}")
        self.accounts.append(account)

    def add_investment(self, investment: Investment) -> None:
        self.market = [i for i in self.market if i.symbol != investment.symbol]
        self.market.append(investment)

    def set_target_allocation(self, allocation: dict[str, Decimal]) -> None:
        for symbol, pct in allocation.items():
            if pct < 0 or pct > 1:
                raise ValueError(
                    f"Allocation for {symbol} must be between 0 and 1, got {pct}"
                )

        self.target = allocation.copy()

    def price_lookup(self) -> dict[str, Decimal]:
        return {inv.symbol: inv.price for inv in self.market}

    def price_of(self, symbol: str) -> Decimal:
        for inv in self.market:
            if inv.symbol == symbol:
                return inv.price
        raise ValueError(f"No market price for {symbol}; validate() the portfolio first")

    def held_symbols(self) -> set[str]:
        return {symbol for account in self.accounts for symbol in account.positions}

    def total_value(self) -> Decimal:
        return sum(
            (account.value(self.market) for account in self.accounts),
            start=Decimal("0"),
        )

    def validate(self) -> Optional[str]:
        """Pre-flight check. Returns a diagnostic message, or None if valid."""
        total = sum(self.target.values(), start=Decimal("0"))
        out_of_range = any(pct < 0 or pct > 1 for pct in self.target.values())
        if out_of_range or abs(total - Decimal("1")) > BalancerConfig.ALLOCATION_SUM_TOLERANCE:
            return ValidationMessage.ALLOCATION_SUM.value

        prices = self.price_lookup()
        if any(s not in prices for s in set(self.target) | self.held_symbols()):
            return ValidationMessage.MISSING_PRICES.value

        return None

    def rebalance(self) -> Results:
        """Run the balancer on this portfolio. Call validate() first."""
        from .balancer import run_balancing

        return run_balancing(self)

    def __repr__(self) -> str:
        return (
            f"Portfolio(accounts={[a.name for a in self.accounts]}, "
            f"total_value={self.total_value()}, "
            f"target={self.target})"
        )
