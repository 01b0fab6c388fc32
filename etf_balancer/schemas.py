"""Wire models for portfolio requests and rebalance results."""

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator

from .ledger import Results
from .models import Account, Investment
from .portfolio import Portfolio


def to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


class InvestmentSchema(BaseModel):
    """Market entry for one symbol"""
    symbol: str
    price: float = Field(gt=0)
    div_yield: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("div_yield", "dividend_yield")
    )


class AccountSchema(BaseModel):
    """Account holdings"""
    name: str
    tax_sheltered: bool = False
    cash: float = 0.0
    positions: dict[str, float] = Field(default_factory=dict)


class PortfolioRequest(BaseModel):
    """Portfolio description submitted for balancing"""
    target: dict[str, float] = Field(default_factory=dict)
    accounts: List[AccountSchema] = Field(default_factory=list)
    market: List[InvestmentSchema] = Field(default_factory=list)
    no_taxed_sales: Optional[bool] = None
    no_sale_accounts: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_account_names(self) -> "PortfolioRequest":
        names = [a.name for a in self.accounts]
        if len(names) != len(set(names)):
            raise ValueError("Account names must be unique")
        return self

    def to_portfolio(self) -> Portfolio:
        return Portfolio(
            target={s: to_decimal(w) for s, w in self.target.items()},
            accounts=[
                Account(
                    name=a.name,
                    tax_sheltered=a.tax_sheltered,
                    cash=to_decimal(a.cash),
                    positions={s: to_decimal(q) for s, q in a.positions.items()},
                )
                for a in self.accounts
            ],
            market=[
                Investment(symbol=m.symbol, price=to_decimal(m.price), div_yield=m.div_yield)
                for m in self.market
            ],
            no_taxed_sales=bool(self.no_taxed_sales),
            no_sale_accounts=self.no_sale_accounts,
        )


class TradeSchema(BaseModel):
    """Net order on one account"""
    account: str
    action: Literal["BUY", "SELL"]
    symbol: str
    shares: int
    price: float
    dollar_amount: float


class ResultsResponse(BaseModel):
    """Final positions, cash and allocation of a rebalance"""
    positions: dict[str, dict[str, float]]
    cash: dict[str, float]
    total_cash: float
    allocations: dict[str, float]
    trades: List[TradeSchema] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: Results) -> "ResultsResponse":
        return cls(
            positions={
                account: {s: float(q) for s, q in held.items()}
                for account, held in results.positions.items()
            },
            cash={account: float(c) for account, c in results.cash.items()},
            total_cash=float(results.total_cash),
            allocations={s: float(p) for s, p in results.allocations.items()},
            trades=[
                TradeSchema(
                    account=t.account,
                    action=t.action,
                    symbol=t.symbol,
                    shares=t.shares,
                    price=float(t.price),
                    dollar_amount=float(t.dollar_amount),
                )
                for t in results.trades()
            ],
        )
