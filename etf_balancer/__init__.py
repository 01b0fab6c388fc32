"""
ETF Balancer - Tax-aware, whole-share rebalancing across multiple accounts.

Exports:
    Investment: Dataclass with a symbol's price and optional dividend yield
    Account: Dataclass with an account's cash, positions and tax treatment
    Trade: Dataclass representing a net buy/sell order on one account
    Portfolio: Accounts, market snapshot and target allocation
    Results: Ledger of final positions, cash and allocation percentages
    run_balancing: Rebalance a validated Portfolio into a Results ledger
    load_portfolio: Load a Portfolio from a JSON file
"""

__version__ = "1.0.0"

from .models import Account, Investment, Trade
from .ledger import Results
from .portfolio import Portfolio
from .balancer import run_balancing
from .loaders import load_portfolio

__all__ = [
    "Account",
    "Investment",
    "Trade",
    "Portfolio",
    "Results",
    "run_balancing",
    "load_portfolio",
    "__version__",
]
