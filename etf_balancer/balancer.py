"""Rebalance entry point: plan, sell, buy, fill, report."""

import logging

from .ledger import Results
from .phases import BuyPhase, FillPhase, SellPhase
from .planner import plan_allocation
from .portfolio import Portfolio

logger = logging.getLogger(__name__)


def run_balancing(portfolio: Portfolio) -> Results:
    """Compute per-account trades that move ``portfolio`` toward its target.

    The portfolio is not modified. Input is assumed to have passed
    ``Portfolio.validate()``; a missing price raises ``ValueError``.

    Returns:
        A Results ledger with final positions, cash and allocation percentages.
    """
    plan = plan_allocation(portfolio)
    results = Results.from_accounts(portfolio.accounts)

    logger.info(
        "Rebalancing %d accounts, %d symbols, total value $%.2f",
        len(portfolio.accounts), len(plan.deltas), plan.total_value,
    )

    for phase in (SellPhase(portfolio), BuyPhase(portfolio), FillPhase(portfolio)):
        phase.run(plan, results)
        logger.debug("%s done: cash=%s", type(phase).__name__, results.cash)

    results.calculate_percentages(portfolio.price_lookup())
    logger.info(
        "Rebalance complete: %d trades, $%.2f uninvested",
        len(results.trades()), results.total_cash,
    )
    return results
