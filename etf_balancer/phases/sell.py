"""Sell overweight positions, respecting sale restrictions."""

import logging
import math
from decimal import Decimal

from ..config import BalancerConfig
from ..ledger import Results
from ..models import Account
from ..planner import AllocationPlan
from .base import BalancePhase

logger = logging.getLogger(__name__)


class SellPhase(BalancePhase):
    """Liquidate whole shares of symbols overweight by more than one share.

    Tax-sheltered accounts are drained first. Accounts listed in
    ``no_sale_accounts`` never sell, and with ``no_taxed_sales`` set only
    tax-sheltered accounts do.
    """

    def run(self, plan: AllocationPlan, results: Results) -> None:
        threshold = -BalancerConfig.MIN_TRADE_SHARES

        for delta in plan:
            remaining = delta.shares_delta
            if remaining >= threshold:
                continue

            for account in self._sheltered_first():
                if remaining >= threshold:
                    break
                if not self._may_sell(account):
                    continue

                held = results.transact(account.name, delta.symbol, 0)
                quantity = min(math.floor(held), math.floor(-remaining))
                if quantity < BalancerConfig.MIN_TRADE_SHARES:
                    continue

                if results.buy_maybe(account.name, delta.symbol, delta.price, -quantity):
                    remaining += Decimal(quantity)

            if remaining < threshold:
                logger.info(
                    "%s stays overweight by %.2f shares", delta.symbol, -remaining
                )

    def _may_sell(self, account: Account) -> bool:
        if account.name in self.portfolio.no_sale_accounts:
            logger.debug("Skipping sales in %s: no-sale account", account.name)
            return False
        if self.portfolio.no_taxed_sales and not account.tax_sheltered:
            logger.debug("Skipping sales in %s: taxable sales disabled", account.name)
            return False
        return True
