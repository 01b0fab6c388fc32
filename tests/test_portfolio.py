import pytest
from decimal import Decimal

from etf_balancer.models import Account, Investment, Trade
from etf_balancer.portfolio import Portfolio


class TestAccount:
    def test_value_empty(self):
        account = Account("a")
        assert account.value([]) == Decimal("0")

    def test_value_cash_only(self):
        account = Account("a", cash=Decimal("1"))
        assert account.value([]) == Decimal("1")

    def test_value_ignores_unpriced_positions(self):
        market = [Investment("VEU", Decimal("10")), Investment("BD", Decimal("100"))]
        account = Account(
            "a",
            cash=Decimal("1"),
            positions={"VEU": Decimal("3"), "BD": Decimal("1"), "NO-PRICE": Decimal("5")},
        )
        assert account.value(market) == Decimal("131")

    def test_shares_of_missing_symbol(self):
        assert Account("a").shares_of("VTI") == Decimal("0")


class TestTrade:
    def test_dollar_amount(self):
        trade = Trade("ira", "BUY", "VTI", 3, Decimal("200.50"))
        assert trade.dollar_amount == Decimal("601.50")

    def test_str_representation(self):
        trade = Trade("ira", "SELL", "BND", 5, Decimal("72"))
        text = str(trade)
        assert "ira" in text
        assert "SELL" in text
        assert "5 BND" in text
        assert "$360.00" in text


class TestPortfolio:
    def test_add_account(self):
        portfolio = Portfolio()
        portfolio.add_account(Account("ira", tax_sheltered=True))
        assert [a.name for a in portfolio.accounts] == ["ira"]

    def test_add_duplicate_account(self):
        portfolio = Portfolio(accounts=[Account("ira")])
        with pytest.raises(ValueError, match="Duplicate account"):
            portfolio.add_account(Account("ira"))

    def test_duplicate_accounts_in_constructor(self):
        with pytest.raises(ValueError, match="Duplicate account name: x"):
            Portfolio(accounts=[Account("x"), Account("x", cash=Decimal("5"))])

    def test_add_investment_replaces_price(self):
        portfolio = Portfolio()
        portfolio.add_investment(Investment("VTI", Decimal("200")))
        portfolio.add_investment(Investment("VTI", Decimal("210")))
        assert portfolio.price_lookup() == {"VTI": Decimal("210")}

    def test_price_of_missing_symbol(self):
        portfolio = Portfolio()
        with pytest.raises(ValueError, match="No market price for VTI"):
            portfolio.price_of("VTI")

    def test_total_value_across_accounts(self):
        portfolio = Portfolio(
            accounts=[
                Account("a", cash=Decimal("50"), positions={"A": Decimal("2")}),
                Account("b", cash=Decimal("-20"), positions={"A": Decimal("1")}),
            ],
            market=[Investment("A", Decimal("10"))],
        )
        assert portfolio.total_value() == Decimal("60")

    def test_held_symbols(self):
        portfolio = Portfolio(
            accounts=[
                Account("a", positions={"A": Decimal("2")}),
                Account("b", positions={"B": Decimal("1"), "A": Decimal("0")}),
            ]
        )
        assert portfolio.held_symbols() == {"A", "B"}

    def test_no_sale_accounts_is_a_set(self):
        portfolio = Portfolio(no_sale_accounts=["ira", "ira"])
        assert portfolio.no_sale_accounts == {"ira"}


class TestTargetAllocation:
    def test_valid_allocation(self):
        portfolio = Portfolio()
        allocation = {"AAPL": Decimal("0.6"), "META": Decimal("0.4")}
        portfolio.set_target_allocation(allocation)
        assert portfolio.target == allocation

    def test_allocation_is_copied(self):
        allocation = {"AAPL": Decimal("1")}
        portfolio = Portfolio(target=allocation)
        allocation["META"] = Decimal("0")
        assert "META" not in portfolio.target

    def test_allocation_negative_percentage(self):
        portfolio = Portfolio()
        with pytest.raises(ValueError, match="between 0 and 1"):
            portfolio.set_target_allocation({
                "AAPL": Decimal("-0.1"),
                "META": Decimal("1.1")
            })

    def test_allocation_over_100_percent(self):
        portfolio = Portfolio()
        with pytest.raises(ValueError, match="between 0 and 1"):
            portfolio.set_target_allocation({"AAPL": Decimal("1.5")})


class TestValidate:
    def test_empty_portfolio_fails_sum(self):
        portfolio = Portfolio()
        assert portfolio.validate() == "Allocations must add up to 1.0"

    def test_sum_within_tolerance(self):
        portfolio = Portfolio(
            target={"A": Decimal("0.6"), "B": Decimal("0.405")},
            market=[Investment("A", Decimal("1")), Investment("B", Decimal("1"))],
        )
        assert portfolio.validate() is None

    def test_single_weight_over_one(self):
        portfolio = Portfolio(
            target={"A": Decimal("1.2")},
            market=[Investment("A", Decimal("1"))],
        )
        assert portfolio.validate() == "Allocations must add up to 1.0"

    def test_negative_weight_summing_to_one(self):
        portfolio = Portfolio(
            target={"A": Decimal("1.5"), "B": Decimal("-0.5")},
            market=[Investment("A", Decimal("1")), Investment("B", Decimal("1"))],
        )
        assert portfolio.validate() == "Allocations must add up to 1.0"

    def test_sum_outside_tolerance(self):
        portfolio = Portfolio(
            target={"A": Decimal("0.5"), "B": Decimal("0.48")},
            market=[Investment("A", Decimal("1")), Investment("B", Decimal("1"))],
        )
        assert portfolio.validate() == "Allocations must add up to 1.0"

    def test_missing_price_for_target(self):
        portfolio = Portfolio(
            target={"A": Decimal("0.5"), "B": Decimal("0.5")},
            market=[Investment("A", Decimal("1"))],
        )
        assert portfolio.validate() == "Missing prices for some investments"

    def test_missing_price_for_held_symbol(self):
        portfolio = Portfolio(
            target={"A": Decimal("1")},
            accounts=[Account("a", positions={"OLD": Decimal("3")})],
            market=[Investment("A", Decimal("1"))],
        )
        assert portfolio.validate() == "Missing prices for some investments"

    def test_sum_checked_before_prices(self):
        portfolio = Portfolio(target={"A": Decimal("0.5")})
        assert portfolio.validate() == "Allocations must add up to 1.0"

    def test_valid(self):
        portfolio = Portfolio(
            target={"A": Decimal("0.5"), "B": Decimal("0.5")},
            accounts=[Account("a", positions={"A": Decimal("3")})],
            market=[Investment("A", Decimal("1")), Investment("B", Decimal("2"))],
        )
        assert portfolio.validate() is None
