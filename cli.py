#!/usr/bin/env python3
import argparse
import logging
import os
import sys
from decimal import Decimal

from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from etf_balancer import Portfolio, Results, Trade, load_portfolio, run_balancing
from etf_balancer.config import BalancerConfig, ServerConfig

logger = logging.getLogger(__name__)
console = Console()

# Thresholds and defaults
DRIFT_THRESHOLD = Decimal("0.02")


def _drift_color(drift: Decimal) -> str:
    """Return color based on drift magnitude and direction."""
    if abs(drift) < DRIFT_THRESHOLD:
        return "green"
    return "red" if drift > 0 else "blue"


def holdings_table(
    title: str,
    positions: dict[str, dict[str, Decimal]],
    cash: dict[str, Decimal],
    prices: dict[str, Decimal],
) -> Table:
    """Build a Rich table showing holdings and cash per account."""
    t = Table(title=title, box=box.ROUNDED, title_style="bold white")
    t.add_column("Account", style="magenta")
    t.add_column("ETF", style="cyan")
    t.add_column("Shares", justify="right")
    t.add_column("Price", justify="right")
    t.add_column("Value", justify="right")

    total = Decimal(0)
    for account, held in positions.items():
        for sym, qty in sorted(held.items()):
            if qty == 0:
                continue
            value = qty * prices[sym]
            total += value
            t.add_row(account, sym, f"{qty:,.0f}", f"${prices[sym]:,.2f}", f"${value:,.2f}")
        total += cash[account]
        t.add_row(account, "[dim]cash[/dim]", "", "", f"[dim]${cash[account]:,.2f}[/dim]")

    t.add_section()
    t.add_row("", "", "", "Total", f"[bold]${total:,.2f}[/bold]")
    return t


def trades_table(trades: list[Trade]) -> Table:
    """Build a Rich table showing the net trades per account."""
    t = Table(title="Trades", box=box.ROUNDED, title_style="bold white")
    t.add_column("Account", style="magenta")
    t.add_column("Action", no_wrap=True)
    t.add_column("ETF", style="cyan")
    t.add_column("Shares", justify="right")
    t.add_column("Amount", justify="right")

    buy_total = sell_total = Decimal(0)
    for o in trades:
        style = "green" if o.action == "BUY" else "red"
        if o.action == "BUY":
            buy_total += o.dollar_amount
        else:
            sell_total += o.dollar_amount
        t.add_row(
            o.account,
            Text(o.action, style=f"bold {style}"),
            o.symbol,
            str(o.shares),
            f"${o.dollar_amount:,.2f}",
        )

    t.add_section()
    t.add_row(
        "",
        "",
        "[bold]Total[/bold]",
        "",
        f"[green]+${buy_total:,.2f}[/green]  [red]-${sell_total:,.2f}[/red]",
    )
    return t


def allocation_table(portfolio: Portfolio, results: Results) -> Table:
    """Build a Rich table comparing final allocation with the target."""
    t = Table(title="Allocation", box=box.ROUNDED, title_style="bold white")
    t.add_column("ETF", style="cyan")
    t.add_column("Alloc", justify="right", style="yellow")
    t.add_column("Target", justify="right", style="green")
    t.add_column("Drift", justify="right")

    for sym, cur in results.allocations.items():
        if sym == BalancerConfig.CASH_KEY:
            continue
        tgt = portfolio.target.get(sym, Decimal(0))
        drift = cur - tgt
        t.add_row(
            sym,
            f"{float(cur):.1%}",
            f"{float(tgt):.1%}",
            Text(f"{float(drift):+.1%}", style=_drift_color(drift)),
        )

    cash_pct = results.allocations.get(BalancerConfig.CASH_KEY, Decimal(0))
    t.add_section()
    t.add_row(
        "[dim]cash[/dim]",
        f"{float(cash_pct):.1%}",
        "",
        f"[yellow]${results.total_cash:,.2f}[/yellow]",
    )
    return t


def display_rebalance_results(portfolio: Portfolio, results: Results) -> None:
    """Display trades and resulting holdings."""
    prices = portfolio.price_lookup()
    trades = results.trades()

    if not trades:
        console.print("[green]  Already balanced — no trades needed.[/green]")
    else:
        console.print(trades_table(trades))

    console.print()
    console.print(holdings_table("After rebalancing", results.positions, results.cash, prices))
    console.print()
    console.print(allocation_table(portfolio, results))


def configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.getenv(ServerConfig.LOG_LEVEL_ENV, "WARNING")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def serve(host: str, port: int) -> None:
    import uvicorn

    uvicorn.run("etf_balancer.api:app", host=host, port=port)


def rebalance_file(path: str) -> int:
    try:
        portfolio = load_portfolio(path)
    except ValidationError as e:
        console.print(f"[bold red]Invalid portfolio file {path}:[/bold red]")
        console.print(str(e), markup=False)
        return 1

    error = portfolio.validate()
    if error:
        console.print(f"[bold red]{error}[/bold red]")
        return 1

    console.print(
        holdings_table(
            "Before rebalancing",
            {a.name: a.positions for a in portfolio.accounts},
            {a.name: a.cash for a in portfolio.accounts},
            portfolio.price_lookup(),
        )
    )
    console.print()

    display_rebalance_results(portfolio, run_balancing(portfolio))
    return 0


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tax-aware ETF portfolio balancer")
    parser.add_argument("portfolio", nargs="?", help="portfolio JSON file to rebalance")
    parser.add_argument("--serve", action="store_true", help="run the HTTP API")
    parser.add_argument("--host", default=ServerConfig.HOST)
    parser.add_argument("--port", type=int, default=ServerConfig.PORT)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    args = parser.parse_args(argv)
    if not args.serve and not args.portfolio:
        parser.error("a portfolio file is required unless --serve is given")
    return args


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI application."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.serve:
        serve(args.host, args.port)
        return 0

    console.print()
    console.print(Panel("[bold]ETF Balancer[/bold] · tax-aware rebalance", box=box.DOUBLE))
    console.print()
    return rebalance_file(args.portfolio)


if __name__ == "__main__":
    sys.exit(main())
