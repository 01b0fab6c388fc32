"""Loaders for importing portfolio data from external sources."""

import json
from pathlib import Path
from typing import Any

from .portfolio import Portfolio
from .schemas import PortfolioRequest


def load_portfolio_data(data: dict[str, Any]) -> Portfolio:
    """Build a Portfolio from already-decoded JSON data.

    Args:
        data: Mapping with ``target``, ``accounts``, ``market`` and the
            optional ``no_taxed_sales`` / ``no_sale_accounts`` keys.

    Returns:
        Portfolio instance. It is not validated; call ``validate()``.

    Raises:
        pydantic.ValidationError: If the data does not match the schema.
    """
    return PortfolioRequest.model_validate(data).to_portfolio()


def load_portfolio(path: str | Path) -> Portfolio:
    """Load a portfolio description from a JSON file.

    Example:
        >>> portfolio = load_portfolio("samples/two_accounts.json")
        >>> portfolio.validate() is None
        True
    """
    with open(path, encoding="utf-8") as fh:
        return load_portfolio_data(json.load(fh))
