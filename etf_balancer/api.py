"""
HTTP API for the ETF balancer.

Exposes the balancer as ``POST /balance``: the request body is a portfolio
description, the response the resulting positions, cash and allocations.
"""
import logging

from fastapi import FastAPI, HTTPException

from . import __version__
from .balancer import run_balancing
from .schemas import PortfolioRequest, ResultsResponse

logger = logging.getLogger(__name__)

app = FastAPI(
    title="ETF Balancer",
    description="Tax-aware whole-share rebalancing across multiple accounts",
    version=__version__,
)


@app.get("/")
def root():
    """Root endpoint."""
    return {"message": "ETF Balancer", "version": __version__}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/balance", response_model=ResultsResponse)
def balance(request: PortfolioRequest) -> ResultsResponse:
    """Rebalance the submitted portfolio toward its target allocation."""
    portfolio = request.to_portfolio()

    error = portfolio.validate()
    if error:
        logger.warning("Rejected portfolio: %s", error)
        raise HTTPException(status_code=422, detail=error)

    return ResultsResponse.from_results(run_balancing(portfolio))
