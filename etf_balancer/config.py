"""Configuration constants for the ETF balancer."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ValidationMessage(Enum):
    """Fixed diagnostics returned by portfolio pre-flight validation."""

    ALLOCATION_SUM = "Allocations must add up to 1.0"
    MISSING_PRICES = "Missing prices for some investments"


@dataclass(frozen=True)
class BalancerConfig:
    """Tolerances and keys used by the balancing algorithm."""

    ALLOCATION_SUM_TOLERANCE: Decimal = Decimal("0.01")
    MIN_TRADE_SHARES: int = 1
    CASH_KEY: str = "cash"


@dataclass(frozen=True)
class ServerConfig:
    """Defaults for the HTTP service."""

    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL_ENV: str = "LOG_LEVEL"
