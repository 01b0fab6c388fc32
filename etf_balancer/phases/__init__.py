"""Balancing phase implementations."""

from .base import BalancePhase
from .buy import BuyPhase, Needed
from .fill import FillPhase
from .sell import SellPhase

__all__ = [
    "BalancePhase",
    "SellPhase",
    "BuyPhase",
    "FillPhase",
    "Needed",
]
