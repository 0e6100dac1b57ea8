"""Rate model protocol: utilization to per-second rates."""
from typing import Protocol

from ..models import RateQuote


class RateModel(Protocol):
    """Pure mapping from reserve liquidity to borrow and supply rates."""

    def rates(self, available_liquidity: int, total_borrows: int) -> RateQuote: ...
