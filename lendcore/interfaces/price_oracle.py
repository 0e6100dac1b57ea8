"""Price oracle protocols: price feed abstraction."""
from typing import Protocol


class PriceFeed(Protocol):
    """A single upstream price source reporting in its own decimals."""

    @property
    def decimals(self) -> int: ...

    def latest_answer(self) -> int: ...


class PriceOracle(Protocol):
    """Abstract interface for USD prices normalised to 18 decimals."""

    def get_price(self, asset: str) -> int: ...
