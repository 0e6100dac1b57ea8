"""Underlying asset protocol: fungible asset movement."""
from typing import Protocol


class UnderlyingAsset(Protocol):
    """Abstract interface for the asset a reserve lends out.

    Failures (insufficient balance or allowance) must raise; the pool lets
    them propagate and rolls the whole operation back.
    """

    @property
    def address(self) -> str: ...

    @property
    def decimals(self) -> int: ...

    def balance_of(self, holder: str) -> int: ...

    def transfer(self, sender: str, to: str, amount: int) -> None: ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None: ...
