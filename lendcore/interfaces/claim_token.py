"""Claim token protocols: interest-bearing share ledger."""
from typing import Protocol


class ClaimMinter(Protocol):
    """Mint/burn capability, issued once to the pool that owns the reserve."""

    def mint(self, user: str, units: int) -> None: ...

    def burn(self, user: str, units: int) -> None: ...


class ClaimToken(Protocol):
    """Abstract interface for the per-reserve claim token."""

    @property
    def symbol(self) -> str: ...

    def balance_of(self, user: str) -> int: ...

    def total_supply(self) -> int: ...

    def bind_minter(self) -> ClaimMinter: ...
