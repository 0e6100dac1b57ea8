"""In-memory claim token: interest-bearing shares of one reserve."""
from __future__ import annotations

import logging

from ..errors import InsufficientBalance, MinterAlreadyBound

logger = logging.getLogger(__name__)


class _Minter:
    """Mint/burn capability handed out once by ``InMemoryClaimToken``."""

    def __init__(self, token: InMemoryClaimToken) -> None:
        self._token = token

    def mint(self, user: str, units: int) -> None:
        self._token._mint(user, units)

    def burn(self, user: str, units: int) -> None:
        self._token._burn(user, units)


class InMemoryClaimToken:
    """Share ledger for one reserve.

    Units are plain counts, unrelated to the underlying asset's decimals.
    Only the holder of the capability returned by ``bind_minter`` can change
    supply; holders may move units between themselves with ``transfer``.
    """

    def __init__(self, underlying: str, name: str = "", symbol: str = "") -> None:
        self.underlying = underlying
        self.name = name or f"Claim {underlying}"
        self._symbol = symbol or f"c{underlying}"
        self._balances: dict[str, int] = {}
        self._total_supply = 0
        self._minter: _Minter | None = None

    @property
    def symbol(self) -> str:
        return self._symbol

    def balance_of(self, user: str) -> int:
        return self._balances.get(user, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def bind_minter(self) -> _Minter:
        if self._minter is not None:
            raise MinterAlreadyBound(self._symbol)
        self._minter = _Minter(self)
        return self._minter

    def transfer(self, sender: str, to: str, units: int) -> None:
        balance = self.balance_of(sender)
        if balance < units:
            raise InsufficientBalance(self._symbol, sender, balance, units)
        self._balances[sender] = balance - units
        self._balances[to] = self.balance_of(to) + units

    def _mint(self, user: str, units: int) -> None:
        self._balances[user] = self.balance_of(user) + units
        self._total_supply += units
        logger.debug("%s: minted %d units to %s", self._symbol, units, user)

    def _burn(self, user: str, units: int) -> None:
        balance = self.balance_of(user)
        if balance < units:
            raise InsufficientBalance(self._symbol, user, balance, units)
        self._balances[user] = balance - units
        self._total_supply -= units
        logger.debug("%s: burned %d units from %s", self._symbol, units, user)

    def snapshot(self) -> tuple[dict[str, int], int]:
        return dict(self._balances), self._total_supply

    def restore(self, snapshot: tuple[dict[str, int], int]) -> None:
        balances, total = snapshot
        self._balances = dict(balances)
        self._total_supply = total
