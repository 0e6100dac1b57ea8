"""In-memory fungible asset with balances and allowances."""
from __future__ import annotations

import logging

from ..errors import InsufficientAllowance, InsufficientBalance, ZeroAmount

logger = logging.getLogger(__name__)


class InMemoryAsset:
    """Fungible asset ledger with ERC20-style approve/transfer_from.

    ``mint`` is an unrestricted faucet for tests and demos.
    """

    def __init__(self, address: str, symbol: str = "", decimals: int = 18) -> None:
        self._address = address
        self.symbol = symbol or address
        self._decimals = decimals
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    @property
    def address(self) -> str:
        return self._address

    @property
    def decimals(self) -> int:
        return self._decimals

    def balance_of(self, holder: str) -> int:
        return self._balances.get(holder, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, to: str, amount: int) -> None:
        if amount <= 0:
            raise ZeroAmount()
        self._balances[to] = self.balance_of(to) + amount
        logger.debug("%s: minted %d to %s", self.symbol, amount, to)

    def approve(self, owner: str, spender: str, amount: int) -> None:
        self._allowances[(owner, spender)] = amount

    def transfer(self, sender: str, to: str, amount: int) -> None:
        self._move(sender, to, amount)

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> None:
        allowed = self.allowance(owner, spender)
        if allowed < amount:
            raise InsufficientAllowance(self.symbol, owner, spender, allowed, amount)
        self._move(owner, to, amount)
        self._allowances[(owner, spender)] = allowed - amount

    def _move(self, sender: str, to: str, amount: int) -> None:
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance(self.symbol, sender, balance, amount)
        self._balances[sender] = balance - amount
        self._balances[to] = self.balance_of(to) + amount

    def snapshot(self) -> tuple[dict[str, int], dict[tuple[str, str], int]]:
        return dict(self._balances), dict(self._allowances)

    def restore(self, snapshot: tuple[dict[str, int], dict[tuple[str, str], int]]) -> None:
        balances, allowances = snapshot
        self._balances = dict(balances)
        self._allowances = dict(allowances)
