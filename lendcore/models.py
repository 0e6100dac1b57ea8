"""Data models: reserve records are mutable, reader snapshots are frozen."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from .fixed_point import HEALTH_FACTOR_MAX, RAY, WAD

if TYPE_CHECKING:
    from .interfaces.claim_token import ClaimMinter, ClaimToken
    from .interfaces.rate_model import RateModel


@dataclass
class Reserve:
    """Per-asset accounting record, mutated only by the lending pool."""

    asset: str
    decimals: int
    claim_token: ClaimToken
    rate_model: RateModel
    minter: ClaimMinter
    last_update_timestamp: int
    supply_index: int = RAY
    borrow_index: int = RAY
    total_borrows: int = 0


@dataclass
class PoolState:
    """All mutable ledger state of one pool.

    ``reserves`` keeps insertion order, which is the scan order for account
    valuation.
    """

    reserves: dict[str, Reserve] = field(default_factory=dict)
    borrow_principal: dict[tuple[str, str], int] = field(default_factory=dict)
    uses_as_collateral: dict[tuple[str, str], bool] = field(default_factory=dict)

    def principal_of(self, user: str, asset: str) -> int:
        return self.borrow_principal.get((asset, user), 0)

    def is_collateral(self, user: str, asset: str) -> bool:
        return self.uses_as_collateral.get((user, asset), False)

    def snapshot(self) -> PoolState:
        # Reserve handles (tokens, rate models) are shared, not copied.
        return PoolState(
            reserves={k: replace(r) for k, r in self.reserves.items()},
            borrow_principal=dict(self.borrow_principal),
            uses_as_collateral=dict(self.uses_as_collateral),
        )

    def restore(self, snapshot: PoolState) -> None:
        self.reserves = {k: replace(r) for k, r in snapshot.reserves.items()}
        self.borrow_principal = dict(snapshot.borrow_principal)
        self.uses_as_collateral = dict(snapshot.uses_as_collateral)


@dataclass(frozen=True)
class RateQuote:
    """Per-second rates in ray."""

    borrow_rate: int
    supply_rate: int


@dataclass(frozen=True)
class ReserveData:
    """Read-only view of a reserve."""

    asset: str
    decimals: int
    supply_index: int
    borrow_index: int
    total_borrows: int
    available_liquidity: int
    last_update_timestamp: int
    borrow_rate: int
    supply_rate: int


@dataclass(frozen=True)
class AccountData:
    """Aggregated valuation of one user across all reserves (WAD USD)."""

    total_collateral_usd: int
    total_debt_usd: int
    health_factor: int = HEALTH_FACTOR_MAX

    @property
    def is_liquidatable(self) -> bool:
        return self.total_debt_usd > 0 and self.health_factor < WAD


@dataclass(frozen=True)
class LiquidationResult:
    """Outcome of a single liquidation."""

    borrower: str
    liquidator: str
    repay_asset: str
    collateral_asset: str
    debt_repaid: int
    collateral_seized: int
    claim_units_seized: int
    health_factor_before: int
