"""Lending pool: deposit, withdraw, borrow, repay and liquidate."""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from ..config import AppConfig
from ..errors import (
    BorrowerNotUnderLiquidationThreshold,
    BorrowExceedsCollateralLimits,
    HealthFactorTooLow,
    InsufficientClaimBalance,
    NoCollateralAvailable,
    NoCollateralToSeize,
    NoDebtToLiquidate,
    ReserveAlreadyInitialized,
    ReserveNotFound,
    Unauthorized,
    ZeroAmount,
)
from ..fixed_point import RAY, WAD, mul_div, to_wad, wad_mul
from ..interfaces.asset import UnderlyingAsset
from ..interfaces.claim_token import ClaimToken
from ..interfaces.price_oracle import PriceOracle
from ..interfaces.rate_model import RateModel
from ..models import AccountData, LiquidationResult, PoolState, Reserve, ReserveData
from . import accrual
from .risk import AccountRisk
from .transaction import Transaction

logger = logging.getLogger(__name__)


def _wall_clock() -> int:
    return int(time.time())


def _require_amount(amount: int) -> None:
    if amount <= 0:
        raise ZeroAmount()


class LendingPool:
    """Settlement engine and sole mutator of reserve and position state.

    Every mutating call runs under the pool lock inside a ``Transaction``:
    touched reserves are accrued first, and any failure restores the pool
    state and the journaled token ledgers. Callers identify themselves
    explicitly (``user``, ``liquidator``).
    """

    def __init__(
        self,
        oracle: PriceOracle,
        *,
        address: str = "lending-pool",
        owner: str = "deployer",
        liquidation_threshold: int = to_wad("0.80"),
        liquidation_bonus: int = to_wad("0.05"),
        close_factor: int = to_wad("0.50"),
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.address = address
        self.owner = owner
        self.liquidation_threshold = liquidation_threshold
        self.liquidation_bonus = liquidation_bonus
        self.close_factor = close_factor
        self._oracle = oracle
        self._clock = clock or _wall_clock
        self._state = PoolState()
        self._assets: dict[str, UnderlyingAsset] = {}
        self._risk = AccountRisk(self._state, oracle, liquidation_threshold)
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        oracle: PriceOracle,
        clock: Callable[[], int] | None = None,
    ) -> LendingPool:
        return cls(
            oracle,
            address=config.pool.address,
            owner=config.pool.owner,
            liquidation_threshold=to_wad(config.risk.liquidation_threshold),
            liquidation_bonus=to_wad(config.risk.liquidation_bonus),
            close_factor=to_wad(config.risk.close_factor),
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _now(self) -> int:
        return int(self._clock())

    def _reserve(self, asset: str) -> Reserve:
        reserve = self._state.reserves.get(asset)
        if reserve is None:
            raise ReserveNotFound(asset)
        return reserve

    def _accrue(self, reserve: Reserve, now: int) -> bool:
        on_hand = self._assets[reserve.asset].balance_of(self.address)
        liquidity = accrual.available_liquidity(on_hand, reserve.total_borrows)
        return accrual.accrue(reserve, now, liquidity)

    @contextmanager
    def _operation(self, name: str, *assets: str) -> Iterator[tuple[Reserve, ...]]:
        """Lock, open a transaction and accrue every reserve in ``assets``."""
        with self._lock:
            for asset in assets:
                self._reserve(asset)
            participants: list[object] = [self._state]
            for asset in assets:
                participants.append(self._state.reserves[asset].claim_token)
                participants.append(self._assets[asset])
            with Transaction(participants, name=name):
                now = self._now()
                # Look reserves up inside the transaction: a rollback replaces
                # the Reserve objects held by the state.
                reserves = tuple(self._state.reserves[a] for a in assets)
                for reserve in reserves:
                    self._accrue(reserve, now)
                yield reserves

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def init_reserve(
        self,
        asset: UnderlyingAsset,
        claim_token: ClaimToken,
        rate_model: RateModel,
        caller: str | None = None,
    ) -> None:
        """Create the reserve for ``asset``; allowed once per asset, owner only."""
        caller = self.owner if caller is None else caller
        with self._lock:
            if asset.address in self._state.reserves:
                raise ReserveAlreadyInitialized(asset.address)
            if caller != self.owner:
                raise Unauthorized(caller, "initialize reserves")
            now = self._now()
            minter = claim_token.bind_minter()
            self._state.reserves[asset.address] = Reserve(
                asset=asset.address,
                decimals=asset.decimals,
                claim_token=claim_token,
                rate_model=rate_model,
                minter=minter,
                last_update_timestamp=now,
            )
            self._assets[asset.address] = asset
        logger.info(
            "Reserve initialized: %s (claim token %s, %d decimals)",
            asset.address, claim_token.symbol, asset.decimals,
        )

    def set_use_as_collateral(self, user: str, asset: str, enabled: bool) -> None:
        with self._lock:
            self._state.uses_as_collateral[(user, asset)] = bool(enabled)
        logger.info("Collateral %s for %s on %s", "enabled" if enabled else "disabled", user, asset)

    def accrue(self, asset: str, now: int | None = None) -> bool:
        """Bring ``asset`` indices up to ``now`` (default: the pool clock)."""
        with self._lock:
            reserve = self._reserve(asset)
            return self._accrue(reserve, self._now() if now is None else now)

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------

    def deposit(self, user: str, asset: str, amount: int) -> int:
        """Supply ``amount`` of ``asset``; returns the claim units minted."""
        self._reserve(asset)
        _require_amount(amount)
        with self._operation("deposit", asset) as (reserve,):
            units = mul_div(amount, RAY, reserve.supply_index)
            if units == 0:
                raise ZeroAmount("Deposit too small to mint claim units")
            self._assets[asset].transfer_from(self.address, user, self.address, amount)
            reserve.minter.mint(user, units)
        logger.info("Deposit: %s supplied %d %s (%d claim units)", user, amount, asset, units)
        return units

    def withdraw(self, user: str, asset: str, amount: int) -> int:
        """Redeem ``amount`` of ``asset``; returns the claim units burned."""
        self._reserve(asset)
        _require_amount(amount)
        with self._operation("withdraw", asset) as (reserve,):
            units = mul_div(amount, RAY, reserve.supply_index)
            held = reserve.claim_token.balance_of(user)
            if held < units:
                raise InsufficientClaimBalance(held, units)
            reserve.minter.burn(user, units)

            if self._state.is_collateral(user, asset):
                data = self._risk.account_data(user)
                if data.total_debt_usd > 0 and data.health_factor < WAD:
                    raise HealthFactorTooLow(data.health_factor)

            self._assets[asset].transfer(self.address, user, amount)
        logger.info("Withdraw: %s redeemed %d %s (%d claim units)", user, amount, asset, units)
        return units

    def borrow(self, user: str, asset: str, amount: int) -> None:
        self._reserve(asset)
        _require_amount(amount)
        with self._operation("borrow", asset) as (reserve,):
            data = self._risk.account_data(user)
            if data.total_collateral_usd == 0:
                raise NoCollateralAvailable()
            new_debt_usd = self._risk.usd_value(asset, amount)
            # Post-borrow debt/collateral must stay strictly under the threshold.
            if (data.total_debt_usd + new_debt_usd) * WAD >= (
                self.liquidation_threshold * data.total_collateral_usd
            ):
                raise BorrowExceedsCollateralLimits()

            key = (asset, user)
            self._state.borrow_principal[key] = self._state.principal_of(user, asset) + amount
            reserve.total_borrows += amount
            self._assets[asset].transfer(self.address, user, amount)
        logger.info("Borrow: %s borrowed %d %s", user, amount, asset)

    def repay(self, user: str, asset: str, amount: int) -> int:
        """Repay up to ``amount``; returns the amount actually pulled.

        Over-repayment is capped at the outstanding principal.
        """
        self._reserve(asset)
        _require_amount(amount)
        with self._operation("repay", asset) as (reserve,):
            principal = self._state.principal_of(user, asset)
            repaid = min(amount, principal)
            if repaid > 0:
                self._assets[asset].transfer_from(self.address, user, self.address, repaid)
                self._state.borrow_principal[(asset, user)] = principal - repaid
                reserve.total_borrows -= repaid
        logger.info("Repay: %s repaid %d %s (requested %d)", user, repaid, asset, amount)
        return repaid

    def liquidate(
        self,
        liquidator: str,
        borrower: str,
        repay_asset: str,
        collateral_asset: str,
    ) -> LiquidationResult:
        """Repay part of an unhealthy borrower's debt and seize collateral.

        The liquidator repays ``close_factor`` of the borrower's principal in
        ``repay_asset`` and receives claim units of ``collateral_asset`` worth
        that amount plus the liquidation bonus. When the borrower holds less
        collateral than that, all of it is seized and the repaid amount is
        reduced to match.
        """
        with self._operation("liquidate", repay_asset, collateral_asset) as reserves:
            debt_reserve, collateral_reserve = reserves
            data = self._risk.account_data(borrower)
            if not data.is_liquidatable:
                raise BorrowerNotUnderLiquidationThreshold(data.health_factor)

            principal = self._state.principal_of(borrower, repay_asset)
            repay_amount = wad_mul(principal, self.close_factor)
            if repay_amount == 0:
                raise NoDebtToLiquidate(borrower, repay_asset)

            held = collateral_reserve.claim_token.balance_of(borrower)
            if held == 0 or not self._state.is_collateral(borrower, collateral_asset):
                raise NoCollateralToSeize(borrower, collateral_asset)

            bonus_factor = WAD + self.liquidation_bonus
            repay_usd = self._risk.usd_value(repay_asset, repay_amount)
            seize_usd = wad_mul(repay_usd, bonus_factor)
            seize_amount = self._risk.amount_for_usd(collateral_asset, seize_usd)
            seize_units = mul_div(seize_amount, RAY, collateral_reserve.supply_index)

            if seize_units > held:
                seize_units = held
                seize_amount = mul_div(held, collateral_reserve.supply_index, RAY)
                seize_usd = self._risk.usd_value(collateral_asset, seize_amount)
                repay_amount = self._risk.amount_for_usd(
                    repay_asset, mul_div(seize_usd, WAD, bonus_factor)
                )
                if repay_amount == 0:
                    raise NoCollateralToSeize(borrower, collateral_asset)
                logger.warning(
                    "Liquidation of %s capped by collateral: seizing all %d units",
                    borrower, held,
                )

            self._state.borrow_principal[(repay_asset, borrower)] = principal - repay_amount
            debt_reserve.total_borrows -= repay_amount

            collateral_reserve.minter.burn(borrower, seize_units)
            collateral_reserve.minter.mint(liquidator, seize_units)

            self._assets[repay_asset].transfer_from(
                self.address, liquidator, self.address, repay_amount
            )

        logger.info(
            "Liquidation: %s repaid %d %s for %s, seized %d %s (%d claim units)",
            liquidator, repay_amount, repay_asset, borrower,
            seize_amount, collateral_asset, seize_units,
        )
        return LiquidationResult(
            borrower=borrower,
            liquidator=liquidator,
            repay_asset=repay_asset,
            collateral_asset=collateral_asset,
            debt_repaid=repay_amount,
            collateral_seized=seize_amount,
            claim_units_seized=seize_units,
            health_factor_before=data.health_factor,
        )

    # ------------------------------------------------------------------
    # Readers (under the lock, so rolled-back work is never visible)
    # ------------------------------------------------------------------

    def get_reserves_list(self) -> list[str]:
        with self._lock:
            return list(self._state.reserves)

    def get_reserve_data(self, asset: str) -> ReserveData:
        with self._lock:
            reserve = self._reserve(asset)
            on_hand = self._assets[asset].balance_of(self.address)
            liquidity = accrual.available_liquidity(on_hand, reserve.total_borrows)
            quote = reserve.rate_model.rates(liquidity, reserve.total_borrows)
            return ReserveData(
                asset=reserve.asset,
                decimals=reserve.decimals,
                supply_index=reserve.supply_index,
                borrow_index=reserve.borrow_index,
                total_borrows=reserve.total_borrows,
                available_liquidity=liquidity,
                last_update_timestamp=reserve.last_update_timestamp,
                borrow_rate=quote.borrow_rate,
                supply_rate=quote.supply_rate,
            )

    def get_user_borrow(self, user: str, asset: str) -> int:
        with self._lock:
            return self._state.principal_of(user, asset)

    def is_collateral(self, user: str, asset: str) -> bool:
        with self._lock:
            return self._state.is_collateral(user, asset)

    def get_user_account_data(self, user: str) -> AccountData:
        with self._lock:
            return self._risk.account_data(user)

    def underlying_balance(self, user: str, asset: str) -> int:
        """Underlying ``asset`` redeemable by ``user`` at the current index."""
        with self._lock:
            self._reserve(asset)
            return self._risk.redeemable(user, asset)
