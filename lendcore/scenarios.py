"""Walk-throughs of the pool on a fresh deployment."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .clock import ManualClock
from .fixed_point import HEALTH_FACTOR_MAX, WAD, from_units, to_units, to_wad
from .models import LiquidationResult
from .oracles import StaticPriceFeed
from .wiring import Deployment

logger = logging.getLogger(__name__)

DAY = 24 * 60 * 60

USER = "user"
LENDER = "lender"
LIQUIDATOR = "liquidator"


@dataclass
class ScenarioReport:
    steps: list[str] = field(default_factory=list)
    liquidation: LiquidationResult | None = None

    def add(self, message: str) -> None:
        logger.info(message)
        self.steps.append(message)


def _fmt_usd(value: int) -> str:
    return f"${from_units(value, 18):,.2f}"


def _fmt_hf(value: int) -> str:
    if value == HEALTH_FACTOR_MAX:
        return "inf"
    return f"{from_units(value, 18):.4f}"


def _fund(deployment: Deployment, symbol: str, holder: str, amount: int) -> None:
    asset = deployment.assets[symbol]
    asset.mint(holder, amount)
    spender = deployment.pool.address
    asset.approve(holder, spender, asset.allowance(holder, spender) + amount)


def run_interaction(
    deployment: Deployment,
    collateral: str,
    debt: str,
    clock: ManualClock | None = None,
) -> ScenarioReport:
    """Deposit, enable collateral, borrow, let time pass, repay, withdraw."""
    pool = deployment.pool
    report = ScenarioReport()
    c_dec = deployment.assets[collateral].decimals
    d_dec = deployment.assets[debt].decimals

    _fund(deployment, collateral, USER, to_units(10, c_dec))
    _fund(deployment, debt, LENDER, to_units(10_000, d_dec))
    pool.deposit(LENDER, debt, to_units(10_000, d_dec))
    report.add(f"{LENDER} supplied 10000 {debt} of liquidity")

    pool.deposit(USER, collateral, to_units(5, c_dec))
    report.add(
        f"{USER} deposited 5 {collateral}, claim balance "
        f"{from_units(deployment.claim_tokens[collateral].balance_of(USER), c_dec)}"
    )

    pool.set_use_as_collateral(USER, collateral, True)
    report.add(f"{USER} enabled {collateral} as collateral")

    pool.borrow(USER, debt, to_units(1000, d_dec))
    data = pool.get_user_account_data(USER)
    report.add(
        f"{USER} borrowed 1000 {debt}: collateral {_fmt_usd(data.total_collateral_usd)}, "
        f"debt {_fmt_usd(data.total_debt_usd)}, HF {_fmt_hf(data.health_factor)}"
    )

    if clock is not None:
        clock.advance(30 * DAY)
        pool.accrue(debt)
        reserve = pool.get_reserve_data(debt)
        report.add(
            f"30 days later the {debt} supply index is "
            f"{from_units(reserve.supply_index, 27):.9f}, borrow index "
            f"{from_units(reserve.borrow_index, 27):.9f}"
        )

    deployment.assets[debt].approve(USER, pool.address, to_units(500, d_dec))
    repaid = pool.repay(USER, debt, to_units(500, d_dec))
    report.add(f"{USER} repaid {from_units(repaid, d_dec)} {debt}")

    pool.withdraw(USER, collateral, to_units(2, c_dec))
    report.add(
        f"{USER} withdrew 2 {collateral}, claim balance "
        f"{from_units(deployment.claim_tokens[collateral].balance_of(USER), c_dec)}"
    )
    return report


def run_liquidation(
    deployment: Deployment,
    collateral: str,
    debt: str,
    borrow_fraction: float = 0.95,
    price_drop: float = 1 / 3,
) -> ScenarioReport:
    """Borrow close to the threshold, drop the collateral price, liquidate."""
    pool = deployment.pool
    feed = deployment.feeds[collateral]
    if not isinstance(feed, StaticPriceFeed):
        raise ValueError(f"Liquidation demo needs a static price feed for {collateral}")

    report = ScenarioReport()
    c_dec = deployment.assets[collateral].decimals
    d_dec = deployment.assets[debt].decimals

    _fund(deployment, debt, LENDER, to_units(100_000, d_dec))
    pool.deposit(LENDER, debt, to_units(100_000, d_dec))

    _fund(deployment, collateral, USER, to_units(1, c_dec))
    pool.deposit(USER, collateral, to_units(1, c_dec))
    pool.set_use_as_collateral(USER, collateral, True)

    data = pool.get_user_account_data(USER)
    max_debt_usd = data.total_collateral_usd * pool.liquidation_threshold // WAD
    borrow_usd = max_debt_usd * to_wad(borrow_fraction) // WAD
    borrow_amount = borrow_usd * 10**d_dec // deployment.oracle.get_price(debt)
    pool.borrow(USER, debt, borrow_amount)
    report.add(
        f"{USER} borrowed {from_units(borrow_amount, d_dec):.2f} {debt} against 1 {collateral} "
        f"(limit {_fmt_usd(max_debt_usd)})"
    )

    old_answer = feed.latest_answer()
    feed.set_latest_answer(old_answer * (WAD - to_wad(price_drop)) // WAD)
    data = pool.get_user_account_data(USER)
    report.add(
        f"{collateral} price dropped to {from_units(feed.latest_answer(), feed.decimals)}: "
        f"HF {_fmt_hf(data.health_factor)}"
    )

    repay_budget = pool.get_user_borrow(USER, debt)
    _fund(deployment, debt, LIQUIDATOR, repay_budget)
    result = pool.liquidate(LIQUIDATOR, USER, debt, collateral)
    report.liquidation = result
    report.add(
        f"{LIQUIDATOR} repaid {from_units(result.debt_repaid, d_dec)} {debt} and seized "
        f"{from_units(result.collateral_seized, c_dec)} {collateral}"
    )

    data = pool.get_user_account_data(USER)
    report.add(
        f"{USER} after liquidation: collateral {_fmt_usd(data.total_collateral_usd)}, "
        f"debt {_fmt_usd(data.total_debt_usd)}, HF {_fmt_hf(data.health_factor)}"
    )
    return report
