"""Account valuation and health factor: read-only over pool state."""
from __future__ import annotations

from collections.abc import Mapping

from ..fixed_point import HEALTH_FACTOR_MAX, RAY, mul_div
from ..interfaces.price_oracle import PriceOracle
from ..models import AccountData, PoolState, Reserve


def calc_health_factor(collateral_usd: int, debt_usd: int, liquidation_threshold: int) -> int:
    """health_factor = collateral * liquidation_threshold / debt (WAD).

    ``HEALTH_FACTOR_MAX`` when there is no debt.
    """
    if debt_usd <= 0:
        return HEALTH_FACTOR_MAX
    return mul_div(collateral_usd, liquidation_threshold, debt_usd)


class AccountRisk:
    """Aggregates a user's collateral and debt across every reserve."""

    def __init__(
        self, state: PoolState, oracle: PriceOracle, liquidation_threshold: int
    ) -> None:
        self._state = state
        self._oracle = oracle
        self.liquidation_threshold = liquidation_threshold

    @property
    def _reserves(self) -> Mapping[str, Reserve]:
        return self._state.reserves

    def usd_value(self, asset: str, amount: int) -> int:
        """Value of ``amount`` native units of ``asset`` in WAD USD."""
        if amount == 0:
            return 0
        decimals = self._reserves[asset].decimals
        return mul_div(amount, self._oracle.get_price(asset), 10**decimals)

    def amount_for_usd(self, asset: str, usd: int) -> int:
        """Native units of ``asset`` worth ``usd`` (floor)."""
        decimals = self._reserves[asset].decimals
        return mul_div(usd, 10**decimals, self._oracle.get_price(asset))

    def redeemable(self, user: str, asset: str) -> int:
        reserve = self._reserves[asset]
        return mul_div(reserve.claim_token.balance_of(user), reserve.supply_index, RAY)

    def account_data(self, user: str) -> AccountData:
        collateral_usd = 0
        debt_usd = 0
        for asset in self._reserves:
            if self._state.is_collateral(user, asset):
                collateral_usd += self.usd_value(asset, self.redeemable(user, asset))
            principal = self._state.principal_of(user, asset)
            if principal > 0:
                debt_usd += self.usd_value(asset, principal)

        return AccountData(
            total_collateral_usd=collateral_usd,
            total_debt_usd=debt_usd,
            health_factor=calc_health_factor(
                collateral_usd, debt_usd, self.liquidation_threshold
            ),
        )

    def health_factor(self, user: str) -> int:
        return self.account_data(user).health_factor
