"""Linear utilization-based interest rate model."""
from __future__ import annotations

from ..config import RateModelConfig
from ..fixed_point import RAY, SECONDS_PER_YEAR, mul_div, ray_mul, to_ray
from ..models import RateQuote


class LinearRateModel:
    """
    Borrow APR = base + U * slope
    Supply APR = borrow APR * U   (no reserve fee)

    where U = total_borrows / (available_liquidity + total_borrows).
    Annual rates are stored in ray and quoted per second.
    """

    def __init__(self, base_rate: int, slope: int) -> None:
        self.base_rate = base_rate
        self.slope = slope

    @classmethod
    def from_config(cls, config: RateModelConfig) -> LinearRateModel:
        return cls(base_rate=to_ray(config.base_rate), slope=to_ray(config.slope))

    @staticmethod
    def utilization(available_liquidity: int, total_borrows: int) -> int:
        """Utilization in ray; 0 when nothing is borrowed."""
        if total_borrows == 0:
            return 0
        return mul_div(total_borrows, RAY, available_liquidity + total_borrows)

    def annual_rates(self, available_liquidity: int, total_borrows: int) -> RateQuote:
        if total_borrows == 0:
            return RateQuote(borrow_rate=0, supply_rate=0)
        u = self.utilization(available_liquidity, total_borrows)
        borrow_apr = self.base_rate + ray_mul(u, self.slope)
        supply_apr = ray_mul(borrow_apr, u)
        return RateQuote(borrow_rate=borrow_apr, supply_rate=supply_apr)

    def rates(self, available_liquidity: int, total_borrows: int) -> RateQuote:
        annual = self.annual_rates(available_liquidity, total_borrows)
        return RateQuote(
            borrow_rate=annual.borrow_rate // SECONDS_PER_YEAR,
            supply_rate=annual.supply_rate // SECONDS_PER_YEAR,
        )
