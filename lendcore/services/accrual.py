"""Reserve index accrual."""
from __future__ import annotations

import logging

from ..errors import ClockRegression
from ..fixed_point import ray_mul
from ..models import Reserve

logger = logging.getLogger(__name__)


def available_liquidity(on_hand: int, total_borrows: int) -> int:
    """Liquidity the rate model sees: on-hand balance minus borrows, floored at 0."""
    return max(on_hand - total_borrows, 0)


def accrue(reserve: Reserve, now: int, liquidity: int) -> bool:
    """Advance ``reserve`` indices to ``now``.

    Compounding is linear over the elapsed interval:
        index += index * rate_per_second * elapsed / RAY

    Returns False (and changes nothing) when ``now`` equals the last update,
    so repeated calls within one operation are safe. ``total_borrows`` is not
    touched; borrower principal does not grow with the borrow index.
    """
    last = reserve.last_update_timestamp
    if now == last:
        return False
    if now < last:
        raise ClockRegression(last, now)

    elapsed = now - last
    quote = reserve.rate_model.rates(liquidity, reserve.total_borrows)

    reserve.supply_index += ray_mul(reserve.supply_index, quote.supply_rate * elapsed)
    reserve.borrow_index += ray_mul(reserve.borrow_index, quote.borrow_rate * elapsed)
    reserve.last_update_timestamp = now

    logger.debug(
        "Accrued %s over %ds: supply_index=%d borrow_index=%d",
        reserve.asset, elapsed, reserve.supply_index, reserve.borrow_index,
    )
    return True
