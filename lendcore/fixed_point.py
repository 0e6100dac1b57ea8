"""Fixed-point helpers: integer-only, multiply before divide."""
from __future__ import annotations

from decimal import Decimal

WAD = 10**18
RAY = 10**27
SECONDS_PER_YEAR = 365 * 24 * 60 * 60

# Health factor reported for accounts without debt.
HEALTH_FACTOR_MAX = 2**256 - 1


def mul_div(a: int, b: int, denominator: int) -> int:
    """Return ``a * b // denominator`` (floor)."""
    return a * b // denominator


def ray_mul(a: int, b: int) -> int:
    return a * b // RAY


def wad_mul(a: int, b: int) -> int:
    return a * b // WAD


def to_wad(value: float | int | str | Decimal) -> int:
    """Convert a human decimal (e.g. ``0.8`` or ``"3000.5"``) to WAD exactly.

    Floats go through their shortest ``repr`` so ``0.8`` becomes exactly
    ``800000000000000000`` rather than the binary approximation.
    """
    return int(Decimal(str(value)) * WAD)


def to_ray(value: float | int | str | Decimal) -> int:
    return int(Decimal(str(value)) * RAY)


def to_units(value: float | int | str | Decimal, decimals: int) -> int:
    """Convert a human token amount to native units for ``decimals``."""
    return int(Decimal(str(value)) * (10**decimals))


def from_units(amount: int, decimals: int) -> Decimal:
    """Convert native units back to a human ``Decimal`` (display only)."""
    return Decimal(amount) / (Decimal(10) ** decimals)


def rescale(value: int, from_decimals: int, to_decimals: int) -> int:
    """Rescale a fixed-point integer between decimal counts.

    Scaling down truncates toward zero.
    """
    if from_decimals == to_decimals:
        return value
    if from_decimals < to_decimals:
        return value * 10 ** (to_decimals - from_decimals)
    return value // 10 ** (from_decimals - to_decimals)
