"""Accounting and risk core for a collateralized lending market."""
from .services import LendingPool, LinearRateModel

__version__ = "0.1.0"

__all__ = ["LendingPool", "LinearRateModel", "__version__"]
