"""Accounting and risk services."""
from .interest_rate import LinearRateModel
from .pool import LendingPool
from .risk import AccountRisk
from .transaction import Transaction

__all__ = ["AccountRisk", "LendingPool", "LinearRateModel", "Transaction"]
