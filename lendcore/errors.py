"""Exception hierarchy for the lending core.

Three families, matching how a failed operation should be read by callers:

* ``ValidationError``: the request itself is malformed or not allowed.
* ``RiskViolation``: the request is well formed but would leave (or does not
  find) an account in the required solvency state.
* ``CollaboratorError``: a price feed, token or asset ledger refused.

Every operation is atomic, so any of these means no state changed.
"""
from __future__ import annotations


class LendingError(Exception):
    """Base class for all lending core errors."""


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class ValidationError(LendingError):
    pass


class ZeroAmount(ValidationError):
    def __init__(self, message: str = "Amount must be > 0") -> None:
        super().__init__(message)


class ReserveNotFound(ValidationError):
    def __init__(self, asset: str) -> None:
        super().__init__(f"Reserve not initialized for asset '{asset}'")
        self.asset = asset


class ReserveAlreadyInitialized(ValidationError):
    def __init__(self, asset: str) -> None:
        super().__init__(f"Reserve already initialized for asset '{asset}'")
        self.asset = asset


class Unauthorized(ValidationError):
    def __init__(self, caller: str, action: str) -> None:
        super().__init__(f"'{caller}' is not allowed to {action}")
        self.caller = caller


class ClockRegression(ValidationError):
    def __init__(self, last: int, now: int) -> None:
        super().__init__(f"Clock moved backwards: last update {last}, now {now}")
        self.last = last
        self.now = now


class InsufficientClaimBalance(ValidationError):
    def __init__(self, held: int, required: int) -> None:
        super().__init__(
            f"Insufficient claim token balance: holds {held}, needs {required}"
        )
        self.held = held
        self.required = required


# ---------------------------------------------------------------------------
# Solvency / risk
# ---------------------------------------------------------------------------


class RiskViolation(LendingError):
    pass


class HealthFactorTooLow(RiskViolation):
    def __init__(self, health_factor: int) -> None:
        super().__init__(f"Health factor would fall below 1 ({health_factor})")
        self.health_factor = health_factor


class NoCollateralAvailable(RiskViolation):
    def __init__(self) -> None:
        super().__init__("No collateral available")


class BorrowExceedsCollateralLimits(RiskViolation):
    def __init__(self) -> None:
        super().__init__("Borrow would exceed collateral limits")


class BorrowerNotUnderLiquidationThreshold(RiskViolation):
    def __init__(self, health_factor: int) -> None:
        super().__init__(
            f"Borrower is not under liquidation threshold (health factor {health_factor})"
        )
        self.health_factor = health_factor


class NoDebtToLiquidate(RiskViolation):
    def __init__(self, borrower: str, asset: str) -> None:
        super().__init__(f"'{borrower}' has no debt in '{asset}' to liquidate")


class NoCollateralToSeize(RiskViolation):
    def __init__(self, borrower: str, asset: str) -> None:
        super().__init__(f"'{borrower}' has no '{asset}' collateral to seize")


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


class CollaboratorError(LendingError):
    pass


class PriceFeedNotConfigured(CollaboratorError):
    def __init__(self, asset: str) -> None:
        super().__init__(f"No price feed configured for '{asset}'")
        self.asset = asset


class InvalidPrice(CollaboratorError):
    def __init__(self, asset: str, answer: int) -> None:
        super().__init__(f"Invalid price for '{asset}': {answer}")
        self.asset = asset
        self.answer = answer


class InsufficientBalance(CollaboratorError):
    def __init__(self, token: str, holder: str, balance: int, amount: int) -> None:
        super().__init__(
            f"{token}: '{holder}' balance {balance} is below {amount}"
        )


class InsufficientAllowance(CollaboratorError):
    def __init__(self, token: str, owner: str, spender: str, allowance: int, amount: int) -> None:
        super().__init__(
            f"{token}: allowance of '{spender}' over '{owner}' is {allowance}, needs {amount}"
        )


class MinterAlreadyBound(CollaboratorError):
    def __init__(self, token: str) -> None:
        super().__init__(f"{token}: minter capability already issued")
