"""Protocol interfaces for the lending core's collaborators."""
from .asset import UnderlyingAsset
from .claim_token import ClaimMinter, ClaimToken
from .journal import Journaled
from .price_oracle import PriceFeed, PriceOracle
from .rate_model import RateModel

__all__ = [
    "ClaimMinter",
    "ClaimToken",
    "Journaled",
    "PriceFeed",
    "PriceOracle",
    "RateModel",
    "UnderlyingAsset",
]
