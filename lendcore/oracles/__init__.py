"""Price oracle implementations."""
from .adapter import OracleAdapter
from .feeds import PythPriceFeed, StaticPriceFeed
from .pyth import PythFeedUpdater

__all__ = ["OracleAdapter", "PythFeedUpdater", "PythPriceFeed", "StaticPriceFeed"]
