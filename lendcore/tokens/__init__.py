"""In-memory token ledgers."""
from .asset import InMemoryAsset
from .claim_token import InMemoryClaimToken

__all__ = ["InMemoryAsset", "InMemoryClaimToken"]
