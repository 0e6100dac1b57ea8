"""Oracle adapter: maps assets to feeds and normalises prices to 18 decimals."""
from __future__ import annotations

import logging

from ..errors import InvalidPrice, PriceFeedNotConfigured, Unauthorized
from ..fixed_point import rescale
from ..interfaces.price_oracle import PriceFeed

logger = logging.getLogger(__name__)

PRICE_DECIMALS = 18


class OracleAdapter:
    """Owner-managed registry of price feeds."""

    def __init__(self, owner: str) -> None:
        self.owner = owner
        self._feeds: dict[str, PriceFeed] = {}

    def set_asset_feed(self, asset: str, feed: PriceFeed, caller: str | None = None) -> None:
        """Register (or replace) the feed for ``asset``.

        ``caller`` defaults to the owner.
        """
        caller = self.owner if caller is None else caller
        if caller != self.owner:
            raise Unauthorized(caller, "set price feeds")
        self._feeds[asset] = feed
        logger.info("Price feed set for %s (%d decimals)", asset, feed.decimals)

    def has_feed(self, asset: str) -> bool:
        return asset in self._feeds

    def get_price(self, asset: str) -> int:
        feed = self._feeds.get(asset)
        if feed is None:
            raise PriceFeedNotConfigured(asset)
        answer = int(feed.latest_answer())
        if answer <= 0:
            raise InvalidPrice(asset, answer)
        price = rescale(answer, feed.decimals, PRICE_DECIMALS)
        if price <= 0:
            # A positive answer with more than 18 decimals can truncate to 0.
            raise InvalidPrice(asset, answer)
        return price
