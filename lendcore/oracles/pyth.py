"""Pyth Network feed updater."""
import logging
import ssl

import aiohttp
import certifi

from ..config import PythConfig
from .feeds import PythPriceFeed

logger = logging.getLogger(__name__)


class PythFeedUpdater:
    """Refresh ``PythPriceFeed`` objects from the Pyth Hermes API."""

    def __init__(self, config: PythConfig) -> None:
        self.hermes_url = config.hermes_url
        self.timeout = config.timeout
        self._feeds: dict[str, list[PythPriceFeed]] = {}

    def register(self, feed: PythPriceFeed) -> None:
        self._feeds.setdefault(feed.feed_id, []).append(feed)

    @property
    def feed_ids(self) -> list[str]:
        return list(self._feeds)

    async def refresh(self) -> int:
        """Fetch the latest prices for every registered feed.

        Returns the number of feeds updated. HTTP and network errors are
        logged; feeds that were not updated keep their previous answer.
        """
        if not self._feeds:
            return 0

        query_params = "&".join([f"ids[]={fid}" for fid in self._feeds])
        url = f"{self.hermes_url}?{query_params}"

        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        updated = 0
        try:
            async with aiohttp.ClientSession(connector=connector) as session:
                async with session.get(
                    url, timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        logger.error(
                            "Error fetching prices from Pyth: HTTP %s", response.status
                        )
                        return 0

                    data = await response.json()
                    for item in data.get("parsed", []):
                        # Hermes returns ids without the 0x prefix
                        feed_id = item.get("id", "")
                        feeds = self._feeds.get(feed_id) or self._feeds.get(f"0x{feed_id}")
                        if not feeds:
                            continue
                        price_data = item.get("price", {})
                        price = int(price_data.get("price", 0))
                        expo = int(price_data.get("expo", 0))
                        publish_time = price_data.get("publish_time")
                        for feed in feeds:
                            feed.update(price, expo, publish_time)
                            updated += 1
                        logger.debug("Pyth feed %s: %d x 10^%d", feed_id, price, expo)

        except Exception as e:
            logger.error("Error fetching prices from Pyth: %s", e)

        logger.info("Updated %d Pyth feed(s)", updated)
        return updated
