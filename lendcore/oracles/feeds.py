"""Price feeds: upstream answers in their native decimals."""
from __future__ import annotations


class StaticPriceFeed:
    """Manually set price feed (8 decimals by default, like USD aggregators)."""

    def __init__(self, answer: int, decimals: int = 8) -> None:
        self._answer = answer
        self._decimals = decimals

    @property
    def decimals(self) -> int:
        return self._decimals

    def latest_answer(self) -> int:
        return self._answer

    def set_latest_answer(self, answer: int) -> None:
        self._answer = answer


class PythPriceFeed:
    """Last price pushed by ``PythFeedUpdater`` for one Pyth feed id.

    Pyth reports ``price * 10**expo``; the feed exposes ``-expo`` as its
    decimal count. Until the first update the answer is 0, which the oracle
    adapter rejects as an invalid price.
    """

    def __init__(self, feed_id: str) -> None:
        self.feed_id = feed_id
        self._price = 0
        self._expo = -8
        self.publish_time: int | None = None

    @property
    def decimals(self) -> int:
        return -self._expo

    def latest_answer(self) -> int:
        return self._price

    def update(self, price: int, expo: int, publish_time: int | None = None) -> None:
        self._price = price
        self._expo = expo
        self.publish_time = publish_time
