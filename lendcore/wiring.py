"""Deploy an in-process market from configuration."""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .config import AppConfig
from .fixed_point import to_units
from .interfaces.price_oracle import PriceFeed
from .oracles import OracleAdapter, PythFeedUpdater, PythPriceFeed, StaticPriceFeed
from .services import LendingPool, LinearRateModel
from .tokens import InMemoryAsset, InMemoryClaimToken

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Everything ``deploy`` created, keyed by asset symbol."""

    pool: LendingPool
    oracle: OracleAdapter
    pyth: PythFeedUpdater
    assets: dict[str, InMemoryAsset] = field(default_factory=dict)
    claim_tokens: dict[str, InMemoryClaimToken] = field(default_factory=dict)
    feeds: dict[str, PriceFeed] = field(default_factory=dict)
    rate_models: dict[str, LinearRateModel] = field(default_factory=dict)


def deploy(config: AppConfig, clock: Callable[[], int] | None = None) -> Deployment:
    """Create assets, feeds, oracle, rate models, claim tokens and the pool."""
    owner = config.pool.owner
    oracle = OracleAdapter(owner)
    pool = LendingPool.from_config(config, oracle, clock=clock)
    deployment = Deployment(pool=pool, oracle=oracle, pyth=PythFeedUpdater(config.pyth))

    for name, model_cfg in config.rate_models.items():
        deployment.rate_models[name] = LinearRateModel.from_config(model_cfg)

    for asset_cfg in config.assets:
        symbol = asset_cfg.symbol
        asset = InMemoryAsset(symbol, symbol, asset_cfg.decimals)

        feed: PriceFeed
        if asset_cfg.feed.source == "pyth":
            pyth_feed = PythPriceFeed(asset_cfg.feed.feed_id)
            deployment.pyth.register(pyth_feed)
            feed = pyth_feed
        else:
            feed = StaticPriceFeed(
                to_units(asset_cfg.feed.price, asset_cfg.feed.decimals),
                asset_cfg.feed.decimals,
            )
        oracle.set_asset_feed(symbol, feed, caller=owner)

        claim_token = InMemoryClaimToken(symbol, f"Lendcore {symbol}", f"c{symbol}")
        pool.init_reserve(
            asset, claim_token, deployment.rate_models[asset_cfg.rate_model], caller=owner
        )

        deployment.assets[symbol] = asset
        deployment.claim_tokens[symbol] = claim_token
        deployment.feeds[symbol] = feed

    logger.info("Deployed %d reserve(s): %s", len(config.assets), ", ".join(deployment.assets))
    return deployment
