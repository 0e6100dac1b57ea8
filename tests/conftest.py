"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from lendcore.clock import ManualClock
from lendcore.config import AppConfig, AssetConfig, FeedConfig, RateModelConfig, RiskConfig
from lendcore.fixed_point import to_units
from lendcore.oracles import OracleAdapter, StaticPriceFeed
from lendcore.services import LendingPool, LinearRateModel
from lendcore.tokens import InMemoryAsset, InMemoryClaimToken

WETH = "WETH"
DAI = "DAI"
OWNER = "deployer"
USER1 = "user1"
USER2 = "user2"

WETH_PRICE = to_units(3000, 8)  # $3000 with 8 decimals
DAI_PRICE = to_units(1, 8)

DEPOSIT_AMOUNT_WETH = to_units(10, 18)
DEPOSIT_AMOUNT_DAI = to_units(5000, 18)

START = 1_700_000_000


def fund(asset: InMemoryAsset, holder: str, amount: int, spender: str = "lending-pool") -> None:
    """Mint ``amount`` to ``holder`` and approve the pool for it."""
    asset.mint(holder, amount)
    asset.approve(holder, spender, asset.allowance(holder, spender) + amount)


# ---------------------------------------------------------------------------
# Market fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(START)


@pytest.fixture()
def weth() -> InMemoryAsset:
    return InMemoryAsset(WETH, "WETH", 18)


@pytest.fixture()
def dai() -> InMemoryAsset:
    return InMemoryAsset(DAI, "DAI", 18)


@pytest.fixture()
def eth_feed() -> StaticPriceFeed:
    return StaticPriceFeed(WETH_PRICE, 8)


@pytest.fixture()
def dai_feed() -> StaticPriceFeed:
    return StaticPriceFeed(DAI_PRICE, 8)


@pytest.fixture()
def oracle(eth_feed: StaticPriceFeed, dai_feed: StaticPriceFeed) -> OracleAdapter:
    adapter = OracleAdapter(OWNER)
    adapter.set_asset_feed(WETH, eth_feed)
    adapter.set_asset_feed(DAI, dai_feed)
    return adapter


@pytest.fixture()
def rate_model() -> LinearRateModel:
    return LinearRateModel.from_config(RateModelConfig(base_rate=0.02, slope=0.20))


@pytest.fixture()
def a_weth() -> InMemoryClaimToken:
    return InMemoryClaimToken(WETH, "aWETH", "aWETH")


@pytest.fixture()
def a_dai() -> InMemoryClaimToken:
    return InMemoryClaimToken(DAI, "aDAI", "aDAI")


@pytest.fixture()
def pool(
    oracle: OracleAdapter,
    clock: ManualClock,
    weth: InMemoryAsset,
    dai: InMemoryAsset,
    a_weth: InMemoryClaimToken,
    a_dai: InMemoryClaimToken,
    rate_model: LinearRateModel,
) -> LendingPool:
    """Pool with WETH and DAI reserves; user1 holds WETH, user2 holds DAI."""
    lending_pool = LendingPool(oracle, owner=OWNER, clock=clock)
    lending_pool.init_reserve(weth, a_weth, rate_model)
    lending_pool.init_reserve(dai, a_dai, rate_model)

    fund(weth, USER1, DEPOSIT_AMOUNT_WETH)
    fund(dai, USER2, DEPOSIT_AMOUNT_DAI)
    return lending_pool


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_app_config() -> AppConfig:
    return AppConfig(
        risk=RiskConfig(),
        rate_models={"default": RateModelConfig()},
        assets=(
            AssetConfig(symbol=WETH, feed=FeedConfig(source="static", price=3000.0)),
            AssetConfig(symbol=DAI, feed=FeedConfig(source="static", price=1.0)),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    pool:
      address: lending-pool
      owner: deployer
    risk:
      liquidation_threshold: 0.80
      liquidation_bonus: 0.05
      close_factor: 0.50
    rate_models:
      default:
        base_rate: 0.02
        slope: 0.20
      stable:
        base_rate: 0.01
        slope: 0.05
    price_oracle:
      pyth:
        hermes_url: "https://hermes.example.com"
        timeout: 5
    assets:
      - symbol: WETH
        decimals: 18
        feed: {source: static, price: 3000, decimals: 8}
      - symbol: DAI
        decimals: 18
        rate_model: stable
        feed: {source: static, price: 1, decimals: 8}
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file
