"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

FEED_SOURCES = ("static", "pyth")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RiskConfig:
    """Pool-wide risk parameters as fractions (0.80 == 80%)."""

    liquidation_threshold: float = 0.80
    liquidation_bonus: float = 0.05
    close_factor: float = 0.50


@dataclass(frozen=True)
class RateModelConfig:
    """Linear rate model, annual rates as fractions."""

    base_rate: float = 0.02
    slope: float = 0.20


@dataclass(frozen=True)
class FeedConfig:
    source: str = "static"
    price: float = 0.0
    decimals: int = 8
    feed_id: str = ""


@dataclass(frozen=True)
class AssetConfig:
    symbol: str = ""
    decimals: int = 18
    rate_model: str = "default"
    feed: FeedConfig = field(default_factory=FeedConfig)


@dataclass(frozen=True)
class PythConfig:
    hermes_url: str = "https://hermes.pyth.network/v2/updates/price/latest"
    timeout: int = 30


@dataclass(frozen=True)
class PoolConfig:
    address: str = "lending-pool"
    owner: str = "deployer"


@dataclass(frozen=True)
class AppConfig:
    pool: PoolConfig = field(default_factory=PoolConfig)
    risk: RiskConfig = field(default_factory=RiskConfig)
    rate_models: dict[str, RateModelConfig] = field(
        default_factory=lambda: {"default": RateModelConfig()}
    )
    assets: tuple[AssetConfig, ...] = ()
    pyth: PythConfig = field(default_factory=PythConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_pool(raw: dict[str, Any]) -> PoolConfig:
    return PoolConfig(
        address=str(raw.get("address", PoolConfig.address)),
        owner=str(raw.get("owner", PoolConfig.owner)),
    )


def _build_risk(raw: dict[str, Any]) -> RiskConfig:
    return RiskConfig(
        liquidation_threshold=float(raw.get("liquidation_threshold", 0.80)),
        liquidation_bonus=float(raw.get("liquidation_bonus", 0.05)),
        close_factor=float(raw.get("close_factor", 0.50)),
    )


def _build_rate_models(raw: dict[str, Any]) -> dict[str, RateModelConfig]:
    if not raw:
        return {"default": RateModelConfig()}
    models: dict[str, RateModelConfig] = {}
    for name, cfg in raw.items():
        models[name] = RateModelConfig(
            base_rate=float(cfg.get("base_rate", 0.02)),
            slope=float(cfg.get("slope", 0.20)),
        )
    return models


def _build_feed(raw: dict[str, Any]) -> FeedConfig:
    return FeedConfig(
        source=raw.get("source", "static"),
        price=float(raw.get("price", 0.0)),
        decimals=int(raw.get("decimals", 8)),
        feed_id=str(raw.get("feed_id", "")),
    )


def _build_assets(raw: list[dict[str, Any]]) -> tuple[AssetConfig, ...]:
    assets: list[AssetConfig] = []
    for a in raw:
        assets.append(
            AssetConfig(
                symbol=a.get("symbol", ""),
                decimals=int(a.get("decimals", 18)),
                rate_model=a.get("rate_model", "default"),
                feed=_build_feed(a.get("feed", {})),
            )
        )
    return tuple(assets)


def _build_pyth(raw: dict[str, Any]) -> PythConfig:
    return PythConfig(
        hermes_url=raw.get("hermes_url", PythConfig.hermes_url),
        timeout=int(raw.get("timeout", 30)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate market configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        pool=_build_pool(raw.get("pool", {})),
        risk=_build_risk(raw.get("risk", {})),
        rate_models=_build_rate_models(raw.get("rate_models", {})),
        assets=_build_assets(raw.get("assets", [])),
        pyth=_build_pyth(raw.get("price_oracle", {}).get("pyth", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    risk = cfg.risk
    if not 0 < risk.liquidation_threshold <= 1:
        raise ValueError("liquidation_threshold must be in (0, 1]")
    if not 0 < risk.close_factor <= 1:
        raise ValueError("close_factor must be in (0, 1]")
    if risk.liquidation_bonus < 0:
        raise ValueError("liquidation_bonus must not be negative")

    for name, model in cfg.rate_models.items():
        if model.base_rate < 0 or model.slope < 0:
            raise ValueError(f"Rate model '{name}' has a negative rate")

    if not cfg.assets:
        raise ValueError("At least one asset must be configured")

    seen: set[str] = set()
    for asset in cfg.assets:
        if not asset.symbol:
            raise ValueError("Asset has no symbol")
        if asset.symbol in seen:
            raise ValueError(f"Asset '{asset.symbol}' configured twice")
        seen.add(asset.symbol)
        if asset.rate_model not in cfg.rate_models:
            raise ValueError(
                f"Asset '{asset.symbol}' references unknown rate model '{asset.rate_model}'"
            )
        if asset.feed.source not in FEED_SOURCES:
            raise ValueError(
                f"Asset '{asset.symbol}' has unknown feed source '{asset.feed.source}'"
            )
        if asset.feed.source == "pyth" and not asset.feed.feed_id:
            raise ValueError(f"Asset '{asset.symbol}' pyth feed has no feed_id")
        if asset.feed.source == "static" and asset.feed.price <= 0:
            raise ValueError(f"Asset '{asset.symbol}' static feed needs a positive price")
