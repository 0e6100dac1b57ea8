"""Command-line interface for the lending core."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .clock import ManualClock
from .config import AppConfig, load_config
from .errors import LendingError
from .fixed_point import from_units
from .logging_setup import configure_logging
from .scenarios import ScenarioReport, run_interaction, run_liquidation
from .wiring import Deployment, deploy


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="lendcore",
        description="Collateralized lending market accounting core",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    for name, help_text in (
        ("demo", "Deposit, borrow, repay and withdraw walk-through"),
        ("liquidation-demo", "Price drop and liquidation walk-through"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--collateral", default=None, help="Collateral asset symbol")
        p.add_argument("--debt", default=None, help="Borrowed asset symbol")

    sub.add_parser("prices", help="Refresh Pyth feeds and print oracle prices")

    return parser


def _pick_assets(config: AppConfig, args: argparse.Namespace) -> tuple[str, str]:
    symbols = [a.symbol for a in config.assets]
    if len(symbols) < 2 and (args.collateral is None or args.debt is None):
        raise ValueError("Demos need two configured assets")
    collateral = args.collateral or symbols[0]
    debt = args.debt or next(s for s in symbols if s != collateral)
    for symbol in (collateral, debt):
        if symbol not in symbols:
            raise ValueError(f"Unknown asset '{symbol}'")
    return collateral, debt


def _print_report(report: ScenarioReport) -> None:
    for i, step in enumerate(report.steps, 1):
        print(f"{i:>2}. {step}")


def _print_prices(deployment: Deployment) -> None:
    for symbol in deployment.assets:
        try:
            price = deployment.oracle.get_price(symbol)
        except LendingError as e:
            print(f"{symbol:>8}: unavailable ({e})")
            continue
        print(f"{symbol:>8}: ${from_units(price, 18):,.4f}")


def _run(args: argparse.Namespace) -> None:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)

    clock = ManualClock()
    deployment = deploy(config, clock=clock)
    if deployment.pyth.feed_ids:
        asyncio.run(deployment.pyth.refresh())

    if args.command == "prices":
        _print_prices(deployment)
        return

    collateral, debt = _pick_assets(config, args)
    if args.command == "demo":
        _print_report(run_interaction(deployment, collateral, debt, clock=clock))
    elif args.command == "liquidation-demo":
        _print_report(run_liquidation(deployment, collateral, debt))
    else:
        build_parser().print_help()
        sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        _run(args)
    except LendingError as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(2)
