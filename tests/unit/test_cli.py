"""Unit tests for CLI argument parsing."""
from __future__ import annotations

from lendcore.cli import build_parser


class TestBuildParser:
    def test_demo_command(self) -> None:
        args = build_parser().parse_args(["demo"])
        assert args.command == "demo"
        assert args.collateral is None
        assert args.debt is None

    def test_liquidation_demo_assets(self) -> None:
        args = build_parser().parse_args(
            ["liquidation-demo", "--collateral", "WETH", "--debt", "DAI"]
        )
        assert args.command == "liquidation-demo"
        assert args.collateral == "WETH"
        assert args.debt == "DAI"

    def test_prices_command(self) -> None:
        args = build_parser().parse_args(["prices"])
        assert args.command == "prices"

    def test_config_flag(self) -> None:
        args = build_parser().parse_args(["--config", "/tmp/c.yaml", "demo"])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        args = build_parser().parse_args(["--log-level", "DEBUG", "prices"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        args = build_parser().parse_args([])
        assert args.command is None
