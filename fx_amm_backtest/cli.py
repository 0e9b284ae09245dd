"""Command-line interface for running FX AMM backtests."""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from fx_amm_backtest.core.interfaces import DegeneratePoolError
from fx_amm_backtest.core.stableswap import ConvergenceError
from fx_amm_backtest.market.historical import load_historical_path
from fx_amm_backtest.market.price_process import GBMPriceProcess
from fx_amm_backtest.simulation.config import (
    CURVE_MODELS,
    DEFAULT_CONFIG,
    UNISWAP_MODELS,
    build_config,
)
from fx_amm_backtest.simulation.engine import BacktestEngine


def _overrides(args: argparse.Namespace, names: dict[str, str]) -> dict:
    """Collect the CLI options that were actually given."""
    return {
        field: getattr(args, option)
        for option, field in names.items()
        if getattr(args, option) is not None
    }


def run_command(args: argparse.Namespace) -> int:
    """Run a backtest and print a summary per model."""
    sim = _overrides(
        args,
        {
            "days": "days",
            "steps_per_day": "steps_per_day",
            "initial_price": "initial_price",
            "volatility": "volatility",
            "drift": "drift",
            "daily_volume": "daily_volume_fraction",
            "arb_mode": "arbitrage_mode",
            "curve_model": "curve_model",
            "uniswap_model": "uniswap_model",
            "seed": "seed",
        },
    )
    if args.strict:
        sim["strict_convergence"] = True
    pool = _overrides(args, {"wealth": "initial_wealth", "fee": "fee_tier"})

    try:
        config = build_config(pool=pool, sim=sim)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    rng = np.random.default_rng(config.sim.seed)

    if args.csv is not None:
        csv_path = Path(args.csv)
        if not csv_path.exists():
            print(f"Error: Price file not found: {csv_path}")
            return 1
        try:
            prices = load_historical_path(csv_path, rng, config.sim.steps_per_day)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
    else:
        process = GBMPriceProcess(
            initial_price=config.sim.initial_price,
            volatility=config.sim.volatility,
            drift=config.sim.drift,
            steps_per_day=config.sim.steps_per_day,
            rng=rng,
        )
        prices = process.generate_path(config.sim.days)

    print(f"Running backtest over {len(prices)} steps "
          f"(arbitrage mode {config.sim.arbitrage_mode})...")
    engine = BacktestEngine(config, rng)
    try:
        result = engine.run(prices)
    except (DegeneratePoolError, ConvergenceError) as e:
        print(f"Simulation aborted: {e}")
        return 1

    print(f"\nReference price: {prices[0].price:.2f} -> {prices[-1].price:.2f}")
    for stat in result.stats:
        print(
            f"{stat.name:<24} fees {stat.cumulative_fees:>14,.2f}  "
            f"volume {stat.cumulative_volume:>18,.2f}  "
            f"IL {stat.final_il_pct:>8.4f}%  halts {stat.halt_count}"
        )
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="FX AMM Backtest - Compare pool designs on a reference price path",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fx-amm-backtest run
  fx-amm-backtest run --days 90 --steps-per-day 24 --arb-mode 100 --seed 7
  fx-amm-backtest run --csv usdkrw_2025.csv --curve-model curve_crypto
        """,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run a backtest and print per-model results")
    run_parser.add_argument(
        "--csv",
        default=None,
        help="Daily OHLC file (date,open,high,low,close[,volume]) instead of a GBM path",
    )
    run_parser.add_argument(
        "--days", type=int, default=None,
        help=f"Days to simulate (default {DEFAULT_CONFIG.sim.days})",
    )
    run_parser.add_argument(
        "--steps-per-day", type=int, default=None,
        help=f"Steps per day (default {DEFAULT_CONFIG.sim.steps_per_day})",
    )
    run_parser.add_argument(
        "--initial-price", type=float, default=None,
        help=f"Initial reference price, B per A (default {DEFAULT_CONFIG.sim.initial_price})",
    )
    run_parser.add_argument(
        "--volatility", type=float, default=None,
        help=f"Annualized volatility (default {DEFAULT_CONFIG.sim.volatility})",
    )
    run_parser.add_argument(
        "--drift", type=float, default=None,
        help=f"Annualized drift (default {DEFAULT_CONFIG.sim.drift})",
    )
    run_parser.add_argument(
        "--daily-volume", type=float, default=None,
        help=f"Daily retail volume as a fraction of wealth "
             f"(default {DEFAULT_CONFIG.sim.daily_volume_fraction})",
    )
    run_parser.add_argument(
        "--wealth", type=float, default=None,
        help=f"Initial pool wealth in A (default {DEFAULT_CONFIG.pool.initial_wealth:,.0f})",
    )
    run_parser.add_argument(
        "--fee", type=float, default=None,
        help=f"Fee tier as a fraction (default {DEFAULT_CONFIG.pool.fee_tier})",
    )
    run_parser.add_argument(
        "--arb-mode", default=None,
        choices=sorted(DEFAULT_CONFIG.arbitrage_profiles),
        help=f"Arbitrage aggressiveness (default {DEFAULT_CONFIG.sim.arbitrage_mode})",
    )
    run_parser.add_argument("--curve-model", default=None, choices=CURVE_MODELS)
    run_parser.add_argument("--uniswap-model", default=None, choices=UNISWAP_MODELS)
    run_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    run_parser.add_argument(
        "--strict", action="store_true",
        help="Abort when the StableSwap solver fails to converge",
    )
    run_parser.set_defaults(func=run_command)

    args = parser.parse_args()

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
