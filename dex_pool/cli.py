"""Command-line interface for quoting and simulating a pool."""

import argparse
from dataclasses import replace
import logging
import sys
from typing import Optional

from dex_pool.config import (
    DEFAULT_SETTINGS,
    DEFAULT_SIMULATION,
    resolve_log_level,
    resolve_seed,
)
from dex_pool.core.errors import PoolError
from dex_pool.core.math import quote_amount_out, quote_price
from dex_pool.market.simulation import PoolSimulation


def _format_fixed(value: int, scale: int) -> str:
    whole, frac = divmod(value, scale)
    digits = len(str(scale)) - 1
    return f"{whole}.{frac:0{digits}d}"


def quote_command(args: argparse.Namespace) -> int:
    """Print the output of a swap against the given reserves."""
    try:
        amount_out = quote_amount_out(
            args.amount_in,
            args.reserve_in,
            args.reserve_out,
            DEFAULT_SETTINGS.fee_numerator,
            DEFAULT_SETTINGS.fee_denominator,
        )
    except PoolError as e:
        print(f"Error: {e}")
        return 1
    print(amount_out)
    return 0


def price_command(args: argparse.Namespace) -> int:
    """Print the fixed-point price of X per unit of Y."""
    try:
        price = quote_price(args.reserve_x, args.reserve_y, DEFAULT_SETTINGS.price_scale)
    except PoolError as e:
        print(f"Error: {e}")
        return 1
    print(price)
    if args.human:
        print(_format_fixed(price, DEFAULT_SETTINGS.price_scale))
    return 0


def simulate_command(args: argparse.Namespace) -> int:
    """Run random flow against a fresh pool and report the outcome."""
    settings = DEFAULT_SIMULATION
    if args.steps is not None:
        settings = replace(settings, n_steps=args.steps)
    if args.initial_x is not None:
        settings = replace(settings, initial_x=args.initial_x)
    if args.initial_y is not None:
        settings = replace(settings, initial_y=args.initial_y)
    seed = args.seed if args.seed is not None else resolve_seed()

    print(f"Running {settings.n_steps} steps (seed={seed})...")
    try:
        result = PoolSimulation(settings=settings, seed=seed).run()
    except PoolError as e:
        print(f"Error: {e}")
        return 1

    final = result.final
    print(f"\nReserves: X={final.reserve_x} Y={final.reserve_y}")
    print(f"Claims:   {final.total_claims} across {len(final.balances)} holders")
    print(f"Swaps:    {result.swaps} executed, {result.rejected_swaps} rejected")
    print(f"Liquidity: {result.deposits} deposits, {result.withdrawals} withdrawals")
    print(f"Volume in: X={result.volume_x_in} Y={result.volume_y_in}")
    print(f"k growth: {result.k_growth}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Constant product pool - quote trades and simulate flow",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dex-pool quote 100 1000 1000
  dex-pool price 1000 500 --human
  dex-pool simulate --steps 500 --seed 7
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    quote_parser = subparsers.add_parser("quote", help="Quote a swap output")
    quote_parser.add_argument("amount_in", type=int, help="Gross input amount")
    quote_parser.add_argument("reserve_in", type=int, help="Reserve of the input asset")
    quote_parser.add_argument("reserve_out", type=int, help="Reserve of the output asset")
    quote_parser.set_defaults(func=quote_command)

    price_parser = subparsers.add_parser("price", help="Fixed-point price of X per Y")
    price_parser.add_argument("reserve_x", type=int, help="Reserve of X")
    price_parser.add_argument("reserve_y", type=int, help="Reserve of Y")
    price_parser.add_argument(
        "--human",
        action="store_true",
        help="Also print the price with a decimal point",
    )
    price_parser.set_defaults(func=price_command)

    sim_parser = subparsers.add_parser("simulate", help="Simulate random flow against a pool")
    sim_parser.add_argument(
        "--steps",
        type=int,
        default=None,
        help="Number of steps (defaults to shared simulation config)",
    )
    sim_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (defaults to DEX_POOL_SEED, else random)",
    )
    sim_parser.add_argument(
        "--initial-x",
        type=int,
        default=None,
        help="Initial X liquidity (defaults to shared simulation config)",
    )
    sim_parser.add_argument(
        "--initial-y",
        type=int,
        default=None,
        help="Initial Y liquidity (defaults to shared simulation config)",
    )
    sim_parser.set_defaults(func=simulate_command)

    args = parser.parse_args(argv)
    logging.basicConfig(level=resolve_log_level(), format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
