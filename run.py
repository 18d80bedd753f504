#!/usr/bin/env python3
"""
run.py - Command-line entry point for the tree packer

Usage:
    python run.py [--count 10] [--strategy greedy|random] [--seed 42]
    python run.py --sweep 50 --strategy random --seed 7

Modes:
    default:   ring radius < 150, 1000 random attempts, up to 200 trees
    extended:  ring radius < 400, 5000 random attempts, up to 1000 trees
"""
import sys
import time
import argparse

from treepack.packing import PackingSolver, STRATEGIES, STRATEGY_LABELS, run_packing
from treepack.strategies import PackingConfig
from treepack.validate import validate_packing, print_packing_summary, print_score_summary
from treepack.io_utils import export_filename, get_output_path, write_csv, validate_csv_format


def get_config(mode: str) -> PackingConfig:
    """Get configuration for specified mode."""
    if mode == "extended":
        return PackingConfig.extended_mode()
    return PackingConfig.default_mode()


def main(
    count: int = 10,
    strategy: str = "greedy",
    mode: str = "default",
    seed=None,
    output_dir=None,
    export: bool = True,
    max_radius=None,
    max_attempts=None
):
    """Pack `count` trees, validate, print results and export CSV."""

    print("=" * 70)
    print("TREE PACKING OPTIMIZER")
    print("=" * 70)
    print(f"Trees: {count}")
    print(f"Algorithm: {STRATEGY_LABELS[strategy]}")
    print(f"Mode: {mode}")
    print(f"Seed: {seed}")
    print()

    config = get_config(mode)
    config.seed = seed
    if max_radius is not None:
        config.max_radius = max_radius
    if max_attempts is not None:
        config.max_attempts = max_attempts

    start_time = time.time()
    packing = run_packing(count, strategy, config, verbose=True)
    elapsed = time.time() - start_time
    print(f"Completed in {elapsed:.2f}s")
    print()

    result = validate_packing(packing)
    if result.valid:
        print("✓ No overlaps")
    else:
        print(f"✗ Invalid packing: {result.error_message}")

    print_packing_summary(packing)

    if export and packing.placed_count:
        output_path = get_output_path(export_filename(packing), output_dir)
        created_path = write_csv(packing, output_path)
        print(f"✓ Saved to: {created_path}")

        is_valid, error = validate_csv_format(created_path)
        if is_valid:
            print("✓ Format validated")
        else:
            print(f"⚠ Format issue: {error}")
    elif export:
        print("Nothing to export")

    return packing


def sweep(max_n: int, strategy: str = "greedy", mode: str = "default", seed=None):
    """Pack every count 1..max_n and print the score summary."""
    config = get_config(mode)
    solver = PackingSolver(strategy=strategy, config=config, seed=seed)

    start_time = time.time()
    packings = solver.solve_all(max_n=max_n, verbose=True)
    print(f"Sweep completed in {time.time() - start_time:.1f}s")
    print()
    print_score_summary(packings)
    return packings


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tree packing optimizer")
    parser.add_argument("--count", type=int, default=10, help="Number of trees to place")
    parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGIES),
        default="greedy",
        help="Placement algorithm"
    )
    parser.add_argument(
        "--mode",
        choices=["default", "extended"],
        default="default",
        help="Search limits"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (random strategy)")
    parser.add_argument("--max-radius", type=float, default=None, help="Override spiral radius cap")
    parser.add_argument("--max-attempts", type=int, default=None, help="Override random attempt cap")
    parser.add_argument("--sweep", type=int, default=None, metavar="MAX_N",
                        help="Pack every count 1..MAX_N instead of a single run")
    parser.add_argument("--output-dir", default=None, help="Directory for the CSV export")
    parser.add_argument("--no-export", action="store_true", help="Skip CSV export")
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    try:
        if args.sweep is not None:
            sweep(args.sweep, strategy=args.strategy, mode=args.mode, seed=args.seed)
        else:
            main(
                count=args.count,
                strategy=args.strategy,
                mode=args.mode,
                seed=args.seed,
                output_dir=args.output_dir,
                export=not args.no_export,
                max_radius=args.max_radius,
                max_attempts=args.max_attempts,
            )
    except ValueError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(2)
