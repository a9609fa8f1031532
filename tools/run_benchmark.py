#!/usr/bin/env python3
"""
Tactical Benchmark Runner

Runs the Connect6 tactical suite at several time budgets to track how the
engine's win/block accuracy depends on search time.

Usage:
    python tools/run_benchmark.py [--budgets 0.5,1,2] [--verbose] [--no-forced]
"""

import sys
import argparse
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from connect6_engine.search.config import SearchConfig
from connect6_engine.search.mcts import MCTSEngine
from connect6_engine.utils.testing import run_tactical_suite


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def run_benchmark(budgets: list[float], verbose: bool = False, forced: bool = True, seed: int = 0):
    """
    Run the tactical suite at multiple time budgets.

    Args:
        budgets: Search budgets per position in seconds
        verbose: If True, print detailed results for each position
        forced: If False, disable forced-move detection so MCTS alone is measured
        seed: Engine random seed
    """
    print("=" * 80)
    print("TACTICAL BENCHMARK - HexaStone Connect6 Engine")
    print("=" * 80)
    print(f"Evaluator: Chain lengths (open/blocked ends)")
    print(f"Search: MCTS{' + forced win/block detection' if forced else ''}")
    print(f"Budgets: {budgets}")
    print("=" * 80)
    print()

    all_results = []

    for budget in budgets:
        print(f"\n{'=' * 80}")
        print(f"BUDGET {format_time(budget)}")
        print("=" * 80)

        # Fresh engine per budget so runs are independent
        engine = MCTSEngine(SearchConfig(time_limit=budget, use_forced_checks=forced, seed=seed))

        start_time = time.time()
        result = run_tactical_suite(engine=engine, time_limit=budget, verbose=verbose)
        total_time = time.time() - start_time

        total_iterations = sum(r.iterations for r in result['results'])
        iters_per_sec = total_iterations / total_time if total_time > 0 else 0

        all_results.append({
            'budget': budget,
            'score': result['score'],
            'total': result['total'],
            'percentage': result['percentage'],
            'avg_time': result['avg_time'],
            'total_time': total_time,
            'total_iterations': total_iterations,
            'iters_per_sec': iters_per_sec,
            'results': result['results']
        })

        print(f"\nResults at {format_time(budget)}:")
        print(f"  Solved: {result['score']}/{result['total']} ({result['percentage']:.1f}%)")
        print(f"  Total time: {format_time(total_time)}")
        print(f"  Avg time per position: {format_time(result['avg_time'])}")
        print(f"  Total iterations: {total_iterations:,}")
        print(f"  Iterations/sec: {iters_per_sec:,.0f}")

        failed = [r for r in result['results'] if not r.solved]
        if failed and verbose:
            print(f"\n  Failed positions:")
            for r in failed:
                print(f"    {r.position.id}: goal {r.position.goal}, got {r.found_move} ({r.reason})")

    print("\n" + "=" * 80)
    print("SUMMARY TABLE")
    print("=" * 80)
    print(f"{'Budget':<10} {'Solved':<12} {'%':<8} {'Avg Time':<12} {'Iters/sec':<15}")
    print("-" * 80)

    for r in all_results:
        print(f"{format_time(r['budget']):<10} {r['score']}/{r['total']:<10} {r['percentage']:<7.1f}% {format_time(r['avg_time']):<12} {r['iters_per_sec']:>12,.0f}")

    print("=" * 80)

    position_results = {}
    for r in all_results:
        for pos_result in r['results']:
            position_results.setdefault(pos_result.position.id, []).append(pos_result.solved)

    always_failed = [pos_id for pos_id, results in position_results.items()
                     if not any(results)]

    if always_failed:
        print(f"\nPositions that failed at all budgets: {', '.join(sorted(always_failed))}")

    print("\n" + "=" * 80)
    print("Benchmark complete!")
    print("=" * 80)

    return all_results


def main():
    parser = argparse.ArgumentParser(
        description="Run the Connect6 tactical benchmark at multiple time budgets"
    )
    parser.add_argument(
        "--budgets",
        type=str,
        default="0.5,1,2",
        help="Comma-separated list of per-position budgets in seconds (default: 0.5,1,2)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print detailed results for each position"
    )
    parser.add_argument(
        "--no-forced",
        action="store_true",
        help="Disable forced win/block detection"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Engine random seed (default: 0)"
    )

    args = parser.parse_args()

    try:
        budgets = [float(b.strip()) for b in args.budgets.split(",")]
    except ValueError:
        print("Error: budgets must be comma-separated numbers")
        sys.exit(1)

    try:
        run_benchmark(budgets, verbose=args.verbose, forced=not args.no_forced, seed=args.seed)
    except KeyboardInterrupt:
        print("\n\nBenchmark interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError running benchmark: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
