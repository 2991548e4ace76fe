#!/usr/bin/env python3
"""
Arbor Benchmark Suite
Copyright (c) 2026 Alex P. Slaby — MIT License

Times the engine's hot paths: drawing random numbers, generating
values with their shrink trees, walking trees, and full checks
including shrinking.

Usage:
  python bench.py          Run all benchmarks
  python bench.py --quick  Quick mode (fewer runs, smaller inputs)
"""

import sys, os, time, statistics
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'src'))

from arbor_random import RandomState
from arbor_tree import Tree
from arbor_shrink import towards, shrink_list
from arbor_gen import Arbitrary
from arbor_check import Property, sample
import arbor_generators as generators


# ═══════════════════════════════════════════════════════════════
# TIMING INFRASTRUCTURE
# ═══════════════════════════════════════════════════════════════

def bench(name, fn, runs=5, warmup=1):
    """Run fn() multiple times, report statistics."""
    for _ in range(warmup):
        try:
            fn()
        except RecursionError:
            return {"name": name, "error": "RecursionError"}

    times = []
    result = None
    for _ in range(runs):
        t0 = time.perf_counter()
        result = fn()
        t1 = time.perf_counter()
        times.append((t1 - t0) * 1000)  # ms

    return {
        "name": name,
        "result": result,
        "runs": runs,
        "mean_ms": statistics.mean(times),
        "median_ms": statistics.median(times),
        "stdev_ms": statistics.stdev(times) if len(times) > 1 else 0,
        "min_ms": min(times),
        "max_ms": max(times),
    }


def fmt_bench(b):
    if "error" in b:
        return f"  {b['name']:40s}  ERROR: {b['error']}"
    return (f"  {b['name']:40s}  "
            f"{b['mean_ms']:8.2f} ms  "
            f"(±{b['stdev_ms']:.2f}, "
            f"min={b['min_ms']:.2f}, "
            f"max={b['max_ms']:.2f})")


# ═══════════════════════════════════════════════════════════════
# WORKLOADS
# ═══════════════════════════════════════════════════════════════

def bench_draws(n):
    """n 32-bit draws from one threaded state."""
    def run():
        rng = RandomState.from_seed(1)
        for _ in range(n):
            rng, _ = rng.next()
        return n
    return run


def bench_splits(n):
    def run():
        rng = RandomState.from_seed(1)
        for _ in range(n):
            rng, _ = rng.split()
        return n
    return run


def bench_sample(arb, n):
    def run():
        return len(sample(arb, times=n, seed=1))
    return run


def bench_walk_tree(x, depth):
    """Count the nodes of an integer shrink tree, down to `depth`."""
    tree = Tree.unfold_tree(lambda a: a, towards(0), x)

    def count(t, d):
        if d == 0:
            return 1
        return 1 + sum(count(c, d - 1) for c in t.shrinks)

    def run():
        return count(tree, depth)
    return run


def bench_shrink_list(n):
    def run():
        return sum(1 for _ in shrink_list(list(range(n))))
    return run


def bench_check(prop, times):
    """Full check; returns the shrink search's visited count (0 if passing)."""
    def run():
        result = prop.check(times=times, seed=1234567890)
        return result.shrunk.total_nodes_visited if result.shrunk else 0
    return run


# ═══════════════════════════════════════════════════════════════
# MAIN
# ═══════════════════════════════════════════════════════════════

def run_benchmarks(quick=False):
    print("╔═══════════════════════════════════════════════════════════╗")
    print("║  Arbor Benchmark Suite                                    ║")
    print("║  Copyright (c) 2026 Alex P. Slaby — MIT License           ║")
    print("╚═══════════════════════════════════════════════════════════╝\n")

    draws = 10_000 if quick else 100_000
    samples = 50 if quick else 200
    tree_depth = 2 if quick else 3
    times = 100 if quick else 500
    runs = 3 if quick else 5

    nats = generators.non_negative_integers()
    results = []

    def report(r):
        results.append(r)
        print(fmt_bench(r))
        if "result" in r:
            print(f"    → result: {r['result']}")

    # ── Randomness ──
    print("  ── Random source ──\n")
    report(bench(f"{draws} draws", bench_draws(draws), runs=runs))
    report(bench(f"{draws} splits", bench_splits(draws), runs=runs))

    # ── Generation ──
    print("\n  ── Generation ──\n")
    report(bench(f"sample {samples} integers", bench_sample(generators.integers(), samples), runs=runs))
    report(bench(f"sample {samples} int arrays", bench_sample(generators.integers().array(), samples), runs=runs))
    report(bench(f"sample {samples} strings", bench_sample(generators.alphanumeric_strings(), samples), runs=runs))
    report(bench(f"sample {samples} JSON values", bench_sample(generators.json_values(), samples), runs=runs))
    chained = Arbitrary.int_within(1, 20).chain(lambda n: nats.array_with_length(n))
    report(bench(f"sample {samples} chained arrays", bench_sample(chained, samples), runs=runs))

    # ── Shrink trees ──
    print("\n  ── Shrink trees ──\n")
    report(bench(f"walk int tree 10^6, depth {tree_depth}", bench_walk_tree(10**6, tree_depth), runs=runs))
    report(bench("shrink_list of 1000", bench_shrink_list(1000), runs=runs))

    # ── Checks ──
    print("\n  ── Checks ──\n")
    report(bench(f"passing check, {times} trials",
                 bench_check(Property.for_all(nats, lambda n: n >= 0), times), runs=runs))
    report(bench("failing check n < 42 + shrink",
                 bench_check(Property.for_all(nats, lambda n: n < 42), times), runs=runs))
    report(bench("failing check sum(xs) < 100 + shrink",
                 bench_check(Property.for_all(nats.array(), lambda xs: sum(xs) < 100), times),
                 runs=runs))
    print()

    return results


if __name__ == "__main__":
    quick = "--quick" in sys.argv
    run_benchmarks(quick=quick)
