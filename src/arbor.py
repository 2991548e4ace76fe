#!/usr/bin/env python3
"""
Arbor Property-Based Test Engine
Copyright (c) 2026 Alex P. Slaby — MIT License

Front door for the engine: re-exports the public API and provides a
small command line.

Usage:
  python arbor.py demo [seed]                 Run the built-in properties
  python arbor.py check <demo> [seed]         Check one property, JSON report
  python arbor.py sample <gen> [times] [seed] Print generated values
  python arbor.py tree <gen> [seed]           Show a value's shrink tree
  python arbor.py help                        Show this help
"""

import json
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from arbor_random import RandomState, RandomOutput, DEFAULT_SEED
from arbor_lazy import LazySeq
from arbor_tree import Tree, render_tree
from arbor_shrink import (
    shrink_towards, halves, removes, shrink_list, shrink_one,
    sequence_shrink, sequence_shrink_one, sequence_shrink_list,
)
from arbor_gen import Gen, Arbitrary, ArborError, GenConfigError, RetriesExhausted
from arbor_check import (
    Property, CheckOptions, CheckResult, ShrinkResult, shrink_search, sample,
)
import arbor_generators as generators


VERSION = "0.1.0"

DEMO_SEED = 1234567890


# ═══════════════════════════════════════════════════════════════
# DEMO PROPERTIES
# ═══════════════════════════════════════════════════════════════

def _divides_cleanly(a, b):
    return (a // b) * b + a % b == a


def make_demos():
    """Build the demo properties: (key, description, property)."""
    ints = generators.integers()
    nats = generators.non_negative_integers()
    demos = []

    demos.append(("below-42", "every natural number is below 42",
                  Property.for_all(nats, lambda n: n < 42)))

    demos.append(("reverse", "reversing a list twice gives it back",
                  Property.for_all(ints.array(), lambda xs: xs[::-1][::-1] == xs)))

    demos.append(("small-sum", "lists of naturals sum to less than 100",
                  Property.for_all(nats.array(), lambda xs: sum(xs) < 100)))

    demos.append(("sort-idempotent", "sorting twice equals sorting once",
                  Property.for_all(ints.array(), lambda xs: sorted(sorted(xs)) == sorted(xs))))

    demos.append(("division", "floor division and modulo recombine",
                  Property.for_all2(ints, ints, _divides_cleanly)))

    demos.append(("no-vowels", "alphanumeric strings contain no 'e'",
                  Property.for_all(generators.alphanumeric_strings(), lambda s: 'e' not in s)))

    return demos


GENERATORS = {
    "bool": generators.booleans,
    "int": generators.integers,
    "nat": generators.non_negative_integers,
    "char": generators.ascii_chars,
    "string": generators.alphanumeric_strings,
    "ints": lambda: generators.integers().array(),
    "object": lambda: generators.objects(generators.integers()),
    "json": generators.json_values,
}


# ═══════════════════════════════════════════════════════════════
# FORMATTING
# ═══════════════════════════════════════════════════════════════

def format_result(result: CheckResult) -> str:
    """Human-readable summary of a check."""
    if result.result:
        return f"✓ OK, passed {result.num_tests} tests (seed {result.seed})"
    lines = [
        f"✗ Falsified after {result.num_tests} tests (seed {result.seed}, size {result.failing_size})",
        f"    failing:  {result.fail!r}",
        f"    smallest: {result.shrunk.smallest!r}",
        f"    shrink:   depth {result.shrunk.depth}, "
        f"{result.shrunk.total_nodes_visited} nodes visited",
    ]
    if result.shrunk.exception:
        lines.append(f"    raised:   {result.shrunk.exception}")
    return '\n'.join(lines)


# ═══════════════════════════════════════════════════════════════
# CLI
# ═══════════════════════════════════════════════════════════════

HEADER = """\
╔═══════════════════════════════════════════════════════════╗
║  Arbor Property-Based Test Engine v0.1                    ║
║  Copyright (c) 2026 Alex P. Slaby — MIT License           ║
╚═══════════════════════════════════════════════════════════╝"""


def _int_arg(args, index, default):
    if len(args) <= index:
        return default
    try:
        return int(args[index])
    except ValueError:
        print(f"Error: expected an integer, got '{args[index]}'")
        sys.exit(2)


def _lookup(table, name, kind):
    if name not in table:
        print(f"Error: unknown {kind} '{name}'. Available: {', '.join(table)}")
        sys.exit(2)
    return table[name]


def cmd_demo(seed=DEMO_SEED):
    print(HEADER)
    print()

    for i, (key, description, prop) in enumerate(make_demos(), 1):
        print(f"{'─' * 59}")
        print(f"  Demo {i}: {description}  [{key}]")
        print(f"{'─' * 59}")
        result = prop.check(seed=seed)
        for line in format_result(result).split('\n'):
            print(f"  {line}")
        print()


def cmd_check(name, seed=DEMO_SEED):
    demos = {key: prop for key, _, prop in make_demos()}
    prop = _lookup(demos, name, "demo")
    result = prop.check(seed=seed)
    print(json.dumps(result.to_dict(), indent=2, default=str))
    sys.exit(0 if result.result else 1)


def cmd_sample(name, times=10, seed=DEMO_SEED):
    arb = _lookup(GENERATORS, name, "generator")()
    for value in arb.sample(times=times, seed=seed):
        print(f"  {value!r}")


def cmd_tree(name, seed=DEMO_SEED):
    arb = _lookup(GENERATORS, name, "generator")()
    _, tree = arb.generator.run(RandomState.from_seed(seed), 10)
    print(render_tree(tree, max_depth=2, max_children=6))


def cmd_help():
    print(HEADER)
    print()
    print("  Usage:")
    print("    python arbor.py demo [seed]                 Run the built-in properties")
    print("    python arbor.py check <demo> [seed]         Check one property, JSON report")
    print("    python arbor.py sample <gen> [times] [seed] Print generated values")
    print("    python arbor.py tree <gen> [seed]           Show a value's shrink tree")
    print("    python arbor.py help                        Show this help")
    print()
    print(f"  Demos:      {', '.join(key for key, _, _ in make_demos())}")
    print(f"  Generators: {', '.join(GENERATORS)}")
    print()


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        cmd_help()
        return

    cmd = args[0].lower()

    if cmd == "demo":
        cmd_demo(_int_arg(args, 1, DEMO_SEED))
    elif cmd == "check" and len(args) >= 2:
        cmd_check(args[1], _int_arg(args, 2, DEMO_SEED))
    elif cmd == "sample" and len(args) >= 2:
        cmd_sample(args[1], _int_arg(args, 2, 10), _int_arg(args, 3, DEMO_SEED))
    elif cmd == "tree" and len(args) >= 2:
        cmd_tree(args[1], _int_arg(args, 2, DEMO_SEED))
    else:
        cmd_help()


if __name__ == "__main__":
    main()
