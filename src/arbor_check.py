"""
Arbor: Property Check Engine
Copyright (c) 2026 Alex P. Slaby — MIT License

Runs a property over generated inputs:
  - Sampling: trial i runs at size min(i, max_size) from a split of the
    run's random state; stops at the first failing trial
  - Shrinking: greedy depth-first descent of the failing value's tree,
    committing to the first child that still fails (no backtracking)
  - Replay: the seed alone reproduces every trial and shrink step

A predicate fails by returning a falsy value other than None, or by
raising. Exceptions are recorded on the result, not propagated.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from arbor_random import RandomState
from arbor_tree import Tree
from arbor_gen import Arbitrary, GenConfigError

_logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
# CONFIGURATION
# ═══════════════════════════════════════════════════════════════

class CheckOptions:
    """How many trials to run, how large inputs may grow, and the seed."""

    def __init__(self, times=100, max_size=200, seed=None):
        for name, value in (("times", times), ("max_size", max_size)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise GenConfigError(f"{name} must be a non-negative int, got {value!r}", value)
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise GenConfigError(f"seed must be an int, got {seed!r}", seed)
        self.times = times
        self.max_size = max_size
        self.seed = seed

    @classmethod
    def default(cls):
        return cls(times=100, max_size=200)

    @classmethod
    def quick(cls):
        """Fewer, smaller trials, for tight edit-test loops."""
        return cls(times=25, max_size=50)

    @classmethod
    def thorough(cls):
        return cls(times=1000, max_size=200)

    def replace(self, **changes):
        values = self.to_dict()
        values.update({k: v for k, v in changes.items() if v is not None})
        return CheckOptions(**values)

    def resolve_seed(self) -> int:
        """The configured seed, or one taken from the clock."""
        return self.seed if self.seed is not None else int(time.time())

    def size_at(self, trial: int) -> int:
        return min(trial, self.max_size)

    def to_dict(self):
        return {
            "times": self.times,
            "max_size": self.max_size,
            "seed": self.seed,
        }

    def __repr__(self):
        return f"CheckOptions(times={self.times}, max_size={self.max_size}, seed={self.seed})"


def _merge_options(options, default, **overrides) -> CheckOptions:
    if options is None:
        options = default
    return options.replace(**overrides)


# ═══════════════════════════════════════════════════════════════
# RESULTS
# ═══════════════════════════════════════════════════════════════

@dataclass
class ShrinkResult:
    """The end of a shrink search."""
    smallest: list
    depth: int
    total_nodes_visited: int
    exception: Optional[str] = None
    result: bool = False

    def to_dict(self):
        d = {
            "result": self.result,
            "smallest": self.smallest,
            "depth": self.depth,
            "total-nodes-visited": self.total_nodes_visited,
        }
        if self.exception is not None:
            d["exception"] = self.exception
        return d


@dataclass
class CheckResult:
    """Outcome of Property.check."""
    result: bool
    num_tests: int
    seed: int
    fail: Optional[list] = None
    failing_size: Optional[int] = None
    shrunk: Optional[ShrinkResult] = None
    exception: Optional[str] = None

    @property
    def smallest(self):
        return self.shrunk.smallest if self.shrunk is not None else None

    def to_dict(self):
        d = {
            "result": self.result,
            "num-tests": self.num_tests,
            "seed": self.seed,
        }
        if not self.result:
            d["fail"] = self.fail
            d["failing-size"] = self.failing_size
            d["shrunk"] = self.shrunk.to_dict()
            if self.exception is not None:
                d["exception"] = self.exception
        return d


# ═══════════════════════════════════════════════════════════════
# EVALUATION
# ═══════════════════════════════════════════════════════════════

def evaluate(predicate: Callable[..., Any], args) -> tuple:
    """
    Call predicate(*args). Returns (passed, exception_text).

    None counts as a pass so assertion-style test functions work.
    """
    try:
        outcome = predicate(*args)
    except Exception as e:
        _logger.debug("Predicate raised %r for %r", e, args)
        return False, repr(e)
    return (outcome is None or bool(outcome)), None


def shrink_search(tree: Tree, check: Callable[[Any], tuple],
                  exception: Optional[str] = None) -> ShrinkResult:
    """
    Greedy descent from a failing root.

    Children are tried in order; the first one that also fails becomes the
    current node and its untried siblings are abandoned. Stops when no
    child of the current node fails. Every child evaluated counts as
    visited; each commitment adds one to the depth.
    """
    current = tree
    depth = 0
    visited = 0
    while True:
        for child in current.shrinks:
            visited += 1
            passed, exc = check(child.outcome)
            if not passed:
                current = child
                exception = exc
                depth += 1
                _logger.debug("Shrink step %d: %r", depth, child.outcome)
                break
        else:
            return ShrinkResult(
                smallest=current.outcome,
                depth=depth,
                total_nodes_visited=visited,
                exception=exception,
            )


# ═══════════════════════════════════════════════════════════════
# PROPERTY
# ═══════════════════════════════════════════════════════════════

class Property:
    """A predicate bound to the arbitraries that feed its arguments."""

    def __init__(self, arbitraries, predicate: Callable[..., Any]):
        arbitraries = list(arbitraries)
        if not arbitraries:
            raise GenConfigError("A property needs at least one arbitrary")
        if not callable(predicate):
            raise GenConfigError(f"Predicate must be callable, got {predicate!r}", predicate)
        # fixed arity: arguments shrink in place, never added or removed
        self.arbitrary = Arbitrary.tuple_of(*arbitraries)
        self.arity = len(arbitraries)
        self.predicate = predicate

    @classmethod
    def for_all(cls, arb, fn):
        return cls([arb], fn)

    @classmethod
    def for_all2(cls, arb1, arb2, fn):
        return cls([arb1, arb2], fn)

    @classmethod
    def for_all3(cls, arb1, arb2, arb3, fn):
        return cls([arb1, arb2, arb3], fn)

    @classmethod
    def for_all4(cls, arb1, arb2, arb3, arb4, fn):
        return cls([arb1, arb2, arb3, arb4], fn)

    @classmethod
    def for_all5(cls, arb1, arb2, arb3, arb4, arb5, fn):
        return cls([arb1, arb2, arb3, arb4, arb5], fn)

    def _check_args(self, args) -> tuple:
        return evaluate(self.predicate, args)

    def check(self, options: CheckOptions = None, *, times=None, max_size=None,
              seed=None) -> CheckResult:
        """Run up to `times` trials; shrink the first failure."""
        opts = _merge_options(options, CheckOptions.default(),
                              times=times, max_size=max_size, seed=seed)
        seed = opts.resolve_seed()
        rng = RandomState.from_seed(seed)
        gen = self.arbitrary.generator

        for trial in range(opts.times):
            size = opts.size_at(trial)
            rng, sub = rng.split()
            _, tree = gen.run(sub, size)
            passed, exc = self._check_args(tree.outcome)
            if passed:
                continue

            num_tests = trial + 1
            _logger.info("Falsified after %d tests (size %d, seed %d): %r",
                         num_tests, size, seed, list(tree.outcome))
            shrunk = shrink_search(tree, self._check_args, exc)
            shrunk.smallest = list(shrunk.smallest)
            _logger.info("Shrunk to %r (depth %d, %d nodes visited)",
                         shrunk.smallest, shrunk.depth, shrunk.total_nodes_visited)
            return CheckResult(
                result=False,
                num_tests=num_tests,
                seed=seed,
                fail=list(tree.outcome),
                failing_size=size,
                shrunk=shrunk,
                exception=exc,
            )

        return CheckResult(result=True, num_tests=opts.times, seed=seed)


def sample(arb: Arbitrary, options: CheckOptions = None, *, times=None,
           max_size=None, seed=None) -> list:
    """Generate plain values with the same size schedule as check (10 by default)."""
    opts = _merge_options(options, CheckOptions(times=10),
                          times=times, max_size=max_size, seed=seed)
    rng = RandomState.from_seed(opts.resolve_seed())
    values = []
    for i in range(opts.times):
        rng, sub = rng.split()
        _, tree = arb.generator.run(sub, opts.size_at(i))
        values.append(tree.outcome)
    return values
