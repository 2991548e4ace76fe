"""
Arbor: Generators
Copyright (c) 2026 Alex P. Slaby — MIT License

Two layers:
  - Gen:        a function (RandomState, size) → (RandomState, value)
  - Arbitrary:  a Gen of Trees, so every value carries its own shrinks

Composition threads the random state left to right, so the same state
and size always give the same value. Size is a hint bounding magnitude
and length; only sized/resize/scale change it.
"""

import bisect
import math
from typing import Any, Callable

from arbor_random import RandomState, DEFAULT_SEED
from arbor_lazy import LazySeq
from arbor_tree import Tree
from arbor_shrink import towards, sequence_shrink_one, sequence_shrink_list


# Size used by generate() unless the generator was resized.
GENERATE_SIZE = 30


class ArborError(Exception):
    """Base class for engine errors."""
    pass

class GenConfigError(ArborError, ValueError):
    """A generator builder was given arguments it cannot work with."""
    def __init__(self, message, value=None):
        super().__init__(message)
        self.value = value

class RetriesExhausted(ArborError):
    def __init__(self, max_tries):
        super().__init__(f"Retries exhausted: no value satisfied the predicate "
                         f"within {max_tries} tries")
        self.max_tries = max_tries


def _identity(x):
    return x


def _check_int(name, value, minimum=None):
    if isinstance(value, bool) or not isinstance(value, int):
        raise GenConfigError(f"{name} must be an int, got {value!r}", value)
    if minimum is not None and value < minimum:
        raise GenConfigError(f"{name} must be >= {minimum}, got {value}", value)


def _cumulative(weights) -> list:
    """Running totals of a weight table; rejects negative or all-zero tables."""
    totals = []
    running = 0
    for w in weights:
        _check_int("weight", w, 0)
        running += w
        totals.append(running)
    if running <= 0:
        raise GenConfigError("Weights must sum to a positive number", list(weights))
    return totals


# ═══════════════════════════════════════════════════════════════
# GEN: RANDOM VALUES
# ═══════════════════════════════════════════════════════════════

class Gen:
    """A deterministic function of (random state, size)."""
    __slots__ = ('_run',)

    def __init__(self, run: Callable[[RandomState, int], tuple]):
        self._run = run

    def run(self, rng: RandomState, size: int) -> tuple:
        """Returns (next_state, value)."""
        if size < 0:
            raise ValueError(f"Generator size must be non-negative, got {size}")
        return self._run(rng, size)

    @staticmethod
    def of(value: Any) -> "Gen":
        """Always `value`; consumes no randomness."""
        return Gen(lambda rng, size: (rng, value))

    def map(self, f: Callable[[Any], Any]) -> "Gen":
        def run(rng, size):
            rng, value = self.run(rng, size)
            return rng, f(value)
        return Gen(run)

    def chain(self, f: Callable[[Any], "Gen"]) -> "Gen":
        def run(rng, size):
            rng, value = self.run(rng, size)
            return f(value).run(rng, size)
        return Gen(run)

    @staticmethod
    def sized(f: Callable[[int], "Gen"]) -> "Gen":
        """Build a generator from the ambient size."""
        return Gen(lambda rng, size: f(size).run(rng, size))

    def resize(self, size: int) -> "Gen":
        """Ignore the ambient size and always use `size`."""
        _check_int("size", size, 0)
        return Gen(lambda rng, _size: self.run(rng, size))

    def scale(self, f: Callable[[int], int]) -> "Gen":
        """Run with f(size) instead of size."""
        return Gen(lambda rng, size: self.run(rng, f(size)))

    @staticmethod
    def choose_int(lo: int, hi: int) -> "Gen":
        """Uniform integers from the closed interval [lo, hi]."""
        _check_int("lo", lo)
        _check_int("hi", hi)
        if lo > hi:
            raise GenConfigError(f"Empty range: min {lo} > max {hi}", (lo, hi))
        return Gen(lambda rng, size: rng.choose_int(lo, hi))

    @staticmethod
    def uniform() -> "Gen":
        """Floats approximately uniform on [0, 1)."""
        return Gen(lambda rng, size: rng.uniform())

    def as_array_with_length(self, length: int) -> "Gen":
        _check_int("length", length, 0)

        def run(rng, size):
            values = []
            for _ in range(length):
                rng, value = self.run(rng, size)
                values.append(value)
            return rng, values
        return Gen(run)

    def as_array(self) -> "Gen":
        """Arrays whose length is uniform in [0, size]."""
        return Gen.sized(lambda n: Gen.choose_int(0, n).chain(self.as_array_with_length))

    @staticmethod
    def sequence(gens) -> "Gen":
        """Run each generator in order, collecting the values in a list."""
        gens = list(gens)

        def run(rng, size):
            values = []
            for g in gens:
                rng, value = g.run(rng, size)
                values.append(value)
            return rng, values
        return Gen(run)

    @staticmethod
    def one_of(choice: "Gen", *choices: "Gen") -> "Gen":
        """Pick one of the generators uniformly. At least one is required."""
        options = (choice,) + choices
        return Gen.choose_int(0, len(options) - 1).chain(lambda idx: options[idx])

    @staticmethod
    def elements(choice: Any, *choices: Any) -> "Gen":
        """Pick one of the values uniformly. At least one is required."""
        options = (choice,) + choices
        return Gen.choose_int(0, len(options) - 1).map(lambda idx: options[idx])

    @staticmethod
    def weighted_index(weights) -> "Gen":
        """Index into `weights`, each index drawn with probability weight / total."""
        totals = _cumulative(weights)
        return Gen.choose_int(0, totals[-1] - 1).map(
            lambda r: bisect.bisect_right(totals, r))

    @staticmethod
    def one_of_weighted(choice: tuple, *choices: tuple) -> "Gen":
        """Like one_of, with (weight, generator) pairs."""
        options = (choice,) + choices
        return Gen.weighted_index([w for w, _ in options]).chain(lambda idx: options[idx][1])

    @staticmethod
    def elements_weighted(choice: tuple, *choices: tuple) -> "Gen":
        """Like elements, with (weight, value) pairs."""
        options = (choice,) + choices
        return Gen.weighted_index([w for w, _ in options]).map(lambda idx: options[idx][1])

    def generate(self) -> Any:
        """Run once from the default seed at size 30."""
        _, value = self.run(RandomState.from_seed(DEFAULT_SEED), GENERATE_SIZE)
        return value

    # ═══════════════════════════════════════════
    # TREE TRAVERSAL
    # ═══════════════════════════════════════════

    @staticmethod
    def traverse_tree(f: Callable[[Any], "Gen"], tree: Tree) -> "Gen":
        """
        Run f over every node of `tree`, producing a Gen of Trees.

        The root uses the incoming state; the shrink children draw from a
        split-off stream, so exploring shrinks never disturbs the values
        generated after this one.
        """
        return f(tree.outcome).chain(
            lambda b: Gen._traverse_forest(f, tree.shrinks).map(
                lambda shrinks: Tree(b, shrinks)))

    @staticmethod
    def _traverse_forest(f, forest: LazySeq) -> "Gen":
        def run(rng, size):
            rng, sub = rng.split()

            def produce():
                subrng = sub
                for tree in forest:
                    subrng, traversed = Gen.traverse_tree(f, tree).run(subrng, size)
                    yield traversed
            return rng, LazySeq(produce)
        return Gen(run)


# ═══════════════════════════════════════════════════════════════
# ARBITRARY: VALUES WITH SHRINK TREES ATTACHED
# ═══════════════════════════════════════════════════════════════

def _require_arbitrary(arb):
    if not isinstance(arb, Arbitrary):
        raise GenConfigError(f"Expected an Arbitrary, got {type(arb).__name__}", arb)
    return arb


class Arbitrary:
    """A generator whose values carry their shrink trees through composition."""
    __slots__ = ('generator',)

    def __init__(self, generator: Gen):
        self.generator = generator

    # ── Construction ──

    @staticmethod
    def of(value: Any) -> "Arbitrary":
        return Arbitrary(Gen.of(Tree.of(value)))

    @staticmethod
    def from_gen(gen: Gen) -> "Arbitrary":
        """Lift a plain generator; its values never shrink."""
        return Arbitrary(gen.map(Tree.of))

    @staticmethod
    def from_gen_with_shrink(gen: Gen, shrink: Callable[[Any], LazySeq]) -> "Arbitrary":
        """Lift a plain generator, unfolding each value's tree with `shrink`."""
        return Arbitrary(gen.map(lambda a: Tree.unfold_tree(_identity, shrink, a)))

    @staticmethod
    def int_within(lo: int, hi: int, origin: int = None) -> "Arbitrary":
        """
        Uniform integers in [lo, hi], shrinking toward `origin`.

        `origin` defaults to `lo` and must lie inside the range.
        """
        gen = Gen.choose_int(lo, hi)
        if origin is None:
            origin = lo
        _check_int("origin", origin)
        if not lo <= origin <= hi:
            raise GenConfigError(f"Origin {origin} outside [{lo}, {hi}]", origin)
        return Arbitrary.from_gen_with_shrink(gen, towards(origin))

    @staticmethod
    def sized(f: Callable[[int], "Arbitrary"]) -> "Arbitrary":
        return Arbitrary(Gen.sized(lambda size: _require_arbitrary(f(size)).generator))

    # ── Composition ──

    def map(self, f: Callable[[Any], Any]) -> "Arbitrary":
        return Arbitrary(self.generator.map(lambda tree: tree.map(f)))

    def chain(self, f: Callable[[Any], "Arbitrary"]) -> "Arbitrary":
        """
        Feed each value into `f` to pick the next Arbitrary.

        Shrinking tries the outer value first, regenerating the inner
        value for each candidate, then the inner value's own shrinks.
        """
        def inner(a):
            return _require_arbitrary(f(a)).generator
        return Arbitrary(
            self.generator
            .chain(lambda tree: Gen.traverse_tree(inner, tree))
            .map(Tree.flatten))

    def resize(self, size: int) -> "Arbitrary":
        return Arbitrary(self.generator.resize(size))

    with_fixed_size = resize

    def scale(self, f: Callable[[int], int]) -> "Arbitrary":
        return Arbitrary(self.generator.scale(f))

    # ── Collections ──

    def array(self) -> "Arbitrary":
        """Lists of length [0, size]; shrink by removing chunks, then elements."""
        gen = Gen.sized(lambda n: Gen.choose_int(0, n).chain(self.generator.as_array_with_length))
        return Arbitrary(gen.map(sequence_shrink_list))

    def array_with_length(self, length: int) -> "Arbitrary":
        """Lists of exactly `length`; only elements shrink."""
        return Arbitrary(self.generator.as_array_with_length(length).map(sequence_shrink_one))

    def array_with_length_between(self, lo: int, hi: int) -> "Arbitrary":
        """Lists with lo <= length <= hi; shrinking never goes below lo."""
        _check_int("lo", lo, 0)
        _check_int("hi", hi, 0)
        if lo > hi:
            raise GenConfigError(f"Empty length range: min {lo} > max {hi}", (lo, hi))
        gen = Gen.choose_int(lo, hi).chain(self.generator.as_array_with_length)
        return Arbitrary(gen.map(
            lambda forest: sequence_shrink_list(forest).filter_tree(lambda xs: len(xs) >= lo)))

    @staticmethod
    def tuple_of(*arbs: "Arbitrary") -> "Arbitrary":
        """Fixed-arity tuples; positions shrink independently, arity never changes."""
        gens = [_require_arbitrary(a).generator for a in arbs]
        return Arbitrary(Gen.sequence(gens).map(sequence_shrink_one)).map(tuple)

    @staticmethod
    def dict_of(keys: "Arbitrary", values: "Arbitrary") -> "Arbitrary":
        """Dicts built from a size-driven list of generated pairs."""
        return Arbitrary.tuple_of(keys, values).array().map(dict)

    # ── Choice ──

    @staticmethod
    def one_of(choice: "Arbitrary", *choices: "Arbitrary") -> "Arbitrary":
        options = [_require_arbitrary(a).generator for a in (choice,) + choices]
        return Arbitrary(Gen.one_of(*options))

    @staticmethod
    def one_of_weighted(choice: tuple, *choices: tuple) -> "Arbitrary":
        """(weight, Arbitrary) pairs."""
        options = [(w, _require_arbitrary(a).generator) for w, a in (choice,) + choices]
        return Arbitrary(Gen.one_of_weighted(*options))

    @staticmethod
    def elements(choice: Any, *choices: Any) -> "Arbitrary":
        return Arbitrary.from_gen(Gen.elements(choice, *choices))

    @staticmethod
    def elements_weighted(choice: tuple, *choices: tuple) -> "Arbitrary":
        """(weight, value) pairs."""
        return Arbitrary.from_gen(Gen.elements_weighted(choice, *choices))

    def nested(self, wrap: Callable[["Arbitrary"], "Arbitrary"]) -> "Arbitrary":
        """
        Recursive structures: `wrap` (e.g. Arbitrary.array) is applied to
        this scalar generator a random number of times.

        The height is in [0, max(1, log2(size))] and shrinks toward 0;
        each level gets roughly size^(1/height) so the total stays near size.
        """
        scalar = self

        def wrapped(size, height):
            if height == 0:
                return scalar
            level_size = max(1, int(round(size ** (1.0 / height))))
            arb = scalar
            for _ in range(height):
                arb = _require_arbitrary(wrap(arb)).resize(level_size)
            return arb

        def for_size(size):
            max_height = max(1, int(math.log2(size))) if size >= 2 else 1
            return Arbitrary.int_within(0, max_height).chain(lambda h: wrapped(size, h))
        return Arbitrary.sized(for_size)

    # ── Filtering ──

    def such_that(self, pred: Callable[[Any], bool], max_tries: int = 10) -> "Arbitrary":
        """
        Only values satisfying `pred`. Each retry bumps the size by one;
        after `max_tries` misses generation raises RetriesExhausted.
        Shrinks that fail `pred` are pruned.
        """
        _check_int("max_tries", max_tries, 1)

        def run(rng, size):
            for attempt in range(max_tries):
                rng, sub = rng.split()
                _, tree = self.generator.run(sub, size + attempt)
                if pred(tree.outcome):
                    return rng, tree.filter_tree(pred)
            raise RetriesExhausted(max_tries)
        return Arbitrary(Gen(run))

    def not_empty(self, max_tries: int = 10) -> "Arbitrary":
        """Collections with at least one element."""
        return self.such_that(lambda c: len(c) > 0, max_tries)

    # ── Shrink control ──

    def no_shrink(self) -> "Arbitrary":
        return Arbitrary(self.generator.map(lambda tree: Tree.of(tree.outcome)))

    which_never_shrinks = no_shrink

    def always_shrinks(self) -> "Arbitrary":
        """Offer grandchildren alongside children at every level."""
        return Arbitrary(self.generator.map(Tree.collapse))

    which_always_shrinks = always_shrinks

    # ── Running ──

    def generate(self) -> Any:
        return self.generator.generate().outcome

    def sample(self, options=None, *, times=None, max_size=None, seed=None) -> list:
        """Plain values, trees discarded. See arbor_check.sample."""
        from arbor_check import sample
        return sample(self, options, times=times, max_size=max_size, seed=seed)
