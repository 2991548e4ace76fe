"""
Arbor: Shrink Strategies
Copyright (c) 2026 Alex P. Slaby — MIT License

Pure functions from a value to a LazySeq of strictly simpler candidates:
  - Integers:  shrink_towards(destination, x), halves(n)
  - Lists:     removes(k, xs), shrink_list(xs), shrink_one(f, xs)
  - Forests:   sequence_shrink*, turning a list of trees into a tree of lists

Candidates are ordered biggest-step first, since the search commits to
the first candidate that still fails.
"""

from typing import Any, Callable

from arbor_lazy import LazySeq
from arbor_tree import Tree


def quot2(n: int) -> int:
    """Halve, truncating toward zero."""
    q = abs(n) // 2
    return q if n >= 0 else -q


# ═══════════════════════════════════════════════════════════════
# INTEGERS
# ═══════════════════════════════════════════════════════════════

def halves(n: int) -> LazySeq:
    """
    n, n/2, n/4, … down to the last non-zero value (truncating).

    >>> halves(30).to_list()
    [30, 15, 7, 3, 1]
    >>> halves(-10).to_list()
    [-10, -5, -2, -1]
    """
    def run():
        k = n
        while True:
            yield k
            k = quot2(k)
            if k == 0:
                return
    return LazySeq(run)


def cons_nub(x: Any, xs: LazySeq) -> LazySeq:
    """Prepend x unless it equals the first element of xs."""
    def run():
        it = iter(xs)
        for head in it:
            if head != x:
                yield x
            yield head
            yield from it
            return
        yield x
    return LazySeq(run)


def shrink_towards(destination: int, x: int) -> LazySeq:
    """
    Candidates moving x toward destination: the destination itself first,
    then ever smaller steps away from it.

    >>> shrink_towards(0, 100).to_list()
    [0, 50, 75, 88, 94, 97, 99]
    """
    if destination == x:
        return LazySeq.empty()
    diff = quot2(x) - quot2(destination)
    if diff == 0:
        # halves(0) would offer x itself
        return LazySeq.of(destination)
    return cons_nub(destination, halves(diff).map(lambda k: x - k))


def towards(destination: int) -> Callable[[int], LazySeq]:
    """shrink_towards with the destination fixed, for use as a shrink function."""
    return lambda x: shrink_towards(destination, x)


# ═══════════════════════════════════════════════════════════════
# LISTS
# ═══════════════════════════════════════════════════════════════

def removes(k: int, xs: list) -> LazySeq:
    """
    Every list obtained by deleting one run of k consecutive elements,
    scanning left to right in steps of k.

    >>> removes(2, [1, 2, 3, 4, 5, 6]).to_list()
    [[3, 4, 5, 6], [1, 2, 5, 6], [1, 2, 3, 4]]
    """
    if k < 1:
        raise ValueError(f"removes: chunk size must be positive, got {k}")
    items = list(xs)

    def run():
        start = 0
        while len(items) - start >= k:
            yield items[:start] + items[start + k:]
            start += k
    return LazySeq(run)


def shrink_list(xs: list) -> LazySeq:
    """Shorter lists: remove half the elements, then a quarter, … then single ones."""
    items = list(xs)
    if not items:
        return LazySeq.empty()
    return halves(len(items)).flat_map(lambda k: removes(k, items))


def shrink_one(f: Callable[[Any], LazySeq], xs: list) -> LazySeq:
    """
    Same-length lists with exactly one element shrunk by f.

    All shrinks of the head come first, then those of the second element,
    and so on.
    """
    items = list(xs)

    def run():
        for i, x in enumerate(items):
            for smaller in f(x):
                yield items[:i] + [smaller] + items[i + 1:]
    return LazySeq(run)


# ═══════════════════════════════════════════════════════════════
# FORESTS
# ═══════════════════════════════════════════════════════════════

def sequence_shrink(merge: Callable[[list], LazySeq], forest: list) -> Tree:
    """
    Turn a list of trees into a tree of lists.

    The outcome is the list of each tree's outcome; children come from
    `merge(forest)`, each candidate forest sequenced again recursively.
    """
    forest = list(forest)
    return Tree([t.outcome for t in forest],
                merge(forest).map(lambda ts: sequence_shrink(merge, ts)))


def _tree_shrinks(tree: Tree) -> LazySeq:
    return tree.shrinks


def _merge_one(forest: list) -> LazySeq:
    return shrink_one(_tree_shrinks, forest)


def _merge_list(forest: list) -> LazySeq:
    return shrink_list(forest).concat(shrink_one(_tree_shrinks, forest))


def sequence_shrink_one(forest: list) -> Tree:
    """Shrink elements only; the length never changes (fixed-arity tuples)."""
    return sequence_shrink(_merge_one, forest)


def sequence_shrink_list(forest: list) -> Tree:
    """Shrink the length first, then individual elements."""
    return sequence_shrink(_merge_list, forest)
