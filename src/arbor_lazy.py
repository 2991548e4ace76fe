"""
Arbor: Lazy Sequences
Copyright (c) 2026 Alex P. Slaby — MIT License

A restartable, possibly infinite sequence. A LazySeq wraps a function
returning a fresh iterator; every traversal re-runs production from the
start and nothing is cached. Combinators build new producers and never
force the underlying sequence.
"""

import itertools
from typing import Any, Callable, Iterable, Iterator


class LazySeq:
    """Restartable sequence backed by an iterator factory."""
    __slots__ = ('_run',)

    def __init__(self, run: Callable[[], Iterable]):
        self._run = run

    @staticmethod
    def empty() -> "LazySeq":
        return _EMPTY

    @staticmethod
    def of(*items) -> "LazySeq":
        return LazySeq.from_list(items)

    @staticmethod
    def from_list(items) -> "LazySeq":
        """Wrap a finite collection. The collection is snapshotted."""
        frozen = tuple(items)
        return LazySeq(lambda: iter(frozen))

    def __iter__(self) -> Iterator:
        return iter(self._run())

    def map(self, f: Callable[[Any], Any]) -> "LazySeq":
        def run():
            for x in self._run():
                yield f(x)
        return LazySeq(run)

    def flat_map(self, f: Callable[[Any], "LazySeq"]) -> "LazySeq":
        """Concatenate f(x) for every x, in order."""
        def run():
            for x in self._run():
                yield from f(x)
        return LazySeq(run)

    def filter(self, pred: Callable[[Any], bool]) -> "LazySeq":
        def run():
            for x in self._run():
                if pred(x):
                    yield x
        return LazySeq(run)

    def concat(self, other: "LazySeq") -> "LazySeq":
        """This sequence followed by `other`."""
        def run():
            yield from self._run()
            yield from other
        return LazySeq(run)

    def take(self, n: int) -> "LazySeq":
        if n < 0:
            raise ValueError(f"Cannot take a negative count: {n}")
        return LazySeq(lambda: itertools.islice(self._run(), n))

    def first(self, default=None):
        for x in self._run():
            return x
        return default

    def is_empty(self) -> bool:
        for _ in self._run():
            return False
        return True

    def to_list(self) -> list:
        """Materialize. Never call this on an infinite sequence."""
        return list(self._run())

    def __repr__(self):
        head = list(itertools.islice(self._run(), 6))
        more = ", …" if len(head) > 5 else ""
        return f"LazySeq([{', '.join(repr(x) for x in head[:5])}{more}])"


_EMPTY = LazySeq(lambda: iter(()))
