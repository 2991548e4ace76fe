"""
Arbor: Rose Trees
Copyright (c) 2026 Alex P. Slaby — MIT License

A rose tree holds a generated outcome plus every way it can be made
smaller. Children are a LazySeq of further trees, ordered so that the
greedy shrink search (no backtracking) should try them in that order.

Trees are immutable value graphs; all structural operations return new
trees and only force children when something iterates them.
"""

from typing import Any, Callable, Iterable

from arbor_lazy import LazySeq


def _identity(x):
    return x


class Tree:
    """A node's outcome and its lazily produced shrink children."""
    __slots__ = ('outcome', 'shrinks')

    def __init__(self, outcome: Any, shrinks: LazySeq = None):
        self.outcome = outcome
        self.shrinks = shrinks if shrinks is not None else LazySeq.empty()

    @staticmethod
    def of(a: Any) -> "Tree":
        """A leaf: no shrinks."""
        return Tree(a)

    # ═══════════════════════════════════════════
    # FUNCTOR / MONAD
    # ═══════════════════════════════════════════

    def map(self, f: Callable[[Any], Any]) -> "Tree":
        return Tree(f(self.outcome), self.shrinks.map(lambda t: t.map(f)))

    def flat_map(self, f: Callable[[Any], "Tree"]) -> "Tree":
        """
        Substitute f(outcome) for this node.

        Shrinks of the outer tree come first (each re-bound through f),
        followed by the shrinks intrinsic to f(outcome).
        """
        inner = f(self.outcome)
        outer = self.shrinks.map(lambda t: t.flat_map(f))
        return Tree(inner.outcome, outer.concat(inner.shrinks))

    @staticmethod
    def flatten(tt: "Tree") -> "Tree":
        return tt.flat_map(_identity)

    # ═══════════════════════════════════════════
    # FOLD / UNFOLD
    # ═══════════════════════════════════════════

    def fold_tree(self, f: Callable[[Any, Any], Any], g: Callable[[LazySeq], Any]) -> Any:
        """Catamorphism: f(outcome, g(folded children)). `g` receives a LazySeq."""
        return f(self.outcome, Tree.fold_forest(f, g, self.shrinks))

    @staticmethod
    def fold_forest(f, g, forest: LazySeq) -> Any:
        return g(forest.map(lambda t: t.fold_tree(f, g)))

    @staticmethod
    def unfold_tree(project: Callable[[Any], Any],
                    expand: Callable[[Any], Iterable],
                    seed: Any) -> "Tree":
        """Grow a tree from `seed`: project gives each outcome, expand the child seeds."""
        return Tree(project(seed), Tree.unfold_forest(project, expand, seed))

    @staticmethod
    def unfold_forest(project, expand, seed) -> LazySeq:
        return LazySeq(lambda: iter(expand(seed))).map(
            lambda b: Tree.unfold_tree(project, expand, b))

    def expand_tree(self, f: Callable[[Any], Iterable]) -> "Tree":
        """
        Add the shrinks produced by `f` to every node.

        Existing children keep their place and order; the new candidates
        (unfolded with `f`) are appended after them.
        """
        existing = self.shrinks.map(lambda t: t.expand_tree(f))
        return Tree(self.outcome,
                    existing.concat(Tree.unfold_forest(_identity, f, self.outcome)))

    # ═══════════════════════════════════════════
    # PRUNING / RESHAPING
    # ═══════════════════════════════════════════

    def filter_tree(self, pred: Callable[[Any], bool]) -> "Tree":
        """Recursively drop shrinks failing `pred`. The root is always kept."""
        return Tree(self.outcome, Tree.filter_forest(pred, self.shrinks))

    @staticmethod
    def filter_forest(pred, forest: LazySeq) -> LazySeq:
        return forest.filter(lambda t: pred(t.outcome)).map(lambda t: t.filter_tree(pred))

    def collapse(self) -> "Tree":
        """Children become the children and grandchildren, recursively."""
        children = self.shrinks.map(lambda t: t.collapse())
        grandchildren = self.shrinks.flat_map(lambda t: t.shrinks).map(lambda t: t.collapse())
        return Tree(self.outcome, children.concat(grandchildren))

    def __repr__(self):
        return f"Tree({self.outcome!r})"


# ═══════════════════════════════════════════════════════════════
# VISUALIZER
# ═══════════════════════════════════════════════════════════════

def render_tree(tree: Tree, max_depth: int = 2, max_children: int = 8,
                indent: int = 0, prefix: str = "") -> str:
    """Render the first levels of a shrink tree as an indented string."""
    pad = "   " * indent
    lines = [f"{pad}{prefix}{tree.outcome!r}"]
    if indent >= max_depth:
        return '\n'.join(lines)

    children = tree.shrinks.take(max_children + 1).to_list()
    shown = children[:max_children]
    for i, child in enumerate(shown):
        is_last = (i == len(shown) - 1) and len(children) <= max_children
        child_prefix = "└─ " if is_last else "├─ "
        lines.append(render_tree(child, max_depth, max_children, indent + 1, child_prefix))
    if len(children) > max_children:
        lines.append(f"{'   ' * (indent + 1)}└─ …")
    return '\n'.join(lines)
