"""
Arbor Test Suite: Gen & Arbitrary
Copyright (c) 2026 Alex P. Slaby — MIT License

Run:  pytest tests/test_gen.py -v
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from arbor_random import RandomState
from arbor_tree import Tree
from arbor_shrink import towards
from arbor_gen import Gen, Arbitrary, GenConfigError, RetriesExhausted, GENERATE_SIZE


def run_gen(gen, seed=1, size=10):
    _, value = gen.run(RandomState.from_seed(seed), size)
    return value


def run_arb(arb, seed=1, size=10):
    return run_gen(arb.generator, seed, size)


def many(gen, n=200, seed=7, size=10):
    rng = RandomState.from_seed(seed)
    values = []
    for _ in range(n):
        rng, value = gen.run(rng, size)
        values.append(value)
    return values


def child_outcomes(tree):
    return [t.outcome for t in tree.shrinks]


def outcomes_to_depth(tree, depth):
    if depth == 0:
        return tree.outcome
    return (tree.outcome, [outcomes_to_depth(t, depth - 1) for t in tree.shrinks])


def walk(tree, depth=2, width=20):
    """Outcomes of the first levels of a tree, breadth-limited."""
    yield tree.outcome
    if depth > 0:
        for child in tree.shrinks.take(width):
            yield from walk(child, depth - 1, width)


# ═══════════════════════════════════════════════════════════════
# TEST: Gen Basics
# ═══════════════════════════════════════════════════════════════

class TestGen:
    def test_of_consumes_nothing(self):
        rng = RandomState.from_seed(3)
        assert Gen.of('x').run(rng, 5) == (rng, 'x')

    def test_deterministic(self):
        gen = Gen.choose_int(0, 1000).as_array_with_length(5)
        assert run_gen(gen, seed=9) == run_gen(gen, seed=9)

    def test_map_and_chain(self):
        gen = Gen.choose_int(1, 5).chain(lambda n: Gen.of(n).as_array_with_length(n)).map(len)
        assert all(1 <= n <= 5 for n in many(gen))

    def test_sized(self):
        assert run_gen(Gen.sized(Gen.of), size=7) == 7

    def test_resize(self):
        assert run_gen(Gen.sized(Gen.of).resize(3), size=50) == 3

    def test_resize_negative_rejected(self):
        with pytest.raises(GenConfigError):
            Gen.sized(Gen.of).resize(-1)

    def test_scale(self):
        assert run_gen(Gen.sized(Gen.of).scale(lambda s: s * 2), size=5) == 10

    def test_negative_size_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Gen.of(1).run(RandomState.from_seed(1), -1)

    def test_generate_default_size(self):
        assert Gen.sized(Gen.of).generate() == GENERATE_SIZE == 30

    def test_uniform(self):
        assert all(0.0 <= x < 1.0 for x in many(Gen.uniform()))


class TestGenRanges:
    @given(seed=st.integers(min_value=1, max_value=2**32),
           lo=st.integers(min_value=-1000, max_value=1000),
           width=st.integers(min_value=0, max_value=1000))
    @settings(max_examples=100)
    def test_choose_int_in_range(self, seed, lo, width):
        assert lo <= run_gen(Gen.choose_int(lo, lo + width), seed=seed) <= lo + width

    def test_choose_int_empty_range(self):
        with pytest.raises(GenConfigError, match="Empty range"):
            Gen.choose_int(3, 2)

    def test_choose_int_rejects_non_int(self):
        with pytest.raises(GenConfigError):
            Gen.choose_int(0, 2.5)

    def test_as_array_length_bounded_by_size(self):
        assert all(len(xs) <= 6 for xs in many(Gen.of(0).as_array(), size=6))

    def test_as_array_with_length(self):
        assert run_gen(Gen.of('a').as_array_with_length(4)) == ['a'] * 4

    def test_sequence(self):
        assert run_gen(Gen.sequence([Gen.of(1), Gen.of(2)])) == [1, 2]


# ═══════════════════════════════════════════════════════════════
# TEST: Choice
# ═══════════════════════════════════════════════════════════════

class TestChoice:
    def test_elements_covers_options(self):
        assert set(many(Gen.elements('a', 'b', 'c'))) == {'a', 'b', 'c'}

    def test_one_of(self):
        assert set(many(Gen.one_of(Gen.of(1), Gen.of(2)))) == {1, 2}

    def test_weighted_ratios(self):
        gen = Gen.elements_weighted((2, 'foo'), (1, 'bar'), (6, 'baz'))
        values = many(gen, n=9000)
        foo, bar, baz = (values.count(k) for k in ('foo', 'bar', 'baz'))
        assert foo / bar == pytest.approx(2, abs=0.35)
        assert baz / bar == pytest.approx(6, abs=1.0)

    def test_zero_weight_never_chosen(self):
        gen = Gen.elements_weighted((0, 'never'), (1, 'always'))
        assert set(many(gen)) == {'always'}

    def test_one_of_weighted(self):
        gen = Gen.one_of_weighted((1, Gen.of('x')), (0, Gen.of('y')))
        assert set(many(gen)) == {'x'}

    def test_all_zero_weights_rejected(self):
        with pytest.raises(GenConfigError, match="positive"):
            Gen.elements_weighted((0, 'a'), (0, 'b'))

    def test_negative_weight_rejected(self):
        with pytest.raises(GenConfigError):
            Gen.weighted_index([1, -1])


# ═══════════════════════════════════════════════════════════════
# TEST: Tree Traversal
# ═══════════════════════════════════════════════════════════════

class TestTraverse:
    def test_traverse_keeps_shape(self):
        tree = Tree.unfold_tree(lambda a: a, towards(0), 4)
        traversed = run_gen(Gen.traverse_tree(lambda x: Gen.of(x * 2), tree))
        assert traversed.outcome == 8
        assert child_outcomes(traversed) == [0, 4, 6]

    def test_traverse_children_are_stable(self):
        tree = Tree.unfold_tree(lambda a: a, towards(0), 50)
        traversed = run_gen(Gen.traverse_tree(lambda x: Gen.choose_int(0, 10**6), tree))
        assert child_outcomes(traversed) == child_outcomes(traversed)


# ═══════════════════════════════════════════════════════════════
# TEST: Arbitrary
# ═══════════════════════════════════════════════════════════════

class TestArbitrary:
    def test_of(self):
        tree = run_arb(Arbitrary.of(5))
        assert tree.outcome == 5
        assert tree.shrinks.is_empty()

    def test_from_gen_never_shrinks(self):
        assert run_arb(Arbitrary.from_gen(Gen.choose_int(0, 100))).shrinks.is_empty()

    def test_int_within_shrinks_toward_lo(self):
        for seed in range(1, 30):
            tree = run_arb(Arbitrary.int_within(10, 20), seed=seed)
            assert 10 <= tree.outcome <= 20
            if tree.outcome != 10:
                assert tree.shrinks.first().outcome == 10

    def test_int_within_origin(self):
        tree = run_arb(Arbitrary.from_gen_with_shrink(Gen.of(-8), towards(0)))
        assert child_outcomes(tree) == [0, -4, -6, -7]
        tree = run_arb(Arbitrary.int_within(-5, 5, origin=0), seed=4)
        if tree.outcome != 0:
            assert tree.shrinks.first().outcome == 0

    def test_int_within_origin_outside_range(self):
        with pytest.raises(GenConfigError, match="Origin"):
            Arbitrary.int_within(0, 5, origin=9)

    def test_map_identity_equivalent(self):
        arb = Arbitrary.int_within(0, 1000).array()
        same = arb.map(lambda x: x)
        for seed in (1, 2, 3):
            assert outcomes_to_depth(run_arb(arb, seed), 2) == outcomes_to_depth(run_arb(same, seed), 2)

    def test_sized(self):
        assert run_arb(Arbitrary.sized(Arbitrary.of), size=12).outcome == 12

    def test_resize(self):
        arb = Arbitrary.sized(Arbitrary.of)
        assert arb.resize(7).generate() == 7
        assert arb.with_fixed_size(3).generate() == 3

    def test_scale(self):
        assert run_arb(Arbitrary.sized(Arbitrary.of).scale(lambda s: s + 1), size=4).outcome == 5

    def test_generate(self):
        assert Arbitrary.sized(Arbitrary.of).generate() == 30

    def test_sample(self):
        values = Arbitrary.int_within(0, 9).sample(seed=1)
        assert len(values) == 10
        assert all(0 <= v <= 9 for v in values)

    def test_requires_arbitrary(self):
        with pytest.raises(GenConfigError, match="Expected an Arbitrary"):
            Arbitrary.one_of(Arbitrary.of(1), Gen.of(2))


class TestArbitraryChain:
    def test_chain_values(self):
        arb = Arbitrary.int_within(1, 5).chain(lambda n: Arbitrary.of(n).array_with_length(n))
        for seed in range(1, 20):
            for xs in walk(run_arb(arb, seed)):
                assert len(xs) == xs[0]

    def test_chain_shrinks_outer_first(self):
        arb = Arbitrary.from_gen_with_shrink(Gen.of(4), towards(0)).chain(
            lambda n: Arbitrary.from_gen_with_shrink(Gen.of(n * 10), towards(n * 10 - 1)))
        tree = run_arb(arb)
        assert tree.outcome == 40
        assert child_outcomes(tree) == [0, 20, 30, 39]

    def test_chain_must_return_arbitrary(self):
        arb = Arbitrary.of(1).chain(lambda n: n)
        with pytest.raises(GenConfigError):
            arb.generate()


class TestArbitraryCollections:
    def test_array_lengths(self):
        for seed in range(1, 20):
            assert len(run_arb(Arbitrary.int_within(0, 9).array(), seed, size=8).outcome) <= 8

    def test_array_shrinks_to_empty_first(self):
        for seed in range(1, 20):
            tree = run_arb(Arbitrary.int_within(0, 9).array(), seed)
            if tree.outcome:
                assert tree.shrinks.first().outcome == []

    def test_array_with_length(self):
        tree = run_arb(Arbitrary.int_within(0, 9).array_with_length(3))
        assert all(len(xs) == 3 for xs in walk(tree))

    def test_array_with_length_between(self):
        arb = Arbitrary.int_within(0, 9).array_with_length_between(2, 4)
        for seed in range(1, 20):
            tree = run_arb(arb, seed)
            assert 2 <= len(tree.outcome) <= 4
            assert all(len(xs) >= 2 for xs in walk(tree))

    def test_array_with_length_between_bad_range(self):
        with pytest.raises(GenConfigError):
            Arbitrary.of(1).array_with_length_between(3, 1)

    def test_tuple_of(self):
        arb = Arbitrary.tuple_of(Arbitrary.int_within(0, 9), Arbitrary.of('k'), Arbitrary.int_within(5, 9))
        for seed in range(1, 10):
            for t in walk(run_arb(arb, seed)):
                assert isinstance(t, tuple) and len(t) == 3
                assert t[1] == 'k'

    def test_dict_of(self):
        arb = Arbitrary.dict_of(Arbitrary.int_within(0, 3), Arbitrary.of('v'))
        for seed in range(1, 10):
            d = run_arb(arb, seed).outcome
            assert isinstance(d, dict)
            assert set(d) <= {0, 1, 2, 3}
            assert set(d.values()) <= {'v'}

    def test_nested(self):
        def ints_only(v):
            if isinstance(v, list):
                return all(ints_only(x) for x in v)
            return isinstance(v, int)
        arb = Arbitrary.int_within(0, 9).nested(Arbitrary.array)
        values = arb.sample(times=40, seed=3)
        assert all(ints_only(v) for v in values)
        assert any(isinstance(v, list) for v in values)

    def test_one_of(self):
        arb = Arbitrary.one_of(Arbitrary.of('a'), Arbitrary.of('b'))
        assert set(arb.sample(times=50, seed=2)) == {'a', 'b'}

    def test_elements_weighted(self):
        arb = Arbitrary.elements_weighted((0, 'no'), (3, 'yes'))
        assert set(arb.sample(times=20, seed=2)) == {'yes'}


class TestArbitraryFiltering:
    def test_such_that(self):
        arb = Arbitrary.int_within(0, 100).such_that(lambda x: x % 2 == 0)
        for seed in range(1, 20):
            assert all(x % 2 == 0 for x in walk(run_arb(arb, seed)))

    def test_such_that_exhausted(self):
        with pytest.raises(RetriesExhausted) as info:
            Arbitrary.int_within(0, 10).such_that(lambda x: False, max_tries=5).generate()
        assert info.value.max_tries == 5

    def test_such_that_bad_tries(self):
        with pytest.raises(GenConfigError):
            Arbitrary.of(1).such_that(bool, max_tries=0)

    def test_not_empty(self):
        arb = Arbitrary.int_within(0, 9).array().not_empty()
        for seed in range(1, 20):
            assert all(len(xs) > 0 for xs in walk(run_arb(arb, seed)))


class TestShrinkControl:
    def test_no_shrink(self):
        arb = Arbitrary.from_gen_with_shrink(Gen.of(4), towards(0))
        assert run_arb(arb.no_shrink()).shrinks.is_empty()
        assert run_arb(arb.which_never_shrinks()).outcome == 4

    def test_always_shrinks(self):
        arb = Arbitrary.from_gen_with_shrink(Gen.of(4), towards(0)).always_shrinks()
        assert child_outcomes(run_arb(arb)) == [0, 2, 3, 0, 1, 0, 2]
