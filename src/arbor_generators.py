"""
Arbor: Named Generators
Copyright (c) 2026 Alex P. Slaby — MIT License

Ready-made arbitraries built only from the core combinators:
  - Scalars:     booleans, integers (sized), NaN, None, unit floats
  - Characters:  all 8-bit, printable ASCII, alphanumeric
  - Strings:     arrays of characters, joined
  - Containers:  objects (str-keyed dicts), array-or-object, JSON-like values

Sized integers span [-size, size] (or the matching half) and shrink
toward 0. Characters shrink toward the start of their alphabet.
"""

import math
import string

from arbor_gen import Arbitrary, Gen


ALPHANUMERIC = string.digits + string.ascii_letters


# ═══════════════════════════════════════════════════════════════
# SCALARS
# ═══════════════════════════════════════════════════════════════

def constant(value):
    return Arbitrary.of(value)


def nones():
    return Arbitrary.of(None)


def nans():
    return Arbitrary.of(math.nan)


def booleans():
    """False or True, shrinking toward False."""
    return Arbitrary.int_within(0, 1).map(bool)


def unit_floats():
    """Floats in [0, 1). Not shrinkable."""
    return Arbitrary.from_gen(Gen.uniform())


def integers():
    return Arbitrary.sized(lambda size: Arbitrary.int_within(-size, size, origin=0))


def non_negative_integers():
    return Arbitrary.sized(lambda size: Arbitrary.int_within(0, size))


def non_positive_integers():
    return Arbitrary.sized(lambda size: Arbitrary.int_within(-size, 0, origin=0))


def positive_integers():
    """1 through size + 1."""
    return non_negative_integers().map(lambda n: n + 1)


def negative_integers():
    """-1 through -(size + 1)."""
    return non_negative_integers().map(lambda n: -n - 1)


def integers_within(lo, hi):
    return Arbitrary.int_within(lo, hi)


# ═══════════════════════════════════════════════════════════════
# CHARACTERS & STRINGS
# ═══════════════════════════════════════════════════════════════

def chars():
    """Code points 0 through 255."""
    return Arbitrary.int_within(0, 255).map(chr)


def ascii_chars():
    """Printable ASCII, 32 through 126."""
    return Arbitrary.int_within(32, 126).map(chr)


def alphanumeric_chars():
    return Arbitrary.int_within(0, len(ALPHANUMERIC) - 1).map(ALPHANUMERIC.__getitem__)


def _joined(char_arb):
    return char_arb.array().map(''.join)


def strings():
    return _joined(chars())


def ascii_strings():
    return _joined(ascii_chars())


def alphanumeric_strings():
    return _joined(alphanumeric_chars())


# ═══════════════════════════════════════════════════════════════
# CONTAINERS
# ═══════════════════════════════════════════════════════════════

def objects(values, keys=None):
    """Dicts with alphanumeric string keys (or `keys`) and `values`."""
    return Arbitrary.dict_of(keys if keys is not None else alphanumeric_strings(), values)


def array_or_object(values):
    return Arbitrary.one_of(values.array(), objects(values))


def json_primitives():
    return Arbitrary.one_of(
        nones(), booleans(), integers(), unit_floats(), alphanumeric_strings())


def json_values():
    """Nested arrays and objects of JSON primitives."""
    return json_primitives().nested(array_or_object)
