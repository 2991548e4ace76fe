"""
Arbor: Splittable Random Source
Copyright (c) 2026 Alex P. Slaby — MIT License

Pure, replayable pseudo-random state for generators:
  - SplitMix64 core (seed, gamma), never mutated
  - next()   → (state', 32-bit output)
  - split()  → (state', child) with independent streams
  - Bit-exact: same seed → same outputs, always

Every consumption step returns a new state alongside the value, so a
generator run can be replayed from any state it was handed.
"""

import math
from dataclasses import dataclass


MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF
GOLDEN_GAMMA = 0x9E3779B97F4A7C15

# Used whenever no usable seed is supplied.
DEFAULT_SEED = 5489


# ═══════════════════════════════════════════════════════════════
# MIXING FUNCTIONS
# ═══════════════════════════════════════════════════════════════

def _mix64(z: int) -> int:
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK64
    return z ^ (z >> 31)


def _mix32(z: int) -> int:
    z = ((z ^ (z >> 33)) * 0x62A9D9ED799705F5) & MASK64
    return (((z ^ (z >> 28)) * 0xCB24D0A5C88C35B3) & MASK64) >> 32


def _mix_gamma(z: int) -> int:
    z = ((z ^ (z >> 33)) * 0xFF51AFD7ED558CCD) & MASK64
    z = ((z ^ (z >> 33)) * 0xC4CEB9FE1A85EC53) & MASK64
    z = (z ^ (z >> 33)) | 1
    # gammas with too few bit transitions produce weak streams
    if bin(z ^ (z >> 1)).count('1') < 24:
        return z ^ 0xAAAAAAAAAAAAAAAA
    return z


# ═══════════════════════════════════════════════════════════════
# RAW OUTPUT
# ═══════════════════════════════════════════════════════════════

class RandomOutput:
    """A single 32-bit draw, with the usual numeric views of it."""
    __slots__ = ('_int',)

    def __init__(self, value: int):
        self._int = value & MASK32

    @property
    def as_int(self) -> int:
        """The output in the [0, 0xffffffff] interval."""
        return self._int

    @property
    def as_int31(self) -> int:
        """The output in the [0, 0x7fffffff] interval."""
        return self._int >> 1

    @property
    def as_incl_float(self) -> float:
        """The output in the [0, 1] real interval."""
        return self._int * (1.0 / 4294967295.0)

    @property
    def as_float(self) -> float:
        """The output in the [0, 1) real interval."""
        return self._int * (1.0 / 4294967296.0)

    @property
    def as_excl_float(self) -> float:
        """The output in the (0, 1) real interval."""
        return (self._int + 0.5) * (1.0 / 4294967296.0)

    def __eq__(self, other):
        return isinstance(other, RandomOutput) and other._int == self._int

    def __hash__(self):
        return hash(self._int)

    def __repr__(self):
        return f"RandomOutput(0x{self._int:08x})"


# ═══════════════════════════════════════════════════════════════
# RANDOM STATE
# ═══════════════════════════════════════════════════════════════

def normalize_seed(seed) -> int:
    """Resolve a user seed to a usable integer; unusable seeds become DEFAULT_SEED."""
    if seed is None or isinstance(seed, bool) or not isinstance(seed, int) or seed == 0:
        return DEFAULT_SEED
    return seed & MASK64


@dataclass(frozen=True)
class RandomState:
    """Immutable SplitMix64 state."""
    seed: int
    gamma: int = GOLDEN_GAMMA

    @classmethod
    def from_seed(cls, seed=None) -> "RandomState":
        return cls(normalize_seed(seed), GOLDEN_GAMMA)

    def _advance(self) -> int:
        return (self.seed + self.gamma) & MASK64

    def next(self) -> tuple:
        """Draw 32 bits. Returns (next_state, RandomOutput)."""
        s = self._advance()
        return RandomState(s, self.gamma), RandomOutput(_mix32(s))

    def next64(self) -> tuple:
        """Draw 64 bits. Returns (next_state, int)."""
        s = self._advance()
        return RandomState(s, self.gamma), _mix64(s)

    def split(self) -> tuple:
        """
        Fork into two independent streams.

        Returns (parent, child): `parent` continues this stream, `child`
        starts a fresh one whose outputs do not overlap with the parent's.
        """
        s1 = self._advance()
        s2 = (s1 + self.gamma) & MASK64
        child = RandomState(_mix64(s1), _mix_gamma(s2))
        return RandomState(s2, self.gamma), child

    def choose_int(self, lo: int, hi: int) -> tuple:
        """
        Uniform integer in the closed interval [lo, hi].

        Spans wider than 32 bits consume several words; the words are
        concatenated and scaled with integer arithmetic only.
        """
        if lo > hi:
            raise ValueError(f"Empty range: [{lo}, {hi}]")
        span = hi - lo + 1
        words = max(1, math.ceil(span.bit_length() / 32))
        acc = 0
        state = self
        for _ in range(words):
            state, out = state.next()
            acc = (acc << 32) | out.as_int
        return state, lo + ((acc * span) >> (32 * words))

    def uniform(self) -> tuple:
        """Float in [0, 1). Returns (next_state, float)."""
        state, out = self.next()
        return state, out.as_float

    def __repr__(self):
        return f"RandomState(seed=0x{self.seed:016x}, gamma=0x{self.gamma:016x})"
