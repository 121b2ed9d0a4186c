"""Seeded xorshift128+ generator.

The generator state is two unsigned 32-bit words held on an explicit value
object, so independent generators never share state.

Every peer must derive the same stream from the same seed string:
- the seed is folded over its UTF-16 code units
- arithmetic is performed modulo 2**32
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0


def _utf16_code_units(text: str) -> list[int]:
    raw = text.encode("utf-16-le", "surrogatepass")
    return [unit for (unit,) in struct.iter_unpack("<H", raw)]


@dataclass(slots=True)
class Xorshift128Plus:
    """Two-word xorshift128+ variant over 32-bit lanes."""

    s0: int
    s1: int

    @classmethod
    def from_seed(cls, seed: str) -> Xorshift128Plus:
        s0 = 0
        s1 = 0
        for code in _utf16_code_units(seed):
            s0 = (s0 * 31 + code) & _MASK32
            s1 = (s1 * 37 + code) & _MASK32
        # The all-zero state is a fixed point.
        return cls(s0=s0 or 1, s1=s1 or 1)

    def next_u32(self) -> int:
        """Advance the state and return the next unsigned 32-bit value."""

        x = self.s0
        y = self.s1
        self.s0 = y
        x ^= (x << 23) & _MASK32
        x ^= x >> 17
        x ^= y
        x ^= y >> 26
        self.s1 = x
        return (self.s0 + self.s1) & _MASK32

    def next_unit(self) -> float:
        """Next value scaled into [0, 1)."""

        return self.next_u32() / _TWO_POW_32


def generate_data(seed: str, size: int) -> list[float]:
    """Return `size` samples uniform over [-1, 1) drawn from `seed`."""

    rng = Xorshift128Plus.from_seed(seed)
    return [(rng.next_u32() / _TWO_POW_32) * 2 - 1 for _ in range(max(size, 0))]
