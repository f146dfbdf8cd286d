"""Order-independent identity hashing of tags and bucket bounds."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

HASH_SEED = 23
HASH_FOLD = 31

_MASK = (1 << 64) - 1
_C1 = 0x87C37B91114253D5
_C2 = 0x4CF5AD432745937F


def _rotl(x: int, r: int) -> int:
    return ((x << r) | (x >> (64 - r))) & _MASK


def _fmix(k: int) -> int:
    k ^= k >> 33
    k = (k * 0xFF51AFD7ED558CCD) & _MASK
    k ^= k >> 33
    k = (k * 0xC4CEB9FE1A85EC53) & _MASK
    k ^= k >> 33
    return k


def _mix_k1(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK
    k1 = _rotl(k1, 31)
    return (k1 * _C2) & _MASK


def _mix_k2(k2: int) -> int:
    k2 = (k2 * _C2) & _MASK
    k2 = _rotl(k2, 33)
    return (k2 * _C1) & _MASK


def murmur3_sum64(data: bytes | str) -> int:
    """First 64 bits of the x64 128-bit MurmurHash3 of ``data`` with seed 0."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    length = len(data)
    h1 = h2 = 0
    full = length - length % 16

    for k1, k2 in struct.iter_unpack("<QQ", data[:full]):
        h1 ^= _mix_k1(k1)
        h1 = _rotl(h1, 27)
        h1 = (h1 + h2) & _MASK
        h1 = (h1 * 5 + 0x52DCE729) & _MASK

        h2 ^= _mix_k2(k2)
        h2 = _rotl(h2, 31)
        h2 = (h2 + h1) & _MASK
        h2 = (h2 * 5 + 0x38495AB5) & _MASK

    tail = data[full:]
    if len(tail) > 8:
        h2 ^= _mix_k2(int.from_bytes(tail[8:], "little"))
    if tail:
        h1 ^= _mix_k1(int.from_bytes(tail[:8], "little"))

    h1 ^= length
    h2 ^= length
    h1 = (h1 + h2) & _MASK
    h2 = (h2 + h1) & _MASK
    h1 = _fmix(h1)
    h2 = _fmix(h2)
    h1 = (h1 + h2) & _MASK
    return h1


@dataclass(frozen=True)
class Accumulator:
    """A commutative folding accumulator over unsigned 64-bit values."""

    state: int = HASH_SEED

    def add_string(self, s: str) -> "Accumulator":
        """Hash ``s`` and fold it in."""
        return Accumulator((self.state + murmur3_sum64(s) * HASH_FOLD) & _MASK)

    def add_uint64(self, value: int) -> "Accumulator":
        """Fold ``value``, wrapped to 64 bits, in."""
        return Accumulator((self.state + (value & _MASK) * HASH_FOLD) & _MASK)

    def value(self) -> int:
        """The accumulated value."""
        return self.state


def _fold_uint64s(values: Iterable[int]) -> int:
    acc = Accumulator()
    for value in values:
        acc = acc.add_uint64(value)
    return acc.value()


def durations(durs: list[int]) -> int:
    """Identity of a list of nanosecond durations; 0 when empty."""
    return _fold_uint64s(durs) if durs else 0


def int64s(values: list[int]) -> int:
    """Identity of a list of integers; 0 when empty."""
    return _fold_uint64s(values) if values else 0


def float64s(values: list[float]) -> int:
    """Identity of a list of floats by their IEEE-754 bits; 0 when empty."""
    if not values:
        return 0
    return _fold_uint64s(
        struct.unpack("<Q", struct.pack("<d", v))[0] for v in values
    )


def string_string_map(mapping: Mapping[str, str]) -> int:
    """Identity of a string-to-string mapping, independent of order; 0 when empty."""
    if not mapping:
        return 0
    acc = Accumulator()
    for key, value in mapping.items():
        acc = acc.add_string(f"{key}={value}")
    return acc.value()