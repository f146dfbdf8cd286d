"""Histogram bucket definitions and the bucket bounds derived from them.

Durations are integer nanoseconds throughout.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterable
from dataclasses import dataclass

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

MIN_INT64 = -(1 << 63)
MAX_INT64 = (1 << 63) - 1
MAX_FLOAT64 = sys.float_info.max


def _fraction(frac: int, digits: int) -> str:
    if not frac:
        return ""
    return "." + str(frac).rjust(digits, "0").rstrip("0")


def format_duration(nanos: int) -> str:
    """Render a nanosecond duration as e.g. ``25ms``, ``1.5µs`` or ``1h2m3s``."""
    if nanos == 0:
        return "0s"
    magnitude = abs(nanos)
    if magnitude < SECOND:
        if magnitude < MICROSECOND:
            unit, scale, digits = "ns", NANOSECOND, 0
        elif magnitude < MILLISECOND:
            unit, scale, digits = "µs", MICROSECOND, 3
        else:
            unit, scale, digits = "ms", MILLISECOND, 6
        whole, frac = divmod(magnitude, scale)
        text = f"{whole}{_fraction(frac, digits)}{unit}"
    else:
        seconds, frac = divmod(magnitude, SECOND)
        minutes, seconds = divmod(seconds, 60)
        hours, minutes = divmod(minutes, 60)
        text = f"{seconds}{_fraction(frac, 9)}s"
        if minutes or hours:
            text = f"{minutes}m{text}"
        if hours:
            text = f"{hours}h{text}"
    return "-" + text if nanos < 0 else text


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


class ValueBuckets(list):
    """Bucket upper bounds given as plain float values."""

    def __str__(self) -> str:
        return "[" + " ".join(_format_float(v) for v in self) + "]"

    def as_values(self) -> list[float]:
        """The bounds as floats."""
        return [float(v) for v in self]

    def as_durations(self) -> list[int]:
        """The bounds read as seconds and converted to nanoseconds."""
        return [int(v * SECOND) for v in self]


class DurationBuckets(list):
    """Bucket upper bounds given as nanosecond durations."""

    def __str__(self) -> str:
        return "[" + " ".join(format_duration(d) for d in self) + "]"

    def as_values(self) -> list[float]:
        """The bounds as floating point seconds."""
        return [d / SECOND for d in self]

    def as_durations(self) -> list[int]:
        """The bounds as nanoseconds."""
        return [int(d) for d in self]


@dataclass(frozen=True)
class BucketPair:
    """Lower and upper bound of one derived histogram bucket."""

    lower_bound_value: float = 0.0
    upper_bound_value: float = 0.0
    lower_bound_duration: int = 0
    upper_bound_duration: int = 0


_SINGLE_BUCKET = BucketPair(
    lower_bound_value=-MAX_FLOAT64,
    upper_bound_value=MAX_FLOAT64,
    lower_bound_duration=MIN_INT64,
    upper_bound_duration=MAX_INT64,
)


def buckets_equal(x, y) -> bool:
    """Whether two bucket sets are of the same kind and hold the same bounds."""
    for kind in (DurationBuckets, ValueBuckets):
        if isinstance(x, kind):
            if not isinstance(y, kind) or len(x) != len(y):
                return False
            return all(a == b for a, b in zip(x, y))
    return True


def bucket_pairs(buckets) -> list[BucketPair]:
    """Derive the sorted lower/upper bound pairs covering the whole range.

    With no buckets a single pair spanning everything is returned; otherwise
    there is one pair more than there are buckets.
    """
    if not buckets:
        return [_SINGLE_BUCKET]

    if isinstance(buckets, DurationBuckets):
        edges = [MIN_INT64, *sorted(buckets.as_durations()), MAX_INT64]
        return [
            BucketPair(lower_bound_duration=lo, upper_bound_duration=hi)
            for lo, hi in zip(edges, edges[1:])
        ]

    if isinstance(buckets, ValueBuckets):
        values = buckets.as_values()
    else:
        values = [float(v) for v in buckets]
    edges = [-MAX_FLOAT64, *sorted(values), MAX_FLOAT64]
    return [
        BucketPair(lower_bound_value=lo, upper_bound_value=hi)
        for lo, hi in zip(edges, edges[1:])
    ]


def _check_count(n: int) -> None:
    if n <= 0:
        raise ValueError("n needs to be > 0")


def _check_exponential(start, factor, n) -> None:
    _check_count(n)
    if start <= 0:
        raise ValueError("start needs to be > 0")
    if factor <= 1:
        raise ValueError("factor needs to be > 1")


def linear_value_buckets(start: float, width: float, n: int) -> ValueBuckets:
    """``n`` value buckets starting at ``start``, ``width`` apart."""
    _check_count(n)
    return ValueBuckets(start + i * width for i in range(n))


def linear_duration_buckets(start: int, width: int, n: int) -> DurationBuckets:
    """``n`` duration buckets starting at ``start``, ``width`` apart."""
    _check_count(n)
    return DurationBuckets(start + i * width for i in range(n))


def _geometric(start, factor, n, step) -> Iterable:
    current = start
    for _ in range(n):
        yield current
        current = step(current * factor)


def exponential_value_buckets(start: float, factor: float, n: int) -> ValueBuckets:
    """``n`` value buckets starting at ``start``, each ``factor`` times the last."""
    _check_exponential(start, factor, n)
    return ValueBuckets(_geometric(start, factor, n, float))


def exponential_duration_buckets(start: int, factor: float, n: int) -> DurationBuckets:
    """``n`` duration buckets starting at ``start``, each ``factor`` times the last."""
    _check_exponential(start, factor, n)
    return DurationBuckets(_geometric(start, factor, n, int))