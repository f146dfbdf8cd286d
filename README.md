# tally

Building blocks for metrics reporting, using only the standard library.

- **Histogram buckets** (`tally.histogram`): `ValueBuckets` and
  `DurationBuckets` are lists of bucket upper bounds. You can build them with
  `linear_value_buckets`, `linear_duration_buckets`,
  `exponential_value_buckets` and `exponential_duration_buckets`.
  `bucket_pairs` sorts a bucket set and turns it into `BucketPair` ranges that
  run from the lowest to the highest representable bound. `buckets_equal`
  compares two bucket sets. `format_duration` renders nanoseconds as `25ms`,
  `1.5µs`, `1h2m3s` and so on. All durations are integer nanoseconds.
- **Identity hashing** (`tally.identity`): `Accumulator` is an
  order-independent folding accumulator built on `murmur3_sum64`. The helpers
  `durations`, `int64s`, `float64s` and `string_string_map` use it and return
  0 for empty input.
- **Caches** (`tally.cache`): `StringInterner` hands back one shared instance
  for equal strings. `TagCache` stores values under a key from `tag_map_key`.
  Both are thread-safe.
- **Transports** (`tally.transports`): `CalcTransport` counts the bytes written
  to it and keeps the total in `count`. `BufferedReadTransport` reads from an
  in-memory buffer and raises `EOFError` when the buffer is exhausted.
- **Instrumentation** (`tally.instrument`): `Call` runs a callable through
  `exec`. It times the call and counts each success or error. It returns the
  callable's result and raises its exception again.

## Installation

```
pip install .
```

## Examples

```python
from tally.histogram import linear_value_buckets, exponential_duration_buckets, bucket_pairs

buckets = linear_value_buckets(1, 1, 3)
print(buckets)                  # [1.000000 2.000000 3.000000]

for pair in bucket_pairs(buckets):
    print(pair.lower_bound_value, pair.upper_bound_value)

durations = exponential_duration_buckets(2_000_000_000, 2, 3)  # nanoseconds
print(durations)                # [2s 4s 8s]
```

A count of zero or less, a start of zero or less, or a factor of 1 or less
raises `ValueError`.

```python
from tally.identity import string_string_map
from tally.cache import StringInterner, TagCache, tag_map_key

key = string_string_map({"env": "test", "host": "a"})   # the same for any key order
name = StringInterner().intern("my-metric")

cache = TagCache()
tags = cache.set(tag_map_key({"env": "test"}), [("env", "test")])
```

```python
from tally.transports import CalcTransport

calc = CalcTransport()
calc.write(b"test")
calc.write_string("string")
print(calc.count)               # 10
```

`Call` needs a scope object that you provide. The scope must offer
`tagged(tags)`, `sub_scope(name)`, `counter(name)` with `inc(delta)`, and
`timer(name)` whose `start()` returns an object with `stop()`:

```python
from tally.instrument import Call

call = Call(scope, "fetch")
result = call.exec(lambda: 42)
```

## What this package does not do

The package does not include a metrics scope, registry or reporter. Nothing
here sends metrics anywhere, and no wire encoding is provided: the transports
only count or replay bytes that something else produces. There is no
command-line program.

## Running the tests

```
pip install .[test]
pytest
```