import time

import pytest

from tally.instrument import Call

MICROSECOND_NS = 1000


class _Counter:
    def __init__(self):
        self.value = 0

    def inc(self, delta):
        self.value += delta


class _Stopwatch:
    def __init__(self, timer):
        self._timer = timer
        self._started = time.monotonic_ns()

    def stop(self):
        self._timer.values.append(time.monotonic_ns() - self._started)


class _Timer:
    def __init__(self):
        self.values = []

    def start(self):
        return _Stopwatch(self)


class _Scope:
    def __init__(self, registry=None, prefix="", tags=None):
        self.registry = registry if registry is not None else {"counters": {}, "timers": {}}
        self.prefix = prefix
        self.tags = dict(tags or {})

    def _key(self, name):
        full = f"{self.prefix}.{name}" if self.prefix else name
        tag_text = ",".join(f"{k}={v}" for k, v in sorted(self.tags.items()))
        return f"{full}+{tag_text}"

    def tagged(self, tags):
        return _Scope(self.registry, self.prefix, {**self.tags, **tags})

    def sub_scope(self, name):
        prefix = f"{self.prefix}.{name}" if self.prefix else name
        return _Scope(self.registry, prefix, self.tags)

    def counter(self, name):
        return self.registry["counters"].setdefault(self._key(name), _Counter())

    def timer(self, name):
        return self.registry["timers"].setdefault(self._key(name), _Timer())


def test_call_success():
    scope = _Scope()

    def work():
        time.sleep(1e-6)
        return "done"

    assert Call(scope, "test_call").exec(work) == "done"

    counters = scope.registry["counters"]
    timers = scope.registry["timers"]
    assert counters["test_call+result_type=success"].value == 1
    assert counters["test_call+result_type=error"].value == 0
    values = timers["test_call.latency+"].values
    assert len(values) == 1
    assert values[0] >= MICROSECOND_NS


def test_call_fail():
    scope = _Scope()
    expected = RuntimeError("an error")

    def work():
        time.sleep(1e-6)
        raise expected

    with pytest.raises(RuntimeError) as excinfo:
        Call(scope, "test_call").exec(work)
    assert excinfo.value is expected

    counters = scope.registry["counters"]
    timers = scope.registry["timers"]
    assert counters["test_call+result_type=error"].value == 1
    assert counters["test_call+result_type=success"].value == 0
    values = timers["test_call.latency+"].values
    assert len(values) == 1
    assert values[0] >= MICROSECOND_NS


def test_call_counts_accumulate():
    scope = _Scope()
    call = Call(scope, "op")
    for _ in range(3):
        call.exec(lambda: None)
    with pytest.raises(ValueError):
        call.exec(lambda: int("x"))

    counters = scope.registry["counters"]
    assert counters["op+result_type=success"].value == 3
    assert counters["op+result_type=error"].value == 1
    assert len(scope.registry["timers"]["op.latency+"].values) == 4