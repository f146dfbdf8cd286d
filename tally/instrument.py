"""Instrumenting callables with success/error counters and a latency timer."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Protocol, TypeVar

RESULT_TYPE = "result_type"
RESULT_TYPE_ERROR = "error"
RESULT_TYPE_SUCCESS = "success"
TIMING_SUFFIX = "latency"

T = TypeVar("T")


class Counter(Protocol):
    def inc(self, delta: int) -> None: ...


class Stopwatch(Protocol):
    def stop(self) -> None: ...


class Timer(Protocol):
    def start(self) -> Stopwatch: ...


class Scope(Protocol):
    def tagged(self, tags: Mapping[str, str]) -> "Scope": ...

    def sub_scope(self, name: str) -> "Scope": ...

    def counter(self, name: str) -> Counter: ...

    def timer(self, name: str) -> Timer: ...


class Call:
    """Tracks successes, errors and timing of callables run through it.

    Creates the counters ``{name}`` tagged ``result_type=success`` and
    ``result_type=error``, and the timer ``{name}.latency`` (with the
    scope's separator).
    """

    def __init__(self, scope: Scope, name: str) -> None:
        self._error = scope.tagged({RESULT_TYPE: RESULT_TYPE_ERROR}).counter(name)
        self._success = scope.tagged({RESULT_TYPE: RESULT_TYPE_SUCCESS}).counter(name)
        self._timing = scope.sub_scope(name).timer(TIMING_SUFFIX)

    def exec(self, fn: Callable[[], T]) -> T:
        """Run ``fn``, time it and count the outcome.

        Returns what ``fn`` returns; an exception from ``fn`` is counted as
        an error and raised again.
        """
        stopwatch = self._timing.start()
        try:
            result = fn()
        except BaseException:
            stopwatch.stop()
            self._error.inc(1)
            raise
        stopwatch.stop()
        self._success.inc(1)
        return result