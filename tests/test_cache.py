import threading

from tally.cache import StringInterner, TagCache, tag_map_key
from tally.identity import string_string_map


def test_intern_returns_first_instance():
    interner = StringInterner()
    first = "".join(["met", "ric"])
    second = "".join(["me", "tric"])
    assert first is not second
    assert interner.intern(first) is first
    assert interner.intern(second) is first
    assert len(interner) == 1


def test_intern_distinct_strings():
    interner = StringInterner()
    assert interner.intern("a") == "a"
    assert interner.intern("b") == "b"
    assert len(interner) == 2


def test_intern_concurrent():
    interner = StringInterner()
    results = []
    lock = threading.Lock()

    def work():
        value = interner.intern("".join(["sha", "red"]))
        with lock:
            results.append(value)

    threads = [threading.Thread(target=work) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 16
    assert all(r is results[0] for r in results)
    assert len(interner) == 1


def test_tag_cache_get_missing():
    cache = TagCache()
    assert cache.get(42) is None
    assert 42 not in cache


def test_tag_cache_set_then_get():
    cache = TagCache()
    tags = [("env", "test")]
    assert cache.set(7, tags) is tags
    assert cache.get(7) is tags
    assert 7 in cache


def test_tag_cache_set_keeps_existing():
    cache = TagCache()
    first = [("env", "test")]
    second = [("env", "prod")]
    cache.set(7, first)
    assert cache.set(7, second) is first
    assert cache.get(7) is first
    assert len(cache) == 1


def test_tag_map_key_empty():
    assert tag_map_key({}) == 0


def test_tag_map_key_order_independent():
    a = {"service": "svc", "env": "test", "host": "box"}
    b = {"host": "box", "env": "test", "service": "svc"}
    assert tag_map_key(a) == tag_map_key(b)
    assert tag_map_key(a) == string_string_map(a)


def test_tag_map_key_distinguishes_values():
    assert tag_map_key({"env": "test"}) != tag_map_key({"env": "prod"})


def test_tag_cache_with_tag_map_key_roundtrip():
    cache = TagCache()
    tags = {"foo": "bar"}
    key = tag_map_key(tags)
    converted = sorted(tags.items())
    cache.set(key, converted)
    assert cache.get(tag_map_key({"foo": "bar"})) == [("foo", "bar")]