"""Thread-safe string interning and tag caching."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from tally.identity import string_string_map


class StringInterner:
    """Hands back one shared instance for every equal string."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def intern(self, s: str) -> str:
        """Return the stored instance equal to ``s``, storing ``s`` if new."""
        existing = self._entries.get(s)
        if existing is not None:
            return existing
        with self._lock:
            return self._entries.setdefault(s, s)

    def __len__(self) -> int:
        return len(self._entries)


class TagCache:
    """Caches converted tag lists under their identity key."""

    def __init__(self) -> None:
        self._entries: dict[int, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: int) -> Any | None:
        """The cached tags for ``key``, or None."""
        return self._entries.get(key)

    def set(self, key: int, tags: Any) -> Any:
        """Store ``tags`` under ``key`` unless present; return the cached value."""
        with self._lock:
            return self._entries.setdefault(key, tags)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def tag_map_key(tags: Mapping[str, str]) -> int:
    """Cache key for a tag mapping, independent of its order."""
    return string_string_map(tags)