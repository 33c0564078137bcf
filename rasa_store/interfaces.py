from __future__ import annotations

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """
    Synchronous key-value persistence: one JSON-like document per key.
    """

    def get(self, key: str) -> Any | None:
        """Return the document stored under ``key``, or None when absent/unreadable."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key`` atomically."""
        ...
