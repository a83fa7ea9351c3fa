"""In-Memory State Broker — reference bring-your-own-state store with handle counting.

Invariants:
    - Every read/write/delete holds exactly one handle from entry until its tail completes
    - active_handles() == 0 whenever no operation is in flight
    - Stored values are deep-copied on write and on read: callers never share
      mutable state with the store or with each other
    - Paths must be absolute ("/..."), non-empty and free of whitespace

Design Decisions:
    - Handle released in `finally`: a failing operation still returns its handle
    - asyncio.sleep(0) as the async tail: yields once so concurrent accesses
      genuinely overlap, mirroring an IO-backed store
    - No lock: dict operations run between awaits on a single event loop
"""

import asyncio
import copy
from collections.abc import Mapping
from typing import Any

from momentary.core.errors import BrokerError


def validate_path(path: str, operation: str) -> None:
    if not isinstance(path, str) or not path.startswith("/") or len(path) < 2:
        raise BrokerError("path must be absolute and non-empty", operation, str(path))
    if any(ch.isspace() for ch in path):
        raise BrokerError("path must not contain whitespace", operation, path)


class InMemoryStateBroker:
    """Dict-backed StateAccessBroker for tests, demos and embedding."""

    def __init__(self, seed: Mapping[str, Any] | None = None):
        self._store: dict[str, Any] = {}
        self._handles = 0
        for path, value in (seed or {}).items():
            validate_path(path, "seed")
            self._store[path] = copy.deepcopy(value)

    def active_handles(self) -> int:
        return self._handles

    async def read(self, path: str) -> Any | None:
        self._acquire()
        try:
            validate_path(path, "read")
            await asyncio.sleep(0)
            return copy.deepcopy(self._store.get(path))
        finally:
            self._release()

    async def write(self, path: str, value: Any) -> None:
        self._acquire()
        try:
            validate_path(path, "write")
            await asyncio.sleep(0)
            self._store[path] = copy.deepcopy(value)
        finally:
            self._release()

    async def delete(self, path: str) -> None:
        self._acquire()
        try:
            validate_path(path, "delete")
            await asyncio.sleep(0)
            self._store.pop(path, None)
        finally:
            self._release()

    def _acquire(self) -> None:
        self._handles += 1

    def _release(self) -> None:
        self._handles -= 1
