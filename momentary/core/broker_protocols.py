"""Boundary Protocols — contract for the externally-owned state store.

Invariants:
    - Core NEVER imports a broker implementation — dependency arrows point inward only
    - The engine calls read() at most once per execute(), at one fixed path
    - The engine never calls write() or delete() and never enumerates paths
    - Handle accounting and store safety belong to the broker, not the engine

Design Decisions:
    - Protocol over ABC: structural subtyping, any object with these methods works
    - Async in Protocol: implementations may do IO; the engine awaits exactly one call
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StateAccessBroker(Protocol):
    """Bring-your-own-state store with counted, path-scoped access."""
    async def read(self, path: str) -> Any | None: ...
    async def write(self, path: str, value: Any) -> None: ...
    async def delete(self, path: str) -> None: ...
    def active_handles(self) -> int: ...
