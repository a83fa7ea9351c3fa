"""Infrastructure Layer — runtime adapters and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - Implementations satisfy the Protocols declared in core/

Design Decisions:
    - Thin adapters over asyncio and gc so core stays free of ambient globals
"""
