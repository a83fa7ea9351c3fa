"""Pydantic Schemas — value types crossing the engine boundary.

Invariants:
    - Schemas validate at system boundary (caller input, broker reads)
    - Every schema is frozen: values are never mutated after construction
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from core/: schemas are contracts, core holds the rules
"""
