"""Core Layer — pure domain logic, no IO, no async, no event loop access.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Operations, transition guards and compliance checks are deterministic

Design Decisions:
    - Functional core separated from imperative shell: the lifecycle manager
      (services/) owns the timer and the broker await, core owns the rules
"""
