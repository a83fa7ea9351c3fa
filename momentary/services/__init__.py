"""Services Layer — the imperative shell around the lifecycle core.

Invariants:
    - Only services/ awaits the state broker or arms timers
    - One LifecycleManager per task; collaborators never shared between tasks

Design Decisions:
    - Manifestation split from the manager: construction wiring vs. lifecycle behaviour
"""
