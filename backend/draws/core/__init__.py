"""Core Layer — pure domain rules, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (current time is passed in)

Design Decisions:
    - Functional core separated from imperative shell: services do the IO,
      core decides whether the mutation is allowed
"""
