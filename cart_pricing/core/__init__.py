"""Core Layer - pure pricing logic, no IO, no async, no HTTP.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or config
    - All functions are pure and deterministic (no clock reads without an injected `now`)

Design Decisions:
    - Functional core separated from imperative shell: money math is testable without mocks
"""
