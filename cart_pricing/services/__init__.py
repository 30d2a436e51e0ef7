"""Services Layer - price validation, debounced coordination, catalog-backed summaries.

Invariants:
    - Services own the suspension points (network calls); core/ stays synchronous
    - At most one validation request in flight per coordinator

Design Decisions:
    - One object per cart/session for mutable validation state (no module globals)
"""
