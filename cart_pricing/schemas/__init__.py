"""Pydantic Schemas - wire contracts with the pricing authority and the UI layer.

Invariants:
    - Schemas validate at system boundaries (pricing authority responses, API input)
    - Money crosses the wire as integer cents or fixed 2-decimal strings, never floats

Design Decisions:
    - Separate from core/: schemas are wire contracts, core types are calculation inputs
"""
