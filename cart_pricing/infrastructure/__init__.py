"""Infrastructure Layer - pricing authority HTTP client and logging setup.

Invariants:
    - Infrastructure never imports from core/ pricing logic, only from core/errors
    - All transport failures mapped to ValidationNetworkError or CatalogLookupError
"""
