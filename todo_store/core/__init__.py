"""Core Layer: identity types, error hierarchy and repository contracts.

Invariants:
    - No module in core/ imports from db/, models/, infrastructure/ or repositories/
    - Nothing here performs IO
"""
