"""Core Layer — error taxonomy, request validation, boundary protocols. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - Validation functions are pure and deterministic
"""
