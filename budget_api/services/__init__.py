"""Services Layer — project persistence and currency conversion.

Invariants:
    - Services raise typed errors from core/errors; routes never translate them
    - External lookups reached only through core/repository_protocols
"""
