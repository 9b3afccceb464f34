"""Project Budget API — CRUD over project budget records and currency conversion.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

__version__ = "1.0.0"
