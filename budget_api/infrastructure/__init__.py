"""Infrastructure Layer — database, external service clients, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core/errors
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients (ADR: single responsibility)
"""
