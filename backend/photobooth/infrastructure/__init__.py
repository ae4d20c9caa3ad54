"""Infrastructure Layer — database, storage, vendor clients and logging.

Invariants:
    - Infrastructure imports only core/errors from the domain layer
    - All external calls wrapped with retry/timeout/error mapping

Design Decisions:
    - Resilient wrappers over raw clients: routes and services never see vendor exceptions
"""
