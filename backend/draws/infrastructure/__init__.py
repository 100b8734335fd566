"""Infrastructure Layer — database, authentication and logging.

Invariants:
    - Infrastructure maps library exceptions (SQLAlchemy, PyJWT) to core.errors types
    - Nothing here decides whether a draw mutation is allowed

Design Decisions:
    - Thin wrappers over raw clients, initialized once per process by the lifespan
"""
