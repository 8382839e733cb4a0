"""Infrastructure Layer — database session lifecycle and structured logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All SQLAlchemy failures surface as DatabaseError (core/errors.py)
"""
