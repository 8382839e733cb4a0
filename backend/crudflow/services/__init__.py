"""Services Layer — CRUD dispatch and persistence adapters.

Invariants:
    - The dispatcher depends on the CrudService Protocol only, never on SQLAlchemy
    - Persistence adapters implement CrudService structurally (no base class)

Design Decisions:
    - One file per concern for locality (ADR: no god objects)
"""
