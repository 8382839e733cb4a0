"""Core Layer — identity contract, action model, dispatch results. No IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Persistence is reached only through Protocols (repository_protocols.py)

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
